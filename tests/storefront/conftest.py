import pytest
from protean.integrations.pytest import DomainFixture
from storefront.order.service import reset_order_service
from storefront.storage import reset_store, set_store
from storefront.storage.memory_adapter import MemoryStore


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture()
def store():
    """A fresh key-value store installed for the duration of one test."""
    return MemoryStore()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed, store):
    set_store(store)
    reset_order_service()

    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()

    reset_order_service()
    reset_store()
