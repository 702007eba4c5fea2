"""Loading and saving checkout sessions.

A session that has not started checking out gets a fresh wizard on the
shipping step; it is only stored once a command changes it.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.checkout.checkout import CheckoutSession


def load_checkout(session_id) -> CheckoutSession:
    try:
        return current_domain.repository_for(CheckoutSession).get(str(session_id))
    except ObjectNotFoundError:
        return CheckoutSession.create(session_id=str(session_id))


def save_checkout(checkout: CheckoutSession) -> None:
    current_domain.repository_for(CheckoutSession).add(checkout)
