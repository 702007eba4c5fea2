"""Storefront bounded context — Shopping Cart, Checkout and Orders.

Handles the session cart (write-through to key-value storage), the four-step
checkout wizard, and order placement through the order service port.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_log_level, get_logger

# Configure logging for the application
configure_logging(level=get_log_level(), log_dir="logs", log_file_prefix="storefront")

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
