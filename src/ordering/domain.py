"""Ordering bounded context: Shopping Cart, Checkout and Order lifecycle.

Carts hold price snapshots per shopper, checkout turns a verified payment
into an Order, and the Order aggregate guards what may still change.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
ordering = Domain(name="ordering")
