"""Commerce domain: catalogue, carts, orders, wishlists and payment capture.

A single Protean domain so that a cart or order write and the product stock
it depends on share one unit of work.
"""

import structlog
from protean.domain import Domain

commerce = Domain(name="commerce")

logger = structlog.get_logger(__name__)
