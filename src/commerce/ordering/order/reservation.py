"""Stock reservation for orders.

Both directions run inside the caller's unit of work, so the product
writes commit or roll back together with the order.
"""

from protean.utils.globals import current_domain

from commerce.catalogue.product import Product
from commerce.catalogue.store import CatalogStore, ProductSnapshot
from commerce.domain import logger


def reserve_stock(quantities, store: CatalogStore | None = None):
    """Decrement stock for ``{product_id: quantity}`` and return the snapshots read.

    Every product is checked before any is decremented, so a shortage on
    the last line leaves the earlier products untouched.
    """
    store = store or CatalogStore()
    products = {product_id: store.load(product_id) for product_id in quantities}
    for product_id, quantity in quantities.items():
        products[product_id].ensure_stock(quantity)

    repo = current_domain.repository_for(Product)
    snapshots = {}
    for product_id, quantity in quantities.items():
        product = products[product_id]
        snapshots[product_id] = ProductSnapshot.of(product)
        product.reserve_stock(quantity)
        repo.add(product)
    return snapshots


def release_order_stock(order):
    """Return an order's reserved stock to the catalogue, at most once."""
    if not order.mark_stock_released():
        return

    repo = current_domain.repository_for(Product)
    for product_id, quantity in order.reserved_quantities().items():
        product = repo.get(product_id)
        product.release_stock(quantity)
        repo.add(product)

    logger.info("order_stock_released", order_id=str(order.id), user_id=str(order.user_id))
