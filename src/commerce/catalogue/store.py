"""Catalog Store: the read interface ordering uses to see products.

Handlers call it inside their unit of work, so the values returned are the
ones the write will be validated against.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.catalogue.product import Product


@dataclass(frozen=True)
class ProductSnapshot:
    product_id: str
    name: str
    price: float
    stock: int
    seller_id: str
    is_active: bool
    is_deleted: bool

    @property
    def is_available(self) -> bool:
        return self.is_active and not self.is_deleted

    @classmethod
    def of(cls, product: Product) -> "ProductSnapshot":
        return cls(
            product_id=str(product.id),
            name=product.name,
            price=product.price,
            stock=product.stock,
            seller_id=str(product.seller_id),
            is_active=bool(product.is_active),
            is_deleted=bool(product.is_deleted),
        )


class CatalogStore:
    """Product lookups scoped to the current domain's unit of work."""

    def load(self, product_id) -> Product:
        """Return the live aggregate. Deleted products are reported as missing."""
        product = current_domain.repository_for(Product).get(product_id)
        if product.is_deleted:
            raise ObjectNotFoundError({"product": [f"Product {product_id} not found"]})
        return product

    def find(self, product_id) -> ProductSnapshot | None:
        """Snapshot of a product, or None when no record exists."""
        try:
            product = current_domain.repository_for(Product).get(product_id)
        except ObjectNotFoundError:
            return None
        return ProductSnapshot.of(product)

    def get_product(self, product_id) -> ProductSnapshot:
        """Snapshot of a product that exists and has not been deleted."""
        return ProductSnapshot.of(self.load(product_id))

    def list_active(self) -> list[Product]:
        repo = current_domain.repository_for(Product)
        return repo._dao.query.filter(is_active=True, is_deleted=False).order_by("-created_at").all().items
