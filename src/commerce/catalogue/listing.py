"""Product listing: add, update and delete products, attach and detach images.

Sellers manage their own listings. Admins may act for any seller.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.exceptions import ForbiddenError
from commerce.principal import MERCHANT_ROLES, Role, ensure_owner


def _authorize(actor_id, actor_role, seller_id):
    if actor_role not in MERCHANT_ROLES:
        raise ForbiddenError({"role": [f"Role '{actor_role}' cannot manage products"]})
    if actor_role != Role.ADMIN.value:
        ensure_owner(actor_id, seller_id, "product")


@commerce.command(part_of="Product")
class AddProduct:
    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=20)
    seller_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    description: Text()
    brand: String(max_length=100)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(min_value=0.0)
    stock: Integer(required=True, min_value=0)
    is_active: Boolean(default=True)


@commerce.command(part_of="Product")
class UpdateProduct:
    """Partial update. Fields left as None are not changed; ``clear_discount`` removes the discount."""

    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=20)
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    brand: String(max_length=100)
    price: Float(min_value=0.0)
    discount_price: Float(min_value=0.0)
    stock: Integer(min_value=0)
    is_active: Boolean()
    clear_discount: Boolean(default=False)


@commerce.command(part_of="Product")
class DeleteProduct:
    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=20)
    product_id: Identifier(required=True)


@commerce.command(part_of="Product")
class RecordProductImage:
    """Record an image that has already been uploaded to the image store."""

    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=20)
    product_id: Identifier(required=True)
    public_id: String(required=True, max_length=255)
    url: String(required=True, max_length=500)


@commerce.command(part_of="Product")
class RemoveProductImage:
    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=20)
    product_id: Identifier(required=True)
    image_id: Identifier(required=True)


@commerce.command_handler(part_of=Product)
class ProductListingHandler:
    def _load_for(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if product.is_deleted:
            raise ObjectNotFoundError({"product": [f"Product {command.product_id} not found"]})
        _authorize(command.actor_id, command.actor_role, product.seller_id)
        return repo, product

    @handle(AddProduct)
    def add_product(self, command):
        _authorize(command.actor_id, command.actor_role, command.seller_id)

        product = Product.create(
            seller_id=command.seller_id,
            name=command.name,
            price=command.price,
            stock=command.stock,
            discount_price=command.discount_price,
            description=command.description,
            brand=command.brand,
            is_active=command.is_active,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo, product = self._load_for(command)

        changes = {
            field: getattr(command, field)
            for field in ("name", "description", "brand", "price", "discount_price", "stock", "is_active")
            if getattr(command, field) is not None
        }
        if command.clear_discount:
            if command.discount_price is not None:
                raise ValidationError({"discount_price": ["Cannot set and clear the discount in one update"]})
            changes["discount_price"] = None
        product.update_details(**changes)
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo, product = self._load_for(command)
        product.soft_delete()
        repo.add(product)

    @handle(RecordProductImage)
    def record_image(self, command):
        repo, product = self._load_for(command)
        image = product.add_image(public_id=command.public_id, url=command.url)
        repo.add(product)
        return str(image.id)

    @handle(RemoveProductImage)
    def remove_image(self, command):
        repo, product = self._load_for(command)
        public_id = product.remove_image(command.image_id)
        repo.add(product)
        return public_id
