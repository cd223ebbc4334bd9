"""Product reviews: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from commerce.catalogue.product import _UNSET, Product
from commerce.catalogue.store import CatalogStore
from commerce.domain import commerce
from commerce.principal import Role


@commerce.command(part_of="Product")
class AddReview:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    comment: Text(required=True)


@commerce.command(part_of="Product")
class UpdateReview:
    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer()
    comment: Text()


@commerce.command(part_of="Product")
class DeleteReview:
    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    actor_role: String(max_length=20, default=Role.CUSTOMER.value)


@commerce.command_handler(part_of=Product)
class ReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        product = CatalogStore().load(command.product_id)
        review = product.add_review(
            user_id=command.user_id,
            rating=command.rating,
            comment=command.comment,
        )
        current_domain.repository_for(Product).add(product)
        return str(review.id)

    @handle(UpdateReview)
    def update_review(self, command):
        product = CatalogStore().load(command.product_id)
        product.update_review(
            command.review_id,
            command.user_id,
            rating=_UNSET if command.rating is None else command.rating,
            comment=_UNSET if command.comment is None else command.comment,
        )
        current_domain.repository_for(Product).add(product)

    @handle(DeleteReview)
    def delete_review(self, command):
        product = CatalogStore().load(command.product_id)
        product.remove_review(
            command.review_id,
            command.user_id,
            moderator=command.actor_role == Role.ADMIN.value,
        )
        current_domain.repository_for(Product).add(product)
