"""Product aggregate root with Review and ProductImage entities.

The product is the Catalog Store's unit of truth for price and stock. Carts
re-read it on every read and write; orders read it once, at creation, and
freeze what they saw.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from commerce.catalogue.events import (
    ProductDeleted,
    ProductDetailsUpdated,
    ProductImageAdded,
    ProductImageRemoved,
    ProductListed,
    ProductPriceChanged,
    ReviewAdded,
    ReviewRemoved,
    ReviewUpdated,
    StockReleased,
    StockReserved,
)
from commerce.domain import commerce
from commerce.exceptions import ConflictError, ForbiddenError, InsufficientStockError

MAX_IMAGES = 4
MIN_RATING = 0
MAX_RATING = 5

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def _validate_review(rating, comment):
    if not isinstance(rating, int) or isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError({"rating": [f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}"]})
    if comment is None or not str(comment).strip():
        raise ValidationError({"comment": ["Comment cannot be empty"]})


@commerce.entity(part_of="Product")
class Review:
    user_id: Identifier(required=True)
    rating: Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    comment: Text(required=True)
    created_at: DateTime()
    updated_at: DateTime()


@commerce.entity(part_of="Product")
class ProductImage:
    """An image hosted by the image store, referenced by its public id."""

    public_id: String(required=True, max_length=255)
    url: String(required=True, max_length=500)


@commerce.aggregate
class Product:
    name: String(required=True, max_length=255)
    description: Text()
    brand: String(max_length=100)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(min_value=0.0)
    stock: Integer(required=True, min_value=0)
    seller_id: Identifier(required=True)
    rating: Float(default=0.0, min_value=0.0, max_value=float(MAX_RATING))
    reviews: HasMany(Review)
    images: HasMany(ProductImage)
    is_active: Boolean(default=True)
    is_deleted: Boolean(default=False)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def discount_must_be_below_price(self):
        if self.discount_price is not None and self.discount_price >= self.price:
            raise ValidationError({"discount_price": ["Discount price must be less than regular price"]})

    @invariant.post
    def name_cannot_be_blank(self):
        if self.name is not None and not self.name.strip():
            raise ValidationError({"name": ["Name cannot be empty"]})

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.images) > MAX_IMAGES:
            raise ValidationError({"images": [f"Maximum {MAX_IMAGES} images allowed"]})

    @property
    def is_available(self) -> bool:
        """Listed, not withdrawn by its seller and not soft-deleted."""
        return bool(self.is_active) and not self.is_deleted

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        seller_id,
        name,
        price,
        stock,
        discount_price=None,
        description=None,
        brand=None,
        is_active=True,
    ):
        now = datetime.now(UTC)
        product = cls(
            seller_id=seller_id,
            name=name.strip() if isinstance(name, str) else name,
            price=price,
            stock=stock,
            discount_price=discount_price,
            description=description,
            brand=brand,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                seller_id=str(seller_id),
                name=product.name,
                price=price,
                stock=stock,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Listing details
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=_UNSET,
        description=_UNSET,
        brand=_UNSET,
        price=_UNSET,
        discount_price=_UNSET,
        stock=_UNSET,
        is_active=_UNSET,
    ):
        """Apply a partial update. Price and discount are validated together."""
        previous_price = self.price

        with atomic_change(self):
            if name is not _UNSET:
                self.name = name.strip() if isinstance(name, str) else name
            if description is not _UNSET:
                self.description = description
            if brand is not _UNSET:
                self.brand = brand
            if price is not _UNSET:
                self.price = price
            if discount_price is not _UNSET:
                self.discount_price = discount_price
            if stock is not _UNSET:
                self.stock = stock
            if is_active is not _UNSET:
                self.is_active = is_active
            self.updated_at = datetime.now(UTC)

        self.raise_(ProductDetailsUpdated(product_id=str(self.id), name=self.name))
        if self.price != previous_price:
            self.raise_(
                ProductPriceChanged(
                    product_id=str(self.id),
                    previous_price=previous_price,
                    new_price=self.price,
                )
            )

    def soft_delete(self):
        """Hide the product. The record stays for orders that reference it."""
        if self.is_deleted:
            raise ObjectNotFoundError({"product": [f"Product {self.id} not found"]})

        self.is_deleted = True
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductDeleted(product_id=str(self.id), seller_id=str(self.seller_id)))

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def ensure_stock(self, quantity):
        if quantity > self.stock:
            raise InsufficientStockError(
                {"stock": [f"Insufficient stock for product {self.name}: requested {quantity}, available {self.stock}"]}
            )

    def reserve_stock(self, quantity):
        self.ensure_stock(quantity)
        self.stock -= quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReserved(
                product_id=str(self.id),
                quantity=quantity,
                remaining_stock=self.stock,
            )
        )

    def release_stock(self, quantity):
        self.stock += quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReleased(
                product_id=str(self.id),
                quantity=quantity,
                remaining_stock=self.stock,
            )
        )

    # -------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------
    def add_image(self, public_id, url):
        if len(self.images) >= MAX_IMAGES:
            raise ValidationError({"images": [f"Maximum {MAX_IMAGES} images allowed"]})

        image = ProductImage(public_id=public_id, url=url)
        self.add_images(image)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductImageAdded(
                product_id=str(self.id),
                image_id=str(image.id),
                public_id=public_id,
            )
        )
        return image

    def remove_image(self, image_id):
        """Remove an image record and return its public id for remote cleanup."""
        image = next((i for i in self.images if str(i.id) == str(image_id)), None)
        if image is None:
            raise ObjectNotFoundError({"image": [f"Image {image_id} not found"]})

        public_id = image.public_id
        self.remove_images(image)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductImageRemoved(
                product_id=str(self.id),
                image_id=str(image_id),
                public_id=public_id,
            )
        )
        return public_id

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def _recalculate_rating(self):
        total = sum(review.rating for review in self.reviews)
        self.rating = total / len(self.reviews) if self.reviews else 0.0

    def _find_review(self, review_id):
        review = next((r for r in self.reviews if str(r.id) == str(review_id)), None)
        if review is None:
            raise ObjectNotFoundError({"review": [f"Review {review_id} not found"]})
        return review

    def add_review(self, user_id, rating, comment):
        """Add a review. Each user may review a product once."""
        _validate_review(rating, comment)
        if any(str(r.user_id) == str(user_id) for r in self.reviews):
            raise ConflictError({"review": ["User already reviewed this product"]})

        now = datetime.now(UTC)
        review = Review(
            user_id=user_id,
            rating=rating,
            comment=comment.strip(),
            created_at=now,
            updated_at=now,
        )
        with atomic_change(self):
            self.add_reviews(review)
            self._recalculate_rating()
            self.updated_at = now

        self.raise_(
            ReviewAdded(
                product_id=str(self.id),
                review_id=str(review.id),
                user_id=str(user_id),
                rating=rating,
                new_product_rating=self.rating,
            )
        )
        return review

    def update_review(self, review_id, user_id, rating=_UNSET, comment=_UNSET):
        review = self._find_review(review_id)
        if str(review.user_id) != str(user_id):
            raise ForbiddenError({"review": ["Not authorized to update this review"]})

        new_rating = review.rating if rating is _UNSET else rating
        new_comment = review.comment if comment is _UNSET else comment
        _validate_review(new_rating, new_comment)

        with atomic_change(self):
            review.rating = new_rating
            review.comment = new_comment.strip()
            review.updated_at = datetime.now(UTC)
            self._recalculate_rating()
            self.updated_at = review.updated_at

        self.raise_(
            ReviewUpdated(
                product_id=str(self.id),
                review_id=str(review.id),
                new_product_rating=self.rating,
            )
        )

    def remove_review(self, review_id, user_id, moderator=False):
        review = self._find_review(review_id)
        if not moderator and str(review.user_id) != str(user_id):
            raise ForbiddenError({"review": ["Not authorized to delete this review"]})

        with atomic_change(self):
            self.remove_reviews(review)
            self._recalculate_rating()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ReviewRemoved(
                product_id=str(self.id),
                review_id=str(review_id),
                new_product_rating=self.rating,
            )
        )
