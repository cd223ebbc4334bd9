"""Domain events for the Product aggregate."""

from protean.fields import Float, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Product")
class ProductListed:
    """A seller put a new product in the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True)
    stock: Integer(required=True)


@commerce.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)


@commerce.event(part_of="Product")
class ProductPriceChanged:
    """The catalogue price changed. Carts pick it up on their next read or write."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float(required=True)
    new_price: Float(required=True)


@commerce.event(part_of="Product")
class ProductDeleted:
    __version__ = 1

    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)


@commerce.event(part_of="Product")
class StockReserved:
    """Stock was taken out of the sellable pool for an order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining_stock: Integer(required=True)


@commerce.event(part_of="Product")
class StockReleased:
    """Previously reserved stock returned to the sellable pool."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining_stock: Integer(required=True)


@commerce.event(part_of="Product")
class ProductImageAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    public_id: String(required=True, max_length=255)


@commerce.event(part_of="Product")
class ProductImageRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    public_id: String(required=True, max_length=255)


@commerce.event(part_of="Product")
class ReviewAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    new_product_rating: Float(required=True)


@commerce.event(part_of="Product")
class ReviewUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    new_product_rating: Float(required=True)


@commerce.event(part_of="Product")
class ReviewRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    new_product_rating: Float(required=True)
