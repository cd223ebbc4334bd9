"""Pydantic request/response schemas for the catalogue API.

These are the external contracts. Handlers translate them into Protean
commands; range checks live in the domain so that every violation is a
400 with the same error shape.
"""

from datetime import datetime

from pydantic import BaseModel


class CreateProductRequest(BaseModel):
    name: str
    price: float
    stock: int
    description: str | None = None
    brand: str | None = None
    discount_price: float | None = None
    is_active: bool = True
    seller_id: str | None = None  # Admins list on behalf of a seller

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Trail Running Shoe",
                    "price": 100.0,
                    "stock": 5,
                    "brand": "Stride",
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    brand: str | None = None
    price: float | None = None
    discount_price: float | None = None
    stock: int | None = None
    is_active: bool | None = None
    clear_discount: bool = False


class UploadImageRequest(BaseModel):
    filename: str
    content_base64: str


class AddReviewRequest(BaseModel):
    rating: int
    comment: str


class UpdateReviewRequest(BaseModel):
    rating: int | None = None
    comment: str | None = None


class ImageSchema(BaseModel):
    image_id: str
    public_id: str
    url: str


class ReviewSchema(BaseModel):
    review_id: str
    user_id: str
    rating: int
    comment: str
    created_at: datetime | None = None


class ProductResponse(BaseModel):
    product_id: str
    seller_id: str
    name: str
    description: str | None = None
    brand: str | None = None
    price: float
    discount_price: float | None = None
    stock: int
    rating: float
    is_active: bool
    images: list[ImageSchema] = []
    reviews: list[ReviewSchema] = []

    @classmethod
    def of(cls, product) -> "ProductResponse":
        return cls(
            product_id=str(product.id),
            seller_id=str(product.seller_id),
            name=product.name,
            description=product.description,
            brand=product.brand,
            price=product.price,
            discount_price=product.discount_price,
            stock=product.stock,
            rating=product.rating or 0.0,
            is_active=bool(product.is_active),
            images=[ImageSchema(image_id=str(i.id), public_id=i.public_id, url=i.url) for i in product.images],
            reviews=[
                ReviewSchema(
                    review_id=str(r.id),
                    user_id=str(r.user_id),
                    rating=r.rating,
                    comment=r.comment,
                    created_at=r.created_at,
                )
                for r in product.reviews
            ],
        )


class ProductIdResponse(BaseModel):
    product_id: str


class ImageIdResponse(BaseModel):
    image_id: str


class ReviewIdResponse(BaseModel):
    review_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
