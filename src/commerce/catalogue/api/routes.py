"""FastAPI endpoints for the catalogue: products, images and reviews."""

import base64
import binascii

from fastapi import APIRouter, Depends
from protean.exceptions import ValidationError

from commerce.api.dependencies import get_principal, get_services
from commerce.catalogue.api.schemas import (
    AddReviewRequest,
    CreateProductRequest,
    ImageIdResponse,
    ProductIdResponse,
    ProductResponse,
    ReviewIdResponse,
    StatusResponse,
    UpdateProductRequest,
    UpdateReviewRequest,
    UploadImageRequest,
)
from commerce.catalogue.listing import AddProduct, DeleteProduct, UpdateProduct
from commerce.catalogue.reviews import AddReview, DeleteReview, UpdateReview
from commerce.catalogue.store import CatalogStore
from commerce.container import Services
from commerce.principal import Principal

product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
async def list_products(services: Services = Depends(get_services)) -> list[ProductResponse]:
    products = services.manager.query(CatalogStore().list_active)
    return [ProductResponse.of(product) for product in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, services: Services = Depends(get_services)) -> ProductResponse:
    return ProductResponse.of(services.manager.query(CatalogStore().load, product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(
    body: CreateProductRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> ProductIdResponse:
    command = AddProduct(
        actor_id=principal.user_id,
        actor_role=principal.role,
        seller_id=body.seller_id or principal.user_id,
        name=body.name,
        description=body.description,
        brand=body.brand,
        price=body.price,
        discount_price=body.discount_price,
        stock=body.stock,
        is_active=body.is_active,
    )
    return ProductIdResponse(product_id=services.manager.execute(command))


@product_router.patch("/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    command = UpdateProduct(
        actor_id=principal.user_id,
        actor_role=principal.role,
        product_id=product_id,
        **body.model_dump(exclude_none=True),
    )
    services.manager.execute(command)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(
    product_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    services.manager.execute(
        DeleteProduct(actor_id=principal.user_id, actor_role=principal.role, product_id=product_id)
    )
    return StatusResponse()


# --- Images ---


@product_router.post("/{product_id}/images", status_code=201, response_model=ImageIdResponse)
def upload_image(
    product_id: str,
    body: UploadImageRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> ImageIdResponse:
    try:
        content = base64.b64decode(body.content_base64, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError({"content_base64": ["Image content must be base64 encoded"]}) from None

    image_id = services.images.attach(principal, product_id, body.filename, content)
    return ImageIdResponse(image_id=image_id)


@product_router.delete("/{product_id}/images/{image_id}", response_model=StatusResponse)
def remove_image(
    product_id: str,
    image_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    services.images.remove(principal, product_id, image_id)
    return StatusResponse()


# --- Reviews ---


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewIdResponse)
async def add_review(
    product_id: str,
    body: AddReviewRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> ReviewIdResponse:
    command = AddReview(product_id=product_id, user_id=principal.user_id, rating=body.rating, comment=body.comment)
    return ReviewIdResponse(review_id=services.manager.execute(command))


@product_router.patch("/{product_id}/reviews/{review_id}", response_model=StatusResponse)
async def update_review(
    product_id: str,
    review_id: str,
    body: UpdateReviewRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    command = UpdateReview(
        product_id=product_id,
        review_id=review_id,
        user_id=principal.user_id,
        rating=body.rating,
        comment=body.comment,
    )
    services.manager.execute(command)
    return StatusResponse()


@product_router.delete("/{product_id}/reviews/{review_id}", response_model=StatusResponse)
async def delete_review(
    product_id: str,
    review_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    command = DeleteReview(
        product_id=product_id,
        review_id=review_id,
        user_id=principal.user_id,
        actor_role=principal.role,
    )
    services.manager.execute(command)
    return StatusResponse()
