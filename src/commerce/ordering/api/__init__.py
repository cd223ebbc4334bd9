"""Ordering API package."""

from commerce.ordering.api.routes import cart_router, order_router, seller_router, wishlist_router

__all__ = ["cart_router", "order_router", "seller_router", "wishlist_router"]
