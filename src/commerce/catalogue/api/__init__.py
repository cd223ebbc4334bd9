"""Catalogue API package."""

from commerce.catalogue.api.routes import product_router

__all__ = ["product_router"]
