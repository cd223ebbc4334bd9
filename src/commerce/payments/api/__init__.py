"""Payments API package."""

from commerce.payments.api.routes import payment_router

__all__ = ["payment_router"]
