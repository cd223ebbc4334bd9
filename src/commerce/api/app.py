"""FastAPI application factory."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from commerce.api.errors import register_error_handlers
from commerce.catalogue.api import product_router
from commerce.config import Settings, get_settings
from commerce.container import build_services
from commerce.ordering.api import cart_router, order_router, seller_router, wishlist_router
from commerce.payments.api import payment_router
from commerce.utils.logging import add_context, clear_context, get_logger


def create_app(domain, settings: Settings | None = None, **overrides) -> FastAPI:
    """Build the HTTP app around an initialized ``domain``.

    ``overrides`` are passed to ``build_services`` to swap adapters in tests.
    """
    settings = settings or get_settings()
    logger = get_logger("commerce")

    app = FastAPI(
        title="Commerce API",
        description="Multi-tenant e-commerce backend: catalogue, carts, orders and payments",
    )
    app.state.services = build_services(domain, settings, logger=logger, **overrides)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context and bind request fields to log lines."""
        clear_context()
        add_context(method=request.method, path=request.url.path, user_id=request.headers.get("x-user-id"))
        with domain.domain_context():
            return await call_next(request)

    register_error_handlers(app)

    for router in (product_router, cart_router, order_router, seller_router, wishlist_router, payment_router):
        app.include_router(router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": domain.name, "environment": settings.environment})

    return app
