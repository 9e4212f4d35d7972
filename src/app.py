"""Storefront FastAPI application.

Cart and order endpoints over the ordering core, plus single-product lookup.
Settings are read from the environment once, when the module-level app is
built; tests build their own app with ``create_app(settings, storefront)``.
Each request under a domain prefix runs inside the ordering domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import time
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog.api import product_router
from catalog.data.products import seed_catalogue
from ordering.api.errors import register_exception_handlers
from ordering.api.routes import cart_router, order_router
from ordering.config import Settings
from ordering.storefront import Storefront
from ordering.utils.logging import add_context, clear_context, configure_logging

logger = structlog.get_logger(__name__)

_DOMAIN_PREFIXES = ("/cart", "/orders", "/products")


def create_app(settings: Settings | None = None, storefront: Storefront | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    storefront = storefront or Storefront(settings)
    if settings.seed_catalogue:
        with storefront.domain_context():
            added = seed_catalogue()
        logger.info("catalogue_seeded", products_added=added)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        storefront.close()

    app = FastAPI(
        title="Storefront API",
        description="Shopping cart and order placement",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storefront = storefront

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind request-scoped logging context for the duration of the request."""
        clear_context()
        request_id = request.headers.get("X-Request-Id") or str(uuid4())
        add_context(request_id=request_id, method=request.method, path=request.url.path)

        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        logger.debug(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        clear_context()
        return response

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context for each request under a domain prefix."""
        if request.url.path.startswith(_DOMAIN_PREFIXES):
            with storefront.domain_context():
                return await call_next(request)
        # No domain match: health check, docs
        return await call_next(request)

    register_exception_handlers(app, settings)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(product_router)

    # -----------------------------------------------------------------------
    # Health
    # -----------------------------------------------------------------------
    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "environment": settings.environment,
                "provider": storefront.provider_name,
            }
        )

    return app


app = create_app()
