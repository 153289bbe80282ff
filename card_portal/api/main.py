"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from card_portal.api.errors import register_exception_handlers
from card_portal.api.middleware import RequestIDMiddleware, MetricsMiddleware
from card_portal.api.v1 import admin, auth, customer, shop, transactions
from card_portal.infrastructure.database.models import Base
from card_portal.infrastructure.database.session import engine
from card_portal.infrastructure.observability.logging import setup_logging
from card_portal.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Session store is a single table; no migrations
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Card Portal Gateway",
        description="Customer and admin portal in front of the card-management API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(customer.router, prefix="/v1", tags=["customer"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(shop.router, prefix="/v1", tags=["shop"])
    app.include_router(admin.router, prefix="/v1", tags=["admin"])

    return app


app = create_app()
