# backend/beautibook/main.py
"""
BeautiBook booking API.

Mounts the hold and availability routers under /api/v1 and wires the
problem-details error handlers.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import Base, engine
from .errors import register_error_handlers
from .routes.v1 import availability as availability_v1
from .routes.v1 import health as health_v1
from .routes.v1 import holds as holds_v1
from .routes.v1 import prometheus as prometheus_v1

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(
        f"Hold TTL: {settings.hold_ttl_minutes}m, slot interval: {settings.slot_interval_minutes}m, "
        f"business timezone: {settings.business_timezone}"
    )

    if settings.is_sqlite and settings.environment == "local" and not settings.is_testing:
        # Local SQLite has no migration step
        Base.metadata.create_all(bind=engine)

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=app_lifespan,
    )
    register_error_handlers(app)

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(holds_v1.router, prefix="/holds")
    api_v1.include_router(availability_v1.router, prefix="/availability")
    api_v1.include_router(health_v1.router, prefix="/health")
    api_v1.include_router(prometheus_v1.router, prefix="/metrics")
    app.include_router(api_v1)
    return app


fastapi_app = create_app()
app = fastapi_app
