from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError

from dailydare.infra.config.settings import settings
from dailydare.infra.config.redis import get_redis
from dailydare.infra.database import get_database_manager
from dailydare.core.logger.logger import logger
from dailydare.core.service.dare.cache.catalog_store import DareCatalogStore
from dailydare.core.service.dare.catalog_service import DareCatalogService
from dailydare.api.router import health, dares, profile, leaderboard, feed
from dailydare.api.middleware.security.rate_limiter import EnhancedRateLimitMiddleware
from dailydare.api.middleware.logging.request_logging import RequestLoggingMiddleware
from dailydare.core.exceptions.handler import ServiceError, GlobalErrorHandler


async def seed_catalog() -> bool:
    """Top up the dare catalog when it is missing entries"""
    redis_client = await get_redis()
    return await DareCatalogService(DareCatalogStore(redis_client)).seed_dares()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="""
Daily Dare API - daily challenges, rerolls, Overtime dares and the community feed.

## Economy
- Three dares a day, one per difficulty tier
- Two free rerolls per day, then 50 points per reroll
- Extra reroll tokens can be bought with points

## Authentication
All dare endpoints require JWT Bearer token authentication.
        """,
        version=settings.APP_VERSION,
        docs_url="/",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
        max_age=600,  # 10 minutes
    )

    # Rate limiting middleware
    app.add_middleware(EnhancedRateLimitMiddleware)

    # Request logging middleware (added last so it wraps everything)
    app.add_middleware(RequestLoggingMiddleware)

    # Add centralized error handlers
    app.add_exception_handler(ServiceError, GlobalErrorHandler.service_error_handler)
    app.add_exception_handler(HTTPException, GlobalErrorHandler.http_exception_handler)
    app.add_exception_handler(RequestValidationError, GlobalErrorHandler.validation_error_handler)
    app.add_exception_handler(Exception, GlobalErrorHandler.general_exception_handler)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(dares.router, prefix="/api/v1")
    app.include_router(profile.router, prefix="/api/v1")
    app.include_router(leaderboard.router, prefix="/api/v1")
    app.include_router(feed.router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "Starting Daily Dare API",
            extra={"service": settings.APP_NAME, "version": settings.APP_VERSION}
        )

        if settings.SEED_DARES_ON_STARTUP:
            try:
                await seed_catalog()
            except Exception as e:
                logger.error(f"Failed to seed dare catalog on startup: {str(e)}")

        if settings.ACTIVITY_LOG_ENABLED:
            try:
                await get_database_manager().create_tables()
            except Exception as e:
                logger.error(f"Activity log unavailable, continuing without it: {str(e)}")

    @app.on_event("shutdown")
    async def shutdown_event():
        await get_database_manager().close()
        logger.info(
            "Shutting down Daily Dare API",
            extra={"service": settings.APP_NAME, "version": settings.APP_VERSION}
        )

    return app
