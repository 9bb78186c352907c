"""
StockBars Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockbars.core.config import settings
from stockbars.core.logging import configure_logging
from stockbars.api.errors import register_exception_handlers
from stockbars.api.v1 import router as api_v1_router
from stockbars.db.database import close_db, get_session_factory, init_db
from stockbars.db.repository import DailyBarRepository
from stockbars.services.cache import BarCache, close_redis, init_redis
from stockbars.services.data_ingestion import DataIngestionService, PolygonClient
from stockbars.services.query import QueryService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    await init_db()

    redis_client = await init_redis()
    if redis_client is None:
        logger.info("Redis unavailable - using in-memory cache")

    if not settings.polygon_api_key:
        logger.warning("POLYGON_API_KEY is not set; ingestion requests will be rejected upstream")

    http_session = aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=settings.polygon_timeout_seconds),
    )
    repository = DailyBarRepository(get_session_factory())
    cache = BarCache(redis_client)
    client = PolygonClient(session=http_session)

    app.state.ingestion_service = DataIngestionService(client, repository, cache)
    app.state.query_service = QueryService(repository, cache)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await http_session.close()
    await close_redis(redis_client)
    await close_db()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
    StockBars API

    - **Ingestion**: fetches daily bars from Polygon and stores them once per symbol and date
    - **Query**: serves stored bars by symbol and date, read through a Redis cache
    """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        ingestion = getattr(app.state, "ingestion_service", None)
        query = getattr(app.state, "query_service", None)
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "services": {
                "ingestion": await ingestion.health_check() if ingestion else False,
                "query": await query.health_check() if query else False,
            },
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "StockBars Backend API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
