"""
Event Marketplace API - Main Application Entry Point

Backend for the ticketing marketplace:
- Role-specific signup and bearer-token sign-in (rate limited via Redis)
- Organizer event submission into a pending approval queue
- Admin review with race-safe pending -> approved/rejected transitions
- Public catalog of approved, published events
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from marketplace.core.config import get_settings
from marketplace.core.errors import install_exception_handlers
from marketplace.core.logging import setup_logging, get_logger
from marketplace.core.metrics import metrics_endpoint
from marketplace.api.router import api_router
from marketplace.api.middleware import RequestLoggingMiddleware
from marketplace.db.session import AsyncSessionLocal
from marketplace.infrastructure.redis_client import get_redis, close_redis
from marketplace.services.auth_service import ensure_admin_account

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Sign-in rate limiting disabled")

    async with AsyncSessionLocal() as session:
        await ensure_admin_account(session)
        await session.commit()

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event marketplace API with an admin approval workflow",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

install_exception_handlers(app)

app.include_router(api_router)

Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount(settings.MEDIA_URL, StaticFiles(directory=settings.UPLOAD_DIR), name="media")


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    redis_client = await get_redis()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "rate_limiter": "redis" if redis_client else "disabled",
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
