"""
CourtSync Admin Console - Main Application Entry Point

Back end for the court-booking staff console:
- Live views over the booking store, pushed over WebSockets
- Approve/decline event requests, accept/reject cancellations
- Structured logging with request correlation
- Prometheus metrics for subscriptions and admin actions
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from courtsync.core.config import get_settings
from courtsync.core.logging import setup_logging, get_logger
from courtsync.core.metrics import metrics_endpoint
from courtsync.api.router import api_router
from courtsync.api.middleware import RequestLoggingMiddleware
from courtsync.infrastructure.redis_client import close_redis
from courtsync.services.seed import seed_demo_data
from courtsync.services.session_service import get_session_registry
from courtsync.services.store_factory import get_document_store, close_document_store

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
        store=settings.STORE_BACKEND,
    )

    store = get_document_store()
    if settings.SEED_DEMO_DATA:
        await seed_demo_data(store)

    yield

    # Cleanup
    get_session_registry().clear()
    await close_document_store()
    if settings.STORE_BACKEND == "redis":
        await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Staff console for court occupancy, event requests and cancellations",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "store": settings.STORE_BACKEND,
    }


@app.get("/metrics", tags=["Health"])
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
