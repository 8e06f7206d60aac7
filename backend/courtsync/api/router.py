"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from courtsync.api.routes import auth, shell, views, event_requests, cancellations, stats

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(shell.router)
api_router.include_router(views.router)
api_router.include_router(event_requests.router)
api_router.include_router(cancellations.router)
api_router.include_router(stats.router)
