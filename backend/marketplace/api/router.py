"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from marketplace.api.routes import auth, events, organizer, admin, upload
from marketplace.core.config import get_settings

api_router = APIRouter(prefix=get_settings().API_PREFIX)
api_router.include_router(auth.router)
api_router.include_router(events.router)
api_router.include_router(organizer.router)
api_router.include_router(admin.router)
api_router.include_router(upload.router)
