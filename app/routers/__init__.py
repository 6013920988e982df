"""API routers for the Nos Limites backend."""
from fastapi import APIRouter

from . import catalog, health, notifications, profile, relationships


def get_api_router() -> APIRouter:
    """Return the root API router."""

    api_router = APIRouter()
    api_router.include_router(health.router)
    api_router.include_router(catalog.router)
    api_router.include_router(relationships.router)
    api_router.include_router(notifications.router)
    api_router.include_router(profile.router)
    return api_router
