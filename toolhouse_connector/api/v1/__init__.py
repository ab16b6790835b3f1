"""API v1 module - consolidated router for all endpoints."""

from fastapi import APIRouter
from toolhouse_connector.api.v1.routes import (
    toolhouse_router,
    webhook_router,
    health_router,
)

# Create main v1 router
router = APIRouter()

# Include all route modules
router.include_router(health_router)
router.include_router(toolhouse_router)
router.include_router(webhook_router)

__all__ = ['router']
