"""Health check endpoint."""

from datetime import datetime
from fastapi import APIRouter

from toolhouse_connector.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="healthy", timestamp=datetime.now().timestamp())
