"""API v1 route modules."""

from toolhouse_connector.api.v1.routes.toolhouse import router as toolhouse_router
from toolhouse_connector.api.v1.routes.webhook import router as webhook_router
from toolhouse_connector.api.v1.routes.health import router as health_router

__all__ = [
    'toolhouse_router',
    'webhook_router',
    'health_router',
]
