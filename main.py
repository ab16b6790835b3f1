"""
Main FastAPI application - Toolhouse Connector.
"""

import os
import structlog
from fastapi import FastAPI

from toolhouse_connector.api.v1 import router as api_v1_router
from toolhouse_connector.core.startup import lifespan

# Configure structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(),
)

logger = structlog.get_logger()

# ============================================================================
# FastAPI Application
# ============================================================================

app = FastAPI(
    title="Toolhouse Connector",
    description="Start and continue Toolhouse agent conversations; classify run callbacks",
    version="1.0.0",
    lifespan=lifespan,
)

# ============================================================================
# Mount API Routes
# ============================================================================

# Include all v1 API routes
app.include_router(api_v1_router)

# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    host = os.getenv("HOST", "0.0.0.0")
    reload = os.getenv("RELOAD", "false").lower() == "true"

    logger.info(
        "starting_server",
        host=host,
        port=port,
        reload=reload
    )

    uvicorn.run(
        "main:app" if reload else app,
        host=host,
        port=port,
        reload=reload
    )
