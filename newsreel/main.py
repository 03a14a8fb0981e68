"""
newsreel render API

FastAPI application entry point.

Usage:
    uvicorn newsreel.main:app
"""

import logging
import sys

from fastapi import FastAPI

from .api import api_router
from .core.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

settings = get_settings()

app = FastAPI(
    title="newsreel render API",
    description="Render orchestration for automated news shorts",
    version=settings.version,
)

app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}
