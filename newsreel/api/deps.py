"""
Shared dependencies for API endpoints.
"""

from functools import lru_cache

from ..core.config import get_settings
from ..services.rendering import VideoRenderingService


@lru_cache()
def get_rendering_service() -> VideoRenderingService:
    """
    Process-wide render service.

    A single instance means a single status record, so the API only ever
    runs one render at a time.
    """
    return VideoRenderingService(get_settings())
