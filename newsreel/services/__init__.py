"""
Render services: timeline planning, asset staging, data contract assembly
and the render orchestrator.
"""

from .rendering import VideoRenderingService

__all__ = ["VideoRenderingService"]
