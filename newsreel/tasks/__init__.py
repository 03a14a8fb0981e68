"""
Render engine subprocess execution.
"""

from .remotion_runner import (
    RenderError,
    RenderTimeout,
    build_render_command,
    check_ffmpeg_available,
    run_render_with_progress,
)

__all__ = [
    "RenderError",
    "RenderTimeout",
    "build_render_command",
    "check_ffmpeg_available",
    "run_render_with_progress",
]
