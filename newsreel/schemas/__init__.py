"""
Pydantic schemas for render requests/results and the engine data contract.
"""

from .contract import (
    RenderDataContract,
    SectionEffects,
    SubtitleWord,
    VideoProps,
    VideoSection,
)
from .render import (
    QUALITY_PRESETS,
    RenderMetadata,
    RenderOptions,
    RenderRequest,
    RenderResult,
    RenderStatus,
    SetupVerificationResult,
)

__all__ = [
    "QUALITY_PRESETS",
    "RenderDataContract",
    "RenderMetadata",
    "RenderOptions",
    "RenderRequest",
    "RenderResult",
    "RenderStatus",
    "SectionEffects",
    "SetupVerificationResult",
    "SubtitleWord",
    "VideoProps",
    "VideoSection",
]
