"""
Pydantic schemas for the render orchestrator.

Includes the render request/options accepted by the service, the live status
snapshot, the terminal result record and the setup verification report.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RenderPhase = Literal["idle", "preparing", "rendering", "finalizing"]
VideoQuality = Literal["low", "medium", "high", "ultra"]

# CRF per quality preset (lower = better quality, bigger file)
QUALITY_PRESETS: dict[str, dict] = {
    "low": {"crf": 28, "description": "Low quality, small file"},
    "medium": {"crf": 23, "description": "Balanced quality"},
    "high": {"crf": 18, "description": "High quality, large file"},
    "ultra": {"crf": 15, "description": "Maximum quality, very large file"},
}


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Request Schemas ---


class RenderRequest(CamelModel):
    """Everything needed to render one news video. Immutable once built."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    video_id: str = Field(..., min_length=1, description="Unique video identifier")
    title: str = Field(..., description="Headline / YouTube title")
    script: str = Field(..., description="Full narration script")
    audio_path: str = Field(..., description="Narration audio, local path or URL")
    image_path: str = Field("", description="Hero image, local path or URL")
    audio_duration: float = Field(
        ...,
        description="Narration length in seconds; the whole timeline is derived from it",
    )
    topic: str = Field("", description="Main topic")
    news_source: str = Field("", description="Source outlet of the news item")
    company: Optional[str] = Field(None, description="Company mentioned in the news")
    news_type: Optional[str] = Field(None, description="News classification")
    hook: Optional[str] = Field(None, description="Explicit hook text")
    body: Optional[str] = Field(None, description="Explicit main body text")
    cta: Optional[str] = Field(None, description="Explicit call to action")
    opinion: Optional[str] = Field(None, description="Explicit impact/opinion text")


class RenderOptions(CamelModel):
    """Per-call render options. Service defaults apply to unset fields."""

    use_preview: bool = Field(False, description="Render the preview composition")
    output_dir: Optional[Path] = Field(None, description="Override output directory")
    output_file_name: Optional[str] = Field(
        None, description="Output file name without extension"
    )
    quality: Optional[VideoQuality] = Field(None, description="Quality preset (sets CRF)")
    timeout_ms: Optional[int] = Field(None, gt=0, description="Override render timeout")
    retries: Optional[int] = Field(None, ge=1, description="Override attempt count")


# --- Status / Result Schemas ---


class RenderStatus(CamelModel):
    """Progress snapshot of the orchestrator."""

    is_rendering: bool = False
    current_video_id: Optional[str] = None
    progress: float = Field(0, ge=0, le=100)
    phase: RenderPhase = "idle"
    message: str = "Ready"
    elapsed_time: float = Field(0, description="Elapsed milliseconds of the last run")


class RenderMetadata(CamelModel):
    """Technical details of a render attempt."""

    composition_id: str
    resolution: str
    fps: int
    codec: str
    crf: int
    total_frames: int
    started_at: datetime
    completed_at: datetime
    attempts: int


class RenderResult(CamelModel):
    """Terminal output of render_video, produced exactly once per call."""

    success: bool
    video_path: str = ""
    duration_seconds: float = 0
    file_size_bytes: int = 0
    file_size_formatted: str = "0 Bytes"
    render_time_seconds: float = 0
    metadata: RenderMetadata
    error: Optional[str] = None


class SetupVerificationResult(CamelModel):
    """Pre-flight report on the render engine installation."""

    is_valid: bool
    remotion_installed: bool = False
    ffmpeg_available: bool = False
    remotion_dir_exists: bool = False
    composition_exists: bool = False
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class RenderJobRequest(CamelModel):
    """Body of POST /api/render."""

    request: RenderRequest
    options: Optional[RenderOptions] = None


class RenderAcceptedResponse(CamelModel):
    """Response when a render was started (202 Accepted)."""

    video_id: str
    status: Literal["accepted"] = "accepted"


class RenderConflictResponse(BaseModel):
    """Response when the service is already rendering (409 Conflict)."""

    error: Literal["conflict"] = "conflict"
    message: str = "Render already in progress"
    current_video_id: Optional[str] = None
