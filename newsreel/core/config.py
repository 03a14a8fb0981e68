"""
Render Configuration

Settings class using pydantic-settings for environment variable loading.
Defines video specs, render engine paths and retry/timeout policy.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CTA = "Síguenos para más noticias de IA"


class Settings(BaseSettings):
    """
    Render settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For example, MAX_RETRIES can be set via MAX_RETRIES env var.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="newsreel render", description="Application name")
    version: str = Field(default="0.1.0", description="API version")

    # Paths
    working_dir: Path = Field(
        default=Path("remotion-app"),
        description="Root directory of the render engine project",
    )
    output_dir: Path = Field(
        default=Path("output/videos"),
        description="Directory for rendered videos",
    )
    staging_dir: Path = Field(
        default=Path("remotion-app/public"),
        description="Engine-accessible directory for staged assets and data.json",
    )
    temp_dir: Path = Field(
        default=Path("temp/video-assets"),
        description="Scratch directory for intermediate files",
    )

    # Video specs (vertical 9:16 Shorts)
    fps: int = Field(default=30, gt=0, description="Frames per second")
    width: int = Field(default=1080, gt=0, description="Output width in pixels")
    height: int = Field(default=1920, gt=0, description="Output height in pixels")
    codec: str = Field(default="h264", description="Video codec")
    pixel_format: str = Field(default="yuv420p", description="Pixel format")
    crf: int = Field(default=18, ge=0, le=51, description="Default CRF (lower = better quality)")
    max_duration_seconds: float = Field(
        default=58,
        description="Longest timeline accepted without a warning (Shorts limit)",
    )

    # Render engine
    engine_command: List[str] = Field(
        default_factory=lambda: ["npx", "remotion", "render"],
        description="Command prefix used to invoke the render engine CLI",
    )
    composition_id: str = Field(default="AINewsShort", description="Production composition")
    preview_composition_id: str = Field(
        default="AINewsShort-Preview",
        description="Preview composition",
    )
    gpu_enabled: bool = Field(default=True, description="Pass --gl=angle to the engine")
    concurrency: Optional[int] = Field(
        default=None,
        description="Engine worker concurrency (None = engine default)",
    )

    # Retry / timeout policy
    max_retries: int = Field(default=2, ge=1, description="Render attempts per call")
    retry_delay_ms: int = Field(default=5000, ge=0, description="Delay between attempts")
    timeout_ms: int = Field(
        default=300_000,
        gt=0,
        description="Wall-clock limit for a single engine invocation",
    )
    download_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout for fetching remote assets",
    )

    # Content defaults
    subtitle_word_padding: int = Field(
        default=2,
        ge=0,
        description="Frames trimmed from each subtitle word end",
    )
    outro_image: str = Field(default="sintaxis-logo.png", description="Fixed outro/logo image")
    default_cta: str = Field(
        default=DEFAULT_CTA,
        description="Outro call to action when none is provided",
    )

    @property
    def data_json_path(self) -> Path:
        """Location of the data contract read by the engine."""
        return self.staging_dir / "data.json"

    @property
    def props_json_path(self) -> Path:
        """Location of the composition input props passed on the command line."""
        return self.working_dir / "props.json"

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached render settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.

    Returns:
        Settings: Render settings instance
    """
    return Settings()
