"""
Video Rendering Service

Orchestrates one news video render:
1. Verifies the render engine installation
2. Stages audio and hero image into the engine's public directory
3. Derives word subtitles and the five timeline sections
4. Writes data.json and props.json
5. Runs the engine under a retry policy (fixed delay between attempts)
6. Verifies the output file and returns a RenderResult

State machine exposed through get_status():
    idle -> preparing -> rendering -> finalizing -> idle

One render at a time per service instance: the status record is shared by
every call on the instance. Use one instance per concurrent render.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from ..core.config import Settings, get_settings
from ..schemas.render import (
    QUALITY_PRESETS,
    RenderMetadata,
    RenderOptions,
    RenderRequest,
    RenderResult,
    RenderStatus,
    SetupVerificationResult,
)
from ..tasks.remotion_runner import (
    RenderError,
    build_render_command,
    check_ffmpeg_available,
    run_render_with_progress,
)
from .assets import AssetError, AssetStager
from .contract_builder import (
    build_data_contract,
    build_video_props,
    write_data_contract,
    write_video_props,
)
from .sections import SectionPlanningError, generate_sections
from .setup_check import SetupError, verify_remotion_setup
from .subtitles import generate_subtitles
from .timing import format_file_size, seconds_to_frames

logger = logging.getLogger(__name__)

RenderRunner = Callable[..., Awaitable[None]]

# Status progress bands (percent)
PROGRESS_RENDER_START = 50
PROGRESS_RENDER_SPAN = 40
PROGRESS_FINALIZING = 95

# Failures reported without a traceback
EXPECTED_ERRORS = (AssetError, RenderError, SectionPlanningError, SetupError)


class VideoRenderingService:
    """
    Render orchestrator.

    Usage::

        service = VideoRenderingService(get_settings())
        result = await service.render_video(request, RenderOptions(quality="high"))
        if not result.success:
            print(result.error)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        stager: Optional[AssetStager] = None,
        runner: Optional[RenderRunner] = None,
    ) -> None:
        """
        Args:
            settings: Render configuration (defaults to the cached settings)
            stager: Asset stager (defaults to one built from settings)
            runner: Coroutine running the engine command; same signature as
                run_render_with_progress
        """
        self.settings = settings or get_settings()
        self.stager = stager or AssetStager(self.settings)
        self._run_render = runner or run_render_with_progress
        self._status = RenderStatus()
        self._started = time.monotonic()

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def get_status(self) -> RenderStatus:
        """Snapshot of the current status; mutating it has no effect on the service."""
        return self._status.model_copy(deep=True)

    async def verify_remotion_setup(
        self, composition_id: Optional[str] = None
    ) -> SetupVerificationResult:
        """Run the render engine pre-flight checks."""
        ffmpeg_available = await check_ffmpeg_available()
        return verify_remotion_setup(self.settings, ffmpeg_available, composition_id)

    async def render_video(
        self,
        request: RenderRequest,
        options: Optional[RenderOptions] = None,
    ) -> RenderResult:
        """
        Render a complete video.

        Never raises: every failure is returned as a RenderResult with
        success=False and the error message.

        Args:
            request: Video content and media references
            options: Per-call overrides (quality, retries, timeout, output)

        Returns:
            RenderResult with output metadata or the last error
        """
        options = options or RenderOptions()
        settings = self.settings
        started_at = datetime.now(timezone.utc)
        self._started = time.monotonic()
        attempts = 0
        max_retries = options.retries or settings.max_retries
        composition_id = (
            settings.preview_composition_id if options.use_preview else settings.composition_id
        )
        crf = self.get_crf(options.quality)

        self._status = RenderStatus(
            is_rendering=True,
            current_video_id=request.video_id,
            progress=0,
            phase="preparing",
            message="Starting render...",
        )
        logger.info(f"Render requested for video={request.video_id} composition={composition_id}")

        try:
            setup = await self.verify_remotion_setup(composition_id)
            if not setup.is_valid:
                raise SetupError(f"Invalid render setup: {', '.join(setup.errors)}")
            logger.info("Render engine setup verified")

            output_dir = self._ensure_directories(options)

            if request.audio_duration > settings.max_duration_seconds:
                logger.warning(
                    f"Audio duration {request.audio_duration:.1f}s exceeds "
                    f"{settings.max_duration_seconds}s limit"
                )

            self._update_status(progress=10, message="Staging assets...")
            assets = await self.stager.stage(request)

            self._update_status(progress=20, message="Generating subtitles...")
            subtitles = generate_subtitles(
                request.script,
                request.audio_duration,
                settings.fps,
                settings.subtitle_word_padding,
            )
            logger.info(f"{len(subtitles)} subtitle words generated")

            self._update_status(progress=30, message="Planning sections...")
            sections = generate_sections(
                request.script,
                request.title,
                request.audio_duration,
                settings.fps,
                image=request.image_path,
                hook=request.hook,
                body=request.body,
                impact=request.opinion,
                cta=request.cta,
                default_cta=settings.default_cta,
            )
            logger.info(f"{len(sections)} sections planned")

            self._update_status(progress=40, message="Writing data contract...")
            contract = build_data_contract(request, assets, subtitles, sections, settings)
            props = build_video_props(request, assets, settings)
            props_path = Path(settings.props_json_path).resolve()

            output_name = options.output_file_name or f"video_{request.video_id}"
            output_path = (output_dir / f"{output_name}.mp4").resolve()
            cmd = build_render_command(settings, composition_id, output_path, props_path, crf)
            timeout_seconds = (options.timeout_ms or settings.timeout_ms) / 1000

            self._update_status(
                phase="rendering", progress=PROGRESS_RENDER_START, message="Rendering video..."
            )

            last_error: Optional[Exception] = None
            while attempts < max_retries:
                attempts += 1
                write_data_contract(contract, settings.data_json_path)
                write_video_props(props, props_path)
                # A file left by an earlier run must not pass the output check
                output_path.unlink(missing_ok=True)
                try:
                    await self._run_render(
                        cmd=cmd,
                        cwd=Path(settings.working_dir),
                        progress_callback=self._on_render_progress,
                        timeout_seconds=timeout_seconds,
                    )
                    self._update_status(
                        phase="finalizing",
                        progress=PROGRESS_FINALIZING,
                        message="Finalizing...",
                    )
                    if not output_path.is_file():
                        raise RenderError(f"Video file was not created: {output_path}")

                    return self._success_result(
                        request, output_path, composition_id, crf, started_at, attempts
                    )

                except RenderError as e:
                    last_error = e
                    logger.error(f"Render attempt {attempts}/{max_retries} failed: {e}")
                    if attempts < max_retries:
                        delay = settings.retry_delay_ms / 1000
                        logger.info(f"Retrying in {delay:.1f}s...")
                        self._update_status(
                            phase="rendering",
                            progress=PROGRESS_RENDER_START,
                            message=f"Retrying render ({attempts + 1}/{max_retries})...",
                        )
                        await asyncio.sleep(delay)

            raise last_error or RenderError("Render failed after all retries")

        except Exception as e:
            return self._failure_result(e, composition_id, crf, started_at, attempts)

    def get_crf(self, quality: Optional[str] = None) -> int:
        """CRF for a quality preset, or the configured default."""
        if not quality:
            return self.settings.crf
        return QUALITY_PRESETS[quality]["crf"]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_directories(self, options: RenderOptions) -> Path:
        """Create working directories; return the output directory for this call."""
        output_dir = Path(options.output_dir or self.settings.output_dir)
        dirs: List[Path] = [
            Path(self.settings.output_dir),
            Path(self.settings.temp_dir),
            Path(self.settings.staging_dir),
            output_dir,
        ]
        for directory in dirs:
            directory.mkdir(parents=True, exist_ok=True)
        return output_dir

    def _on_render_progress(self, percent: int, message: str) -> None:
        # Engine progress (0-100) maps onto the 50-90 band
        self._update_status(
            progress=PROGRESS_RENDER_START + percent * PROGRESS_RENDER_SPAN / 100,
            message=message,
        )

    def _update_status(self, **changes) -> None:
        changes.setdefault("elapsed_time", self._elapsed_seconds() * 1000)
        self._status = self._status.model_copy(update=changes)

    def _elapsed_seconds(self) -> float:
        return time.monotonic() - self._started

    def _success_result(
        self,
        request: RenderRequest,
        output_path: Path,
        composition_id: str,
        crf: int,
        started_at: datetime,
        attempts: int,
    ) -> RenderResult:
        settings = self.settings
        size = output_path.stat().st_size
        render_time = self._elapsed_seconds()

        self._update_status(
            is_rendering=False,
            progress=100,
            phase="idle",
            message="Render complete",
            elapsed_time=render_time * 1000,
        )
        logger.info(
            f"Video rendered: {output_path}, size={format_file_size(size)}, "
            f"time={render_time:.1f}s, attempts={attempts}"
        )

        return RenderResult(
            success=True,
            video_path=str(output_path),
            duration_seconds=request.audio_duration,
            file_size_bytes=size,
            file_size_formatted=format_file_size(size),
            render_time_seconds=render_time,
            metadata=RenderMetadata(
                composition_id=composition_id,
                resolution=settings.resolution,
                fps=settings.fps,
                codec=settings.codec,
                crf=crf,
                total_frames=seconds_to_frames(request.audio_duration, settings.fps),
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                attempts=attempts,
            ),
        )

    def _failure_result(
        self,
        error: Exception,
        composition_id: str,
        crf: int,
        started_at: datetime,
        attempts: int,
    ) -> RenderResult:
        settings = self.settings
        render_time = self._elapsed_seconds()
        message = str(error) or error.__class__.__name__

        self._update_status(
            is_rendering=False,
            progress=0,
            phase="idle",
            message=f"Error: {message}",
            elapsed_time=render_time * 1000,
        )
        logger.error(f"Render failed: {message}", exc_info=not isinstance(error, EXPECTED_ERRORS))

        return RenderResult(
            success=False,
            render_time_seconds=render_time,
            error=message,
            metadata=RenderMetadata(
                composition_id=composition_id,
                resolution=settings.resolution,
                fps=settings.fps,
                codec=settings.codec,
                crf=crf,
                total_frames=0,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                attempts=attempts,
            ),
        )
