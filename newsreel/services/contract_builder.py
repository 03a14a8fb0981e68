"""
Data Contract Builder

Assembles data.json (read by the compositions at render time) and
props.json (passed to the engine CLI with --props). Building is pure; the
write_* helpers are the only functions touching the filesystem.
"""

import logging
import math
import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..core.config import Settings
from ..schemas.contract import (
    ContractAssets,
    ContractContent,
    ContractMeta,
    ContractStyle,
    PropsAudio,
    PropsConfig,
    PropsImages,
    PropsNews,
    PropsVoice,
    RenderDataContract,
    SubtitleWord,
    VideoProps,
    VideoSection,
)
from ..schemas.render import RenderRequest
from .assets import StagedAssets
from .text_extraction import extract_body, extract_hook, extract_impact
from .timing import seconds_to_frames

logger = logging.getLogger(__name__)

DEFAULT_HASHTAGS = ["#IA", "#AI", "#Tech"]
DEFAULT_SOURCE = "Sintaxis IA"

# Seconds of padding after the narration in the composition props
PROPS_DURATION_BUFFER = 5


def build_data_contract(
    request: RenderRequest,
    assets: StagedAssets,
    subtitles: List[SubtitleWord],
    sections: List[VideoSection],
    settings: Settings,
    generated_at: Optional[datetime] = None,
) -> RenderDataContract:
    """
    Combine request, staged assets, subtitles and sections into the contract.

    Identical inputs give identical output apart from meta.generatedAt.
    """
    fps = settings.fps
    generated_at = generated_at or datetime.now(timezone.utc)

    return RenderDataContract(
        meta=ContractMeta(
            video_id=request.video_id,
            title=request.title,
            topic=request.topic,
            source=request.news_source,
            company=request.company,
            news_type=request.news_type,
            duration_in_frames=seconds_to_frames(request.audio_duration, fps),
            fps=fps,
            generated_at=generated_at.isoformat(),
        ),
        content=ContractContent(
            hook=request.hook or extract_hook(request.script),
            headline=request.title,
            body=request.body or extract_body(request.script),
            impact=request.opinion or extract_impact(request.script),
            cta=request.cta or settings.default_cta,
            full_script=request.script,
        ),
        assets=ContractAssets(
            audio_path=assets.audio_path,
            audio_duration=request.audio_duration,
            hero_image=assets.hero_image,
            context_image=assets.context_image,
            outro_image=assets.outro_image,
            company_logo=f"logos/{request.company.lower()}.png" if request.company else None,
        ),
        subtitles=subtitles,
        sections=sections,
        style=ContractStyle(),
    )


def write_data_contract(contract: RenderDataContract, path: Path) -> Path:
    """Write the contract as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contract.to_json(), encoding="utf-8")
    logger.info(f"Data contract written: {path}")
    return path


def build_video_props(
    request: RenderRequest,
    assets: StagedAssets,
    settings: Settings,
    published_at: Optional[date] = None,
) -> VideoProps:
    """
    Build the composition input props.

    When the hero image could not be staged the original remote URL is
    passed through so the composition can still try to load it.
    """
    details = [
        s.strip()
        for s in re.split(r"[.!?]+", request.script)
        if 20 < len(s.strip()) < 150
    ][:4]

    hero = assets.hero_image
    if not assets.hero_staged:
        hero = request.image_path if request.image_path.startswith("http") else ""
        logger.info(f"Hero image not staged, URL fallback: {hero or '(none)'}")

    topics = [t for t in (request.topic, request.company or "") if t] if request.topic else []
    published_at = published_at or datetime.now(timezone.utc).date()

    return VideoProps(
        news=PropsNews(
            title=request.title,
            description=request.body or request.script,
            details=details,
            source=request.news_source or DEFAULT_SOURCE,
            published_at=published_at.isoformat(),
        ),
        images=PropsImages(hero=hero, context=hero),
        topics=topics,
        hashtags=list(DEFAULT_HASHTAGS),
        news_type=request.news_type or "other",
        audio=PropsAudio(voice=PropsVoice(src=assets.audio_path)),
        config=PropsConfig(
            duration=math.ceil(request.audio_duration) + PROPS_DURATION_BUFFER,
            fps=settings.fps,
        ),
    )


def write_video_props(props: VideoProps, path: Path) -> Path:
    """Write props.json and return its path for the --props flag."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(props.to_json(), encoding="utf-8")
    return path
