"""
Section Planner

Splits the narration timeline into the five fixed stages of a news short
(hook, headline, main, impact, outro) and attaches the text for each.

Allocation (seconds, applied in order on a cumulative frame cursor):
- hook:     min(8, 15% of duration)
- headline: min(4, 7% of duration)
- main:     55% of duration
- impact:   min(5, 9% of duration)
- outro:    whatever is left; its end is pinned to the total frame count

The capped shares add up to at most 86%, so the outro always gets a
positive number of seconds. Only frame rounding on extremely short
timelines can push the cursor past the end; that is rejected instead of
clamped, because clamping would silently shift sections.
"""

import logging
from typing import List, Optional

from ..core.config import DEFAULT_CTA
from ..schemas.contract import SectionEffects, VideoSection
from .text_extraction import extract_body, extract_hook, extract_impact
from .timing import seconds_to_frames

logger = logging.getLogger(__name__)

SECTION_ORDER = ("hook", "headline", "main", "impact", "outro")


class SectionPlanningError(ValueError):
    """Raised when a timeline cannot hold the five sections."""

    pass


def allocate_section_durations(total_duration: float) -> List[float]:
    """
    Proportional durations in seconds, in SECTION_ORDER.

    The five values always sum to total_duration.
    """
    hook = min(8.0, total_duration * 0.15)
    headline = min(4.0, total_duration * 0.07)
    main = total_duration * 0.55
    impact = min(5.0, total_duration * 0.09)
    outro = total_duration - hook - headline - main - impact
    return [hook, headline, main, impact, outro]


def generate_sections(
    script: str,
    title: str,
    duration_seconds: float,
    fps: int = 30,
    image: Optional[str] = None,
    hook: Optional[str] = None,
    body: Optional[str] = None,
    impact: Optional[str] = None,
    cta: Optional[str] = None,
    default_cta: str = DEFAULT_CTA,
) -> List[VideoSection]:
    """
    Build the five video sections for a script.

    Args:
        script: Full narration script
        title: Headline shown in the headline section
        duration_seconds: Narration length; the sections span exactly
            seconds_to_frames(duration_seconds, fps) frames
        fps: Frames per second
        image: Hero image reference for the headline/main sections
        hook, body, impact, cta: Explicit texts overriding extraction
        default_cta: Outro text when no cta is given

    Returns:
        Five contiguous, non-overlapping sections starting at frame 0

    Raises:
        SectionPlanningError: If duration or fps is not positive, or the
            timeline is too short for frame-rounded sections to fit
    """
    if fps <= 0:
        raise SectionPlanningError(f"fps must be positive, got {fps}")
    if duration_seconds <= 0:
        raise SectionPlanningError(
            f"Audio duration must be positive, got {duration_seconds}s"
        )

    total_frames = seconds_to_frames(duration_seconds, fps)
    durations = allocate_section_durations(duration_seconds)

    contents = [
        hook or extract_hook(script),
        title,
        body or extract_body(script),
        impact or extract_impact(script),
        cta or default_cta,
    ]
    images = [None, image or None, image or None, None, None]
    effects = [
        SectionEffects(zoom_factor=1.2, transition_in="zoom"),
        SectionEffects(blur_intensity=0.5, transition_in="fade"),
        SectionEffects(parallax_offset=-20),
        SectionEffects(glow_intensity=0.8, zoom_factor=1.1),
        SectionEffects(transition_out="fade"),
    ]

    sections: List[VideoSection] = []
    cursor = 0
    for position, name in enumerate(SECTION_ORDER):
        start_frame = cursor
        if name == "outro":
            end_frame = total_frames
        else:
            end_frame = cursor + seconds_to_frames(durations[position], fps)
        cursor = end_frame

        sections.append(
            VideoSection(
                name=name,
                start_frame=start_frame,
                end_frame=end_frame,
                duration_seconds=durations[position],
                content=contents[position],
                image=images[position],
                effects=effects[position],
            )
        )

    outro = sections[-1]
    if outro.start_frame > outro.end_frame:
        raise SectionPlanningError(
            f"Timeline too short for section layout: {duration_seconds}s at {fps}fps "
            f"({total_frames} frames) needs at least {outro.start_frame} frames "
            f"before the outro"
        )

    logger.debug(
        "Sections planned: "
        + ", ".join(f"{s.name}={s.start_frame}-{s.end_frame}" for s in sections)
    )
    return sections
