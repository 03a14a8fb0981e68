"""
Subtitle Segmenter

Splits the narration script into word-level subtitles spread evenly over the
narration audio. Timing is proportional (no forced alignment): every word gets
the same share of the timeline, minus a small trailing gap.
"""

import re
from typing import List

from ..schemas.contract import SubtitleWord
from .timing import round_half_up, seconds_to_frames

_SENTENCE_END = re.compile(r"[.!?]$")
_TRAILING_PUNCTUATION = re.compile(r"[.,!?;:]$")


def generate_subtitles(
    script: str,
    duration_seconds: float,
    fps: int = 30,
    word_padding: int = 2,
) -> List[SubtitleWord]:
    """
    Generate frame-aligned subtitle words for a narration script.

    Frames per word is kept as a float and each boundary is rounded on its
    own, so rounding error never accumulates along the script.

    Args:
        script: Narration text
        duration_seconds: Narration audio length in seconds
        fps: Frames per second of the target video
        word_padding: Frames trimmed from each word's end to leave a gap

    Returns:
        One SubtitleWord per whitespace-separated token (empty for an
        empty or whitespace-only script)
    """
    words = script.split()
    if not words:
        return []

    total_frames = seconds_to_frames(duration_seconds, fps)
    frames_per_word = total_frames / len(words)

    subtitles: List[SubtitleWord] = []
    for index, raw_word in enumerate(words):
        start_frame = round_half_up(index * frames_per_word)
        end_frame = round_half_up((index + 1) * frames_per_word) - word_padding

        start_frame = _clamp(start_frame, 0, total_frames)
        end_frame = _clamp(end_frame, start_frame, total_frames)

        subtitles.append(
            SubtitleWord(
                word=_TRAILING_PUNCTUATION.sub("", raw_word),
                start_frame=start_frame,
                end_frame=end_frame,
                index=index,
                is_start_of_sentence=index == 0 or bool(_SENTENCE_END.search(words[index - 1])),
                is_end_of_sentence=bool(_SENTENCE_END.search(raw_word)),
            )
        )

    return subtitles


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))
