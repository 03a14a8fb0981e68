"""
Regex heuristics that pull section text out of a narration script.

Each function is pure and only depends on sentence terminators (. ! ?), so
they can be swapped for a proper sentence splitter without touching callers.
"""

import re
from typing import List

_FIRST_SENTENCE = re.compile(r"^[^.!?]+[.!?]")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

HOOK_FALLBACK_CHARS = 100


def split_sentences(script: str) -> List[str]:
    """Split on sentence terminators, dropping blank fragments."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(script) if s.strip()]


def extract_hook(script: str) -> str:
    """First sentence of the script, or its first 100 characters."""
    match = _FIRST_SENTENCE.match(script)
    if match:
        return match.group(0).strip()
    return script[:HOOK_FALLBACK_CHARS]


def extract_body(script: str) -> str:
    """
    Middle of the script: every sentence but the first and last.

    Scripts with two sentences or fewer are returned unchanged.
    """
    sentences = split_sentences(script)
    if len(sentences) <= 2:
        return script
    return ". ".join(sentences[1:-1]) + "."


def extract_impact(script: str) -> str:
    """Second-to-last sentence, or "" when there are fewer than two."""
    sentences = split_sentences(script)
    if len(sentences) < 2:
        return ""
    return sentences[-2] + "."
