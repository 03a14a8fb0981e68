"""
Frame/time conversions shared by the subtitle and section planners.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def seconds_to_frames(seconds: float, fps: int = 30) -> int:
    """
    Convert seconds to a whole frame count.

    Rounds half up (2.5 -> 3) to match the render engine; Python's round()
    would round half to even.
    """
    return round_half_up(seconds * fps)


def frames_to_seconds(frames: int, fps: int = 30) -> float:
    """Convert a frame count back to seconds."""
    return frames / fps


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count for humans.

    Example:
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size_bytes <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size_bytes)
    exponent = 0
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1
    # Drop trailing zeros: 15.0 -> "15", 1.50 -> "1.5"
    return f"{round(value, 2):g} {units[exponent]}"
