"""
General utility functions for reading tool output and rendering values.
Ported from yt-dlp's utils.py conversion helpers.
"""

import math
from typing import Any

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def traverse_obj(obj: Any, *paths: Any, default: Any = None) -> Any:
    """
    Traverse nested dicts/lists safely.
    Ported from yt-dlp's traverse_obj utility.

    Usage:
        traverse_obj(data, 'key1', 'key2', 'key3')
        traverse_obj(data, ('key1', 'key2'), ('alt_key1', 'alt_key2'))
    """
    for path in paths:
        if isinstance(path, (list, tuple)):
            result = obj
            for key in path:
                if result is None:
                    break
                if isinstance(result, dict):
                    result = result.get(key)
                elif isinstance(result, (list, tuple)):
                    try:
                        result = result[key]
                    except (IndexError, TypeError):
                        result = None
                else:
                    result = None
            if result is not None:
                return result
        else:
            if isinstance(obj, dict) and obj.get(path) is not None:
                return obj[path]
    return default


def int_or_none(v: Any) -> int | None:
    """Convert value to int or return None."""
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (ValueError, TypeError, OverflowError):
        return None


def float_or_none(v: Any) -> float | None:
    """Convert value to float or return None."""
    if v is None or isinstance(v, bool):
        return None
    try:
        result = float(v)
    except (ValueError, TypeError):
        return None
    return result if math.isfinite(result) else None


def str_or_none(v: Any) -> str | None:
    """Convert value to string or return None."""
    if v is None:
        return None
    result = str(v).strip()
    return result if result else None


def codec_or_none(v: Any) -> str | None:
    """Normalize a codec field; yt-dlp reports a missing track as 'none'."""
    codec = str_or_none(v)
    if codec is None or codec.lower() == "none":
        return None
    return codec


def format_duration(seconds: int | float | None) -> str:
    """Render seconds as M:SS, or H:MM:SS from one hour up. Zero/unknown is '0:00'."""
    if not seconds or seconds < 0:
        return "0:00"

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_bytes(size: int | float | None) -> str:
    """Render a byte count with a 1024-based unit (B..GB) and up to two decimals."""
    if not size or size <= 0:
        return "0 B"

    value = float(size)
    index = 0
    # Equivalent to floor(log1024(size)) capped at GB, without float log rounding
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"
