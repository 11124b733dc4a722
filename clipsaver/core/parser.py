"""
Parsers for the extraction tool's JSON output.

The tool prints a single JSON document for metadata dumps. Format listings
are newline-delimited: warnings or progress lines may come first, and only
the last populated line holds the authoritative record.
"""

import json
import logging
from typing import Any

from ..models.media import RawFormatEntry, VideoDescriptor
from ..utils.helpers import (
    codec_or_none,
    float_or_none,
    int_or_none,
    str_or_none,
    traverse_obj,
)
from .errors import ParseFailure

logger = logging.getLogger(__name__)


def _load_object(text: str, what: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Failed to parse {what}: {e}") from e
    if not isinstance(data, dict):
        raise ParseFailure(f"Failed to parse {what}: expected a JSON object, got {type(data).__name__}")
    return data


def parse_metadata(raw: str) -> VideoDescriptor:
    """Parse a single-document metadata dump into a VideoDescriptor."""
    data = _load_object(raw, "video metadata")

    duration = float_or_none(data.get("duration")) or 0
    view_count = int_or_none(data.get("view_count")) or 0

    return VideoDescriptor(
        title=str_or_none(data.get("title")) or "Unknown Title",
        thumbnail=(
            str_or_none(data.get("thumbnail"))
            or str_or_none(traverse_obj(data, ("thumbnails", 0, "url")))
            or ""
        ),
        duration_seconds=max(duration, 0),
        uploader=str_or_none(data.get("uploader")) or str_or_none(data.get("channel")) or "",
        view_count=max(view_count, 0),
        upload_date=str_or_none(data.get("upload_date")) or "",
    )


def last_populated_line(raw: str) -> str | None:
    """Return the last non-blank line of ``raw``, stripped."""
    for line in reversed(raw.splitlines()):
        if line.strip():
            return line.strip()
    return None


def _parse_format(entry: dict[str, Any]) -> RawFormatEntry | None:
    format_id = str_or_none(entry.get("format_id"))
    if format_id is None:
        return None

    return RawFormatEntry(
        format_id=format_id,
        ext=str_or_none(entry.get("ext")),
        url=str_or_none(entry.get("url")),
        vcodec=codec_or_none(entry.get("vcodec")),
        acodec=codec_or_none(entry.get("acodec")),
        height=int_or_none(entry.get("height")),
        fps=float_or_none(entry.get("fps")),
        abr=float_or_none(entry.get("abr")),
        tbr=float_or_none(entry.get("tbr")),
        filesize=int_or_none(traverse_obj(entry, "filesize", "filesize_approx")),
    )


def parse_format_listing(raw: str) -> list[RawFormatEntry]:
    """
    Parse a newline-delimited format listing into raw format entries.

    Only the last populated line is read. Entries without a format_id are
    skipped since they cannot be resolved later.
    """
    line = last_populated_line(raw)
    if line is None:
        raise ParseFailure("Failed to parse format data: tool produced no output")

    data = _load_object(line, "format data")

    formats = data.get("formats")
    if not isinstance(formats, list):
        logger.debug("Format listing has no formats array")
        return []

    entries = []
    for item in formats:
        if not isinstance(item, dict):
            continue
        entry = _parse_format(item)
        if entry is not None:
            entries.append(entry)
    return entries
