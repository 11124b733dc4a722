"""
Format ladder construction and direct-URL resolution.

The ladder is every distinct video height (best rendition per height,
highest first) followed by a single best audio-only rendition. URLs embedded
in the format listing are not guaranteed to be the final stream location, so
each tier is resolved with its own ``--get-url`` call.
"""

import asyncio
import logging
from collections.abc import Sequence

from ..config import get_settings
from ..models.media import RawFormatEntry
from ..models.response import ResolvedFormat
from ..utils.helpers import format_bytes
from .errors import PartialResolutionFailure, ToolFailure
from .gateway import ExtractionGateway

logger = logging.getLogger(__name__)

AUDIO_QUALITY = "audio"
_DEFAULT_VIDEO_CONTAINER = "mp4"
_DEFAULT_AUDIO_CONTAINER = "mp3"


def _video_sort_key(fmt: RawFormatEntry) -> tuple[int, float, float]:
    return (fmt.height or 0, fmt.fps or 0, fmt.tbr or 0)


def _audio_sort_key(fmt: RawFormatEntry) -> float:
    return fmt.abr or fmt.tbr or 0


def select_video_tiers(formats: Sequence[RawFormatEntry]) -> list[RawFormatEntry]:
    """
    Pick the video tiers: renditions with a video codec, a source URL and a
    height, best first, one per height.
    """
    candidates = [f for f in formats if f.has_video and f.url and f.height]
    candidates.sort(key=_video_sort_key, reverse=True)

    seen: set[int] = set()
    tiers = []
    for fmt in candidates:
        if fmt.height in seen:
            continue
        seen.add(fmt.height)
        tiers.append(fmt)
    return tiers


def select_audio_tier(formats: Sequence[RawFormatEntry]) -> RawFormatEntry | None:
    """Pick the highest-bitrate audio-only rendition, if any."""
    candidates = [f for f in formats if f.has_audio and not f.has_video and f.url]
    if not candidates:
        return None
    return max(candidates, key=_audio_sort_key)


def resolution_args(video_url: str, format_id: str) -> list[str]:
    return ["--get-url", "-f", format_id, "--no-warnings", "--no-playlist", "--", video_url]


class FormatResolver:
    """Builds the ordered format ladder and resolves each tier's direct URL."""

    def __init__(self, gateway: ExtractionGateway, concurrency: int | None = None):
        self.gateway = gateway
        self.concurrency = max(1, concurrency or get_settings().resolve_concurrency)

    async def resolve(self, video_url: str, formats: Sequence[RawFormatEntry]) -> list[ResolvedFormat]:
        """
        Return video tiers (high to low) followed by at most one audio tier.

        A tier whose URL cannot be resolved is kept with ``url=None``.
        """
        video_tiers = select_video_tiers(formats)
        audio_tier = select_audio_tier(formats)

        ladder: list[tuple[RawFormatEntry, bool]] = [(f, False) for f in video_tiers]
        if audio_tier is not None:
            ladder.append((audio_tier, True))

        if not ladder:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)

        async def resolve_tier(fmt: RawFormatEntry, is_audio: bool) -> ResolvedFormat:
            async with semaphore:
                direct_url = await self._direct_url(video_url, fmt.format_id)
            return self._to_resolved(fmt, is_audio, direct_url)

        tasks = [asyncio.ensure_future(resolve_tier(f, a)) for f, a in ladder]
        try:
            # gather preserves ladder order regardless of completion order
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    async def _direct_url(self, video_url: str, format_id: str) -> str | None:
        try:
            return await self.resolve_direct_url(video_url, format_id)
        except PartialResolutionFailure as e:
            logger.warning("%s [%s]: %s", e.kind, e.error_code, e)
            return None

    async def resolve_direct_url(self, video_url: str, format_id: str) -> str | None:
        """
        Resolve one format to its direct stream URL.

        Raises PartialResolutionFailure when the tool fails for this format.
        SpawnFailure propagates since no other tier could succeed either.
        """
        try:
            output = await self.gateway.invoke(resolution_args(video_url, format_id))
        except ToolFailure as e:
            raise PartialResolutionFailure(format_id, e) from e
        for line in output.stdout.splitlines():
            if line.strip():
                return line.strip()
        logger.debug("Empty --get-url output for format %s", format_id)
        return None

    @staticmethod
    def _to_resolved(fmt: RawFormatEntry, is_audio: bool, direct_url: str | None) -> ResolvedFormat:
        size = format_bytes(fmt.filesize) if fmt.filesize else "Unknown"
        if is_audio:
            return ResolvedFormat(
                quality=AUDIO_QUALITY,
                format=fmt.ext or _DEFAULT_AUDIO_CONTAINER,
                url=direct_url,
                size=size,
                format_id=fmt.format_id,
                abr=fmt.abr,
                acodec=fmt.acodec,
            )
        return ResolvedFormat(
            quality=f"{fmt.height}p",
            format=fmt.ext or _DEFAULT_VIDEO_CONTAINER,
            url=direct_url,
            size=size,
            format_id=fmt.format_id,
            fps=fmt.fps,
            vcodec=fmt.vcodec,
            acodec=fmt.acodec,
        )
