"""
Top-level extraction use case.

``extract`` runs the full pipeline: platform check, metadata dump, format
listing, ladder resolution, then caches the assembled result. ``info`` stops
after the metadata dump and never resolves stream URLs.
"""

import logging
import time

from ..models.media import VideoDescriptor
from ..models.response import ExtractionResult
from .cache import ResultCache
from .errors import UnsupportedPlatform
from .gateway import ExtractionGateway
from .parser import parse_format_listing, parse_metadata
from .platforms import SupportedPlatform, match_platform
from .resolver import FormatResolver

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "mp4"
DEFAULT_QUALITY = "best"


def fingerprint(url: str, format: str = DEFAULT_FORMAT, quality: str = DEFAULT_QUALITY) -> str:
    """Cache key for an extraction request."""
    return f"{url}-{format}-{quality}"


def metadata_args(url: str) -> list[str]:
    return ["--dump-json", "--no-warnings", "--no-playlist", "--no-download", "--", url]


def listing_args(url: str) -> list[str]:
    return ["--list-formats", "--dump-json", "--no-warnings", "--no-playlist", "--", url]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class ExtractionOrchestrator:
    """Drives platform matching, tool invocations, parsing and caching."""

    def __init__(
        self,
        gateway: ExtractionGateway,
        cache: ResultCache,
        resolver: FormatResolver | None = None,
    ):
        self.gateway = gateway
        self.cache = cache
        self.resolver = resolver or FormatResolver(gateway)

    @staticmethod
    def classify(url: str) -> SupportedPlatform:
        platform = match_platform(url)
        if platform is None:
            raise UnsupportedPlatform(url)
        return platform

    async def extract(
        self,
        url: str,
        format: str = DEFAULT_FORMAT,
        quality: str = DEFAULT_QUALITY,
    ) -> ExtractionResult:
        """
        Extract metadata and the full format ladder for ``url``.

        ``format`` and ``quality`` only discriminate the cache key; every
        tier is always resolved and callers choose one client-side.
        """
        start = time.perf_counter()
        platform = self.classify(url)

        result, hit = await self.cache.get_or_compute(
            fingerprint(url, format, quality),
            lambda: self._extract_fresh(url, platform),
        )
        return result.model_copy(update={"cached": hit, "response_time_ms": _elapsed_ms(start)})

    async def info(self, url: str) -> tuple[VideoDescriptor, SupportedPlatform]:
        """Fetch metadata only. Not cached and no format resolution."""
        platform = self.classify(url)
        return await self._fetch_metadata(url), platform

    async def _fetch_metadata(self, url: str) -> VideoDescriptor:
        output = await self.gateway.invoke(metadata_args(url))
        return parse_metadata(output.stdout)

    async def _extract_fresh(self, url: str, platform: SupportedPlatform) -> ExtractionResult:
        start = time.perf_counter()
        logger.info(f"Extracting {platform.name} video: {url}")

        descriptor = await self._fetch_metadata(url)
        listing = await self.gateway.invoke(listing_args(url))
        raw_formats = parse_format_listing(listing.stdout)
        formats = await self.resolver.resolve(url, raw_formats)

        unresolved = sum(1 for f in formats if f.url is None)
        logger.info(
            f"Extraction completed in {_elapsed_ms(start)}ms "
            f"({len(formats)} formats, {unresolved} unresolved)"
        )

        return ExtractionResult(
            title=descriptor.title,
            thumbnail=descriptor.thumbnail,
            duration=descriptor.duration,
            uploader=descriptor.uploader,
            view_count=descriptor.view_count,
            upload_date=descriptor.upload_date,
            platform=platform.name,
            formats=formats,
            cached=False,
        )
