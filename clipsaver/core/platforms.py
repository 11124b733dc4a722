"""
Platform detection for incoming media URLs.

Each supported platform is matched on the URL's hostname only; the first
platform in registry order whose pattern matches wins. Anything that is not
an http(s) URL with a host is simply not supported.
"""

import logging
import re
from dataclasses import dataclass
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupportedPlatform:
    """A platform the extraction tool is known to handle."""

    name: str
    hostname_pattern: re.Pattern
    extractors: tuple[str, ...]

    def matches(self, hostname: str) -> bool:
        return self.hostname_pattern.search(hostname) is not None


def _platform(name: str, pattern: str, *extractors: str) -> SupportedPlatform:
    return SupportedPlatform(name, re.compile(pattern, re.IGNORECASE), extractors)


# Priority order matters: first match wins
SUPPORTED_PLATFORMS: tuple[SupportedPlatform, ...] = (
    _platform("YouTube", r"(?:^|\.)(?:youtube\.com|youtu\.be)$", "yt-dlp"),
    _platform("TikTok", r"(?:^|\.)tiktok\.com$", "yt-dlp", "tiktok-scraper"),
    _platform("Instagram", r"(?:^|\.)instagram\.com$", "yt-dlp", "insta-scraper"),
    _platform("Facebook", r"(?:^|\.)facebook\.com$", "yt-dlp", "fb-scraper"),
    _platform("X (Twitter)", r"(?:^|\.)(?:twitter|x)\.com$", "yt-dlp", "twitter-scraper"),
)


def extract_hostname(url: str) -> str | None:
    """Return the lowercased hostname of an http(s) URL, or None if it isn't one."""
    if not isinstance(url, str):
        return None
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not hostname:
        return None
    # Fully qualified form "youtube.com." names the same host
    return hostname.rstrip(".") or None


def match_platform(url: str) -> SupportedPlatform | None:
    """
    Classify a URL into one of the supported platforms.

    Returns None for unsupported hosts and for strings that are not URLs.
    """
    hostname = extract_hostname(url)
    if hostname is None:
        return None

    for platform in SUPPORTED_PLATFORMS:
        if platform.matches(hostname):
            return platform

    logger.debug("No platform matches host %s", hostname)
    return None


def get_supported_platforms() -> list[dict]:
    """Return information about all supported platforms."""
    return [
        {
            "name": p.name,
            "pattern": f"/{p.hostname_pattern.pattern}/",
            "extractors": list(p.extractors),
        }
        for p in SUPPORTED_PLATFORMS
    ]


def supported_platform_names() -> list[str]:
    return [p.name for p in SUPPORTED_PLATFORMS]
