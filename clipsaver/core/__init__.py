"""Core pipeline: platform matching, tool gateway, parsing, format resolution and caching."""

from .cache import ResultCache
from .errors import (
    ExtractionError,
    ParseFailure,
    PartialResolutionFailure,
    SpawnFailure,
    ToolFailure,
    UnsupportedPlatform,
)
from .gateway import ExtractionGateway, ToolOutput
from .orchestrator import ExtractionOrchestrator, fingerprint
from .parser import parse_format_listing, parse_metadata
from .platforms import SUPPORTED_PLATFORMS, SupportedPlatform, get_supported_platforms, match_platform
from .resolver import FormatResolver

__all__ = [
    "SUPPORTED_PLATFORMS",
    "ExtractionError",
    "ExtractionGateway",
    "ExtractionOrchestrator",
    "FormatResolver",
    "ParseFailure",
    "PartialResolutionFailure",
    "ResultCache",
    "SpawnFailure",
    "SupportedPlatform",
    "ToolFailure",
    "ToolOutput",
    "UnsupportedPlatform",
    "fingerprint",
    "get_supported_platforms",
    "match_platform",
    "parse_format_listing",
    "parse_metadata",
]
