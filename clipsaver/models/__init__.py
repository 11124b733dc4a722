from .media import RawFormatEntry, VideoDescriptor
from .request import DownloadRequest, InfoRequest
from .response import (
    ErrorResponse,
    ExtractionResult,
    ResolvedFormat,
    TroubleshootingInfo,
    VideoInfoResponse,
)

__all__ = [
    "DownloadRequest",
    "ErrorResponse",
    "ExtractionResult",
    "InfoRequest",
    "RawFormatEntry",
    "ResolvedFormat",
    "TroubleshootingInfo",
    "VideoDescriptor",
    "VideoInfoResponse",
]
