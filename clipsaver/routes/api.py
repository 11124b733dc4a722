"""
API route definitions for the ClipSaver API.
"""

import logging
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..core.errors import ExtractionError, SpawnFailure, UnsupportedPlatform
from ..core.orchestrator import ExtractionOrchestrator
from ..core.platforms import get_supported_platforms, match_platform, supported_platform_names
from ..models.request import DownloadRequest, InfoRequest
from ..models.response import (
    ErrorResponse,
    ExtractionResult,
    TroubleshootingInfo,
    VideoInfoResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

EXAMPLE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

# Same hints for every failure kind
TROUBLESHOOTING = TroubleshootingInfo(
    commonIssues=[
        "Video may be private or deleted",
        "Platform may have changed their API",
        "Geographic restrictions may apply",
        "Video may be age-restricted",
    ],
    suggestions=[
        "Try a different video URL",
        "Check if the video is publicly accessible",
        "Wait a few minutes and try again",
    ],
)


def get_orchestrator(request: Request) -> ExtractionOrchestrator:
    return request.app.state.orchestrator


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _unsupported(url: str, include_provided: bool = True) -> JSONResponse:
    return _error(
        400,
        ErrorResponse(
            error="Unsupported platform",
            supported=supported_platform_names(),
            provided=url if include_provided else None,
        ),
    )


def _failure_message(e: Exception, fallback: str) -> str:
    if isinstance(e, ExtractionError):
        return str(e) or fallback
    logger.exception("Unexpected error during extraction: %s", e)
    # Do not leak exception details in production
    return str(e) if get_settings().debug else fallback


@router.post(
    "/download",
    response_model=ExtractionResult,
    responses={
        400: {"model": ErrorResponse, "description": "Missing URL or unsupported platform"},
        500: {"model": ErrorResponse, "description": "Extraction failed"},
    },
    summary="Extract video metadata with direct download links",
    description=(
        "Returns title, thumbnail, duration and a format ladder: one entry per video "
        "height (highest first) followed by the best audio-only stream."
    ),
)
async def download_video(
    body: DownloadRequest | None = None,
    orchestrator: ExtractionOrchestrator = Depends(get_orchestrator),
):
    start = time.perf_counter()
    url = ((body.video_url if body else None) or "").strip()

    if not url:
        return _error(400, ErrorResponse(error="videoUrl is required", example={"videoUrl": EXAMPLE_URL}))

    try:
        return await orchestrator.extract(url, body.format, body.quality)
    except UnsupportedPlatform:
        return _unsupported(url)
    except Exception as e:
        if isinstance(e, ExtractionError):
            logger.error(f"Extraction failed [{e.kind}/{e.error_code}]: {e}")
        platform = match_platform(url)
        return _error(
            500,
            ErrorResponse(
                error=_failure_message(e, "Failed to extract video data"),
                hint=e.hint if isinstance(e, SpawnFailure) else None,
                platform=platform.name if platform else None,
                responseTime=_elapsed_ms(start),
                troubleshooting=TROUBLESHOOTING,
            ),
        )


@router.post(
    "/info",
    response_model=VideoInfoResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing URL or unsupported platform"},
        500: {"model": ErrorResponse, "description": "Metadata extraction failed"},
    },
    summary="Get video info without download links (faster)",
)
async def video_info(
    body: InfoRequest | None = None,
    orchestrator: ExtractionOrchestrator = Depends(get_orchestrator),
):
    start = time.perf_counter()
    url = ((body.video_url if body else None) or "").strip()

    if not url:
        return _error(400, ErrorResponse(error="videoUrl is required"))

    try:
        descriptor, platform = await orchestrator.info(url)
    except UnsupportedPlatform:
        return _unsupported(url, include_provided=False)
    except Exception as e:
        if isinstance(e, ExtractionError):
            logger.error(f"Info extraction failed [{e.kind}/{e.error_code}]: {e}")
        return _error(
            500,
            ErrorResponse(
                error=_failure_message(e, "Failed to get video info"),
                responseTime=_elapsed_ms(start),
            ),
        )

    return VideoInfoResponse(
        title=descriptor.title,
        thumbnail=descriptor.thumbnail,
        duration=descriptor.duration,
        uploader=descriptor.uploader,
        view_count=descriptor.view_count,
        upload_date=descriptor.upload_date,
        platform=platform.name,
        response_time_ms=_elapsed_ms(start),
    )


@router.get(
    "/platforms",
    summary="List supported platforms",
)
async def list_platforms():
    """Return the supported platforms with their hostname patterns."""
    platforms = get_supported_platforms()
    return {
        "supported": platforms,
        "total": len(platforms),
    }
