"""
ClipSaver API - FastAPI application entry point.

Given a media URL from a supported platform, returns video metadata and a
ladder of direct stream URLs by orchestrating the yt-dlp command-line tool.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .core.cache import ResultCache
from .core.gateway import ExtractionGateway
from .core.orchestrator import ExtractionOrchestrator
from .core.resolver import FormatResolver
from .routes.api import router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "POST /api/download - Extract video with download links",
    "POST /api/info - Get video info only",
    "GET /api/platforms - List supported platforms",
    "GET /health - Health check",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    settings = app.state.settings
    logger.info("ClipSaver API starting up...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Cache TTL: {settings.cache_ttl}s, tool timeout: {settings.tool_timeout}s")

    # Check extraction tool availability
    version = await app.state.orchestrator.gateway.version()
    app.state.tool_version = version
    if version:
        logger.info(f"yt-dlp version: {version}")
    else:
        logger.warning("yt-dlp not found. Please install it: pip install yt-dlp")

    yield

    logger.info("ClipSaver API shutting down...")


def create_app(
    settings: Settings | None = None,
    gateway: ExtractionGateway | None = None,
    cache: ResultCache | None = None,
) -> FastAPI:
    """Build the application with its orchestrator, cache and gateway wired in."""
    settings = settings or get_settings()
    gateway = gateway or ExtractionGateway(settings.ytdlp_path, settings.tool_timeout)
    cache = cache or ResultCache(ttl=settings.cache_ttl)

    app = FastAPI(
        title="ClipSaver API",
        description=(
            "Extracts video metadata and direct download links from YouTube, TikTok, "
            "Instagram, Facebook and X (Twitter) using yt-dlp."
        ),
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tool_version = None
    app.state.orchestrator = ExtractionOrchestrator(
        gateway,
        cache,
        FormatResolver(gateway, settings.resolve_concurrency),
    )

    # CORS: use CORS_ORIGINS env (comma-separated) for explicit origins; empty = "*" without credentials (safe default)
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins if origins else ["*"],
        allow_credentials=bool(origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/health", tags=["health"])
    async def health_check(request: Request):
        tool_version = request.app.state.tool_version
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.version,
            "tool": {
                "available": tool_version is not None,
                "version": tool_version,
            },
        }

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "Endpoint not found", "availableEndpoints": AVAILABLE_ENDPOINTS},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "clipsaver.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
