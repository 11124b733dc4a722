from pydantic import BaseModel, ConfigDict, Field


class InfoRequest(BaseModel):
    """Request body for /api/info."""

    model_config = ConfigDict(populate_by_name=True)

    video_url: str | None = Field(
        None,
        alias="videoUrl",
        max_length=2048,
        description="URL of the video",
        examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"],
    )


class DownloadRequest(InfoRequest):
    """Request body for /api/download."""

    format: str = Field(
        "mp4",
        max_length=16,
        description="Preferred container format (part of the cache key)",
    )
    quality: str = Field(
        "best",
        max_length=16,
        description="Preferred quality, e.g. 'best' or '720' (part of the cache key)",
    )
