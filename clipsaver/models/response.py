from pydantic import BaseModel, ConfigDict, Field


class ResolvedFormat(BaseModel):
    """A downloadable rendition in the format ladder."""

    model_config = ConfigDict(frozen=True)

    quality: str = Field(..., description="Quality label ('1080p', ..., or 'audio')")
    format: str = Field(..., description="Container format (mp4, webm, m4a, mp3, ...)")
    url: str | None = Field(None, description="Direct stream URL; null when it could not be resolved")
    size: str = Field("Unknown", description="Human-readable file size")
    format_id: str | None = Field(None, description="Upstream format identifier")
    fps: float | None = Field(None, description="Frames per second (video tiers)")
    abr: float | None = Field(None, description="Audio bitrate in kbps (audio tier)")
    vcodec: str | None = Field(None, description="Video codec")
    acodec: str | None = Field(None, description="Audio codec")


class VideoInfoResponse(BaseModel):
    """Response model for /api/info."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    thumbnail: str
    duration: str = Field(..., description="Duration as M:SS or H:MM:SS")
    uploader: str
    view_count: int
    upload_date: str
    platform: str
    response_time_ms: int = Field(0, alias="responseTime", description="Handling time in ms")


class ExtractionResult(VideoInfoResponse):
    """Response model for /api/download. Also the unit stored in the result cache."""

    formats: list[ResolvedFormat] = Field(default_factory=list, description="Video tiers high to low, then audio")
    cached: bool = Field(False, description="Whether the result was served from cache")


class TroubleshootingInfo(BaseModel):
    commonIssues: list[str]
    suggestions: list[str]


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error message")
    platform: str | None = Field(None, description="Detected platform, if any")
    supported: list[str] | None = Field(None, description="Supported platform names")
    provided: str | None = Field(None, description="The URL that was provided")
    hint: str | None = Field(None, description="Remediation hint for server-side setup problems")
    example: dict[str, str] | None = Field(None, description="Example request body")
    responseTime: int | None = Field(None, description="Handling time in ms")
    troubleshooting: TroubleshootingInfo | None = None
