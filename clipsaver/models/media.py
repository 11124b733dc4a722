from pydantic import BaseModel, ConfigDict, Field

from ..utils.helpers import format_duration


class VideoDescriptor(BaseModel):
    """Metadata for a single video, as reported by the extraction tool."""

    model_config = ConfigDict(frozen=True)

    title: str = Field("Unknown Title", description="Video title")
    thumbnail: str = Field("", description="Thumbnail URL")
    duration_seconds: float = Field(0, ge=0, description="Duration in seconds (0 if unknown)")
    uploader: str = Field("", description="Uploader/channel name")
    view_count: int = Field(0, ge=0, description="View count")
    upload_date: str = Field("", description="Upload date as reported upstream (YYYYMMDD)")

    @property
    def duration(self) -> str:
        return format_duration(self.duration_seconds)


class RawFormatEntry(BaseModel):
    """One rendition from the tool's format listing. Codec 'none' is stored as None."""

    model_config = ConfigDict(frozen=True)

    format_id: str
    ext: str | None = None
    url: str | None = None
    vcodec: str | None = None
    acodec: str | None = None
    height: int | None = None
    fps: float | None = None
    abr: float | None = None
    tbr: float | None = None
    filesize: int | None = None

    @property
    def has_video(self) -> bool:
        return bool(self.vcodec)

    @property
    def has_audio(self) -> bool:
        return bool(self.acodec)
