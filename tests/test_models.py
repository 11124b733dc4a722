"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from clipsaver.models.media import RawFormatEntry, VideoDescriptor
from clipsaver.models.request import DownloadRequest, InfoRequest
from clipsaver.models.response import ErrorResponse, ExtractionResult, ResolvedFormat


# ── Requests ─────────────────────────────────────────────────────────
class TestDownloadRequest:
    def test_defaults(self):
        req = DownloadRequest(videoUrl="https://youtube.com/watch?v=abc")
        assert req.video_url == "https://youtube.com/watch?v=abc"
        assert req.format == "mp4"
        assert req.quality == "best"

    def test_populate_by_field_name(self):
        req = DownloadRequest(video_url="https://x.com/a/status/1", quality="720")
        assert req.video_url == "https://x.com/a/status/1"
        assert req.quality == "720"

    def test_missing_url_is_allowed(self):
        # Reported as a 400 by the route, not a validation error
        assert InfoRequest().video_url is None

    def test_overlong_url_rejected(self):
        with pytest.raises(ValidationError):
            InfoRequest(videoUrl="https://youtube.com/" + "a" * 3000)


# ── VideoDescriptor ──────────────────────────────────────────────────
class TestVideoDescriptor:
    def test_defaults(self):
        d = VideoDescriptor()
        assert d.title == "Unknown Title"
        assert d.thumbnail == ""
        assert d.duration_seconds == 0
        assert d.duration == "0:00"
        assert d.view_count == 0

    def test_duration_formatting(self):
        assert VideoDescriptor(duration_seconds=3725).duration == "1:02:05"

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            VideoDescriptor(view_count=-1)

    def test_frozen(self):
        d = VideoDescriptor(title="A")
        with pytest.raises(ValidationError):
            d.title = "B"


class TestRawFormatEntry:
    def test_track_flags(self):
        video_only = RawFormatEntry(format_id="137", vcodec="avc1")
        audio_only = RawFormatEntry(format_id="140", acodec="mp4a.40.2")
        assert video_only.has_video and not video_only.has_audio
        assert audio_only.has_audio and not audio_only.has_video


# ── Responses ────────────────────────────────────────────────────────
class TestExtractionResult:
    def test_wire_keys(self):
        result = ExtractionResult(
            title="T",
            thumbnail="",
            duration="0:00",
            uploader="",
            view_count=0,
            upload_date="",
            platform="YouTube",
            formats=[ResolvedFormat(quality="audio", format="m4a")],
        )
        data = result.model_dump(by_alias=True)
        assert data["responseTime"] == 0
        assert data["cached"] is False
        assert data["formats"][0]["url"] is None
        assert data["formats"][0]["size"] == "Unknown"

    def test_copy_with_update_leaves_original(self):
        result = ExtractionResult(
            title="T", thumbnail="", duration="0:00", uploader="",
            view_count=0, upload_date="", platform="YouTube",
        )
        copy = result.model_copy(update={"cached": True, "response_time_ms": 12})
        assert copy.cached is True
        assert copy.response_time_ms == 12
        assert result.cached is False


class TestErrorResponse:
    def test_minimal_dump(self):
        body = ErrorResponse(error="videoUrl is required").model_dump(exclude_none=True)
        assert body == {"error": "videoUrl is required"}
