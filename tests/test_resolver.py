"""Tests for format ladder construction and direct-URL resolution."""

import asyncio

import pytest

from clipsaver.core.errors import SpawnFailure
from clipsaver.core.parser import parse_format_listing
from clipsaver.core.resolver import FormatResolver, select_audio_tier, select_video_tiers
from clipsaver.models.media import RawFormatEntry

from fakes import VIDEO_URL, FakeGateway, listing_output


@pytest.fixture()
def raw_formats():
    return parse_format_listing(listing_output())


def resolve(gateway, formats, concurrency=4):
    return asyncio.run(FormatResolver(gateway, concurrency).resolve(VIDEO_URL, formats))


# ── Tier selection ───────────────────────────────────────────────────
class TestSelectVideoTiers:
    def test_one_tier_per_height_best_first(self, raw_formats):
        tiers = select_video_tiers(raw_formats)
        assert [(t.format_id, t.height) for t in tiers] == [("137", 1080), ("136", 720), ("18", 360)]

    def test_drops_entries_without_height_or_url(self):
        formats = [
            RawFormatEntry(format_id="a", vcodec="avc1", url="https://c/a"),
            RawFormatEntry(format_id="b", vcodec="avc1", height=480),
            RawFormatEntry(format_id="c", vcodec="avc1", height=240, url="https://c/c"),
        ]
        assert [t.format_id for t in select_video_tiers(formats)] == ["c"]

    def test_audio_only_is_not_video(self, raw_formats):
        assert all(t.vcodec for t in select_video_tiers(raw_formats))


class TestSelectAudioTier:
    def test_highest_bitrate_wins(self, raw_formats):
        assert select_audio_tier(raw_formats).format_id == "251"

    def test_muxed_formats_are_not_audio_candidates(self):
        formats = [RawFormatEntry(format_id="18", vcodec="avc1", acodec="mp4a", height=360, url="https://c/18")]
        assert select_audio_tier(formats) is None

    def test_falls_back_to_total_bitrate(self):
        formats = [
            RawFormatEntry(format_id="x", acodec="opus", tbr=64, url="https://c/x"),
            RawFormatEntry(format_id="y", acodec="opus", tbr=160, url="https://c/y"),
        ]
        assert select_audio_tier(formats).format_id == "y"


# ── Resolution ───────────────────────────────────────────────────────
class TestResolve:
    def test_ladder_order_and_labels(self, raw_formats):
        ladder = resolve(FakeGateway(), raw_formats)
        assert [f.quality for f in ladder] == ["1080p", "720p", "360p", "audio"]

    def test_each_tier_resolved_separately(self, raw_formats):
        gateway = FakeGateway()
        ladder = resolve(gateway, raw_formats)
        assert gateway.count("--get-url") == 4
        assert [f.url for f in ladder] == [
            "https://direct.example.com/137",
            "https://direct.example.com/136",
            "https://direct.example.com/18",
            "https://direct.example.com/251",
        ]

    def test_resolution_command_shape(self, raw_formats):
        gateway = FakeGateway()
        resolve(gateway, raw_formats)
        assert gateway.calls[0] == ["--get-url", "-f", "137", "--no-warnings", "--no-playlist", "--", VIDEO_URL]

    def test_tier_fields(self, raw_formats):
        ladder = resolve(FakeGateway(), raw_formats)
        top, mid, low, audio = ladder
        assert top.format == "mp4"
        assert top.size == "Unknown"
        assert top.vcodec == "avc1.640028"
        assert top.fps == 25
        assert mid.size == "28.61 MB"
        assert low.size == "10.49 MB"
        assert audio.format == "webm"
        assert audio.size == "3.28 MB"
        assert audio.abr == 135.2
        assert audio.acodec == "opus"
        assert audio.vcodec is None

    def test_default_containers(self):
        formats = [
            RawFormatEntry(format_id="v", vcodec="avc1", height=480, url="https://c/v"),
            RawFormatEntry(format_id="a", acodec="mp4a", abr=128, url="https://c/a"),
        ]
        ladder = resolve(FakeGateway(), formats)
        assert [f.format for f in ladder] == ["mp4", "mp3"]

    def test_failed_tier_is_kept_without_url(self, raw_formats):
        ladder = resolve(FakeGateway(failing_formats={"136"}), raw_formats)
        assert [f.quality for f in ladder] == ["1080p", "720p", "360p", "audio"]
        assert ladder[1].url is None
        assert all(f.url for i, f in enumerate(ladder) if i != 1)

    def test_empty_tool_output_yields_no_url(self, raw_formats):
        ladder = resolve(FakeGateway(empty_formats={"251"}), raw_formats)
        assert ladder[-1].quality == "audio"
        assert ladder[-1].url is None

    def test_spawn_failure_propagates(self, raw_formats):
        class BrokenGateway(FakeGateway):
            async def invoke(self, args):
                raise SpawnFailure("Failed to spawn yt-dlp")

        with pytest.raises(SpawnFailure):
            resolve(BrokenGateway(), raw_formats)

    def test_no_candidates_is_empty_and_makes_no_calls(self):
        gateway = FakeGateway()
        formats = [RawFormatEntry(format_id="sb0", ext="mhtml", url="https://c/sb")]
        assert resolve(gateway, formats) == []
        assert gateway.calls == []

    def test_video_without_audio_streams(self):
        formats = [RawFormatEntry(format_id="v", vcodec="vp9", height=720, url="https://c/v")]
        ladder = resolve(FakeGateway(), formats)
        assert [f.quality for f in ladder] == ["720p"]

    def test_idempotent_labels(self, raw_formats):
        first = resolve(FakeGateway(), raw_formats)
        second = resolve(FakeGateway(), raw_formats)
        assert {f.quality for f in first} == {f.quality for f in second}


class TrackingGateway(FakeGateway):
    """Records peak concurrent invocations; the top tiers answer slowest."""

    def __init__(self):
        super().__init__()
        self.active = 0
        self.peak = 0

    async def invoke(self, args):
        self.active += 1
        self.peak = max(self.peak, self.active)
        format_id = args[args.index("-f") + 1]
        await asyncio.sleep({"137": 0.03, "136": 0.02}.get(format_id, 0.0))
        self.active -= 1
        return await super().invoke(args)


class TestConcurrency:
    def test_fan_out_is_bounded_and_order_preserved(self, raw_formats):
        gateway = TrackingGateway()
        ladder = resolve(gateway, raw_formats, concurrency=2)
        assert gateway.peak == 2
        assert [f.quality for f in ladder] == ["1080p", "720p", "360p", "audio"]

    def test_sequential_when_concurrency_is_one(self, raw_formats):
        gateway = TrackingGateway()
        ladder = resolve(gateway, raw_formats, concurrency=1)
        assert gateway.peak == 1
        assert len(ladder) == 4

    def test_spawn_failure_cancels_remaining_tiers(self, raw_formats):
        class SpawnOnTopTier(FakeGateway):
            def __init__(self):
                super().__init__()
                self.finished = []

            async def invoke(self, args):
                format_id = args[args.index("-f") + 1]
                if format_id == "137":
                    raise SpawnFailure("Failed to spawn yt-dlp")
                await asyncio.sleep(0.02)
                self.finished.append(format_id)
                return await super().invoke(args)

        gateway = SpawnOnTopTier()

        async def run():
            with pytest.raises(SpawnFailure):
                await FormatResolver(gateway, 4).resolve(VIDEO_URL, raw_formats)
            # Give any leftover tier time to finish if it was not cancelled
            await asyncio.sleep(0.05)

        asyncio.run(run())
        assert gateway.finished == []
