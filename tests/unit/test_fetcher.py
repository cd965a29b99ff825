import pytest

from src.core.exceptions import FetchFailedError
from src.downloaders.base import BaseDownloadStrategy
from src.downloaders.http_downloader import HttpDownloader
from src.downloaders.youtube_stream import YouTubeStreamDownloader
from src.schemas.enums.pipeline_stage import PipelineStage
from src.schemas.models.common.source_locator import SourceLocator
from src.services.fetcher import Fetcher
from tests.data.fakes import FakeResponse, FakeSession, FakeYDLFactory

URL = "https://cdn.example.com/videos/clip.mp4"


class StubStrategy(BaseDownloadStrategy):
    def __init__(self, name, payload=b"data", error=None, supported=True):
        self.name = name
        self.payload = payload
        self.error = error
        self.supported = supported
        self.calls = []

    def supports(self, url):
        return self.supported

    def download(self, url, destination):
        self.calls.append(destination)
        destination.write_bytes(b"partial")
        if self.error is not None:
            raise self.error
        destination.write_bytes(self.payload)


class TestFetcher:
    def test_first_success_wins(self, work_dir):
        failing = StubStrategy("first", error=RuntimeError("stream blocked"))
        working = StubStrategy("second", payload=b"12345")
        never = StubStrategy("third")

        artifact = Fetcher([failing, working, never], work_dir).fetch(SourceLocator.remote_url(URL))

        assert artifact.owned is True
        assert artifact.size_bytes == 5
        assert artifact.path.parent == work_dir
        assert artifact.path.name.startswith("temp-")
        assert artifact.path.suffix == ".mp4"
        assert never.calls == []
        # 두 전략 모두 같은 목적지에 쓴다
        assert failing.calls == working.calls

    def test_all_failures_report_last_error(self, work_dir):
        first = StubStrategy("first", error=RuntimeError("stream blocked"))
        last = StubStrategy("second", error=ConnectionError("network down"))

        with pytest.raises(FetchFailedError) as exc_info:
            Fetcher([first, last], work_dir).fetch(SourceLocator.remote_url(URL))

        error = exc_info.value
        assert "network down" in str(error)
        assert error.original_error is last.error
        assert error.stage == PipelineStage.FETCHING
        # 부분 파일은 남아 있고, 삭제는 오케스트레이터 책임
        assert error.partial_path is not None
        assert error.partial_path.exists()

    def test_unsupported_strategies_are_skipped(self, work_dir):
        skipped = StubStrategy("skipped", supported=False)
        used = StubStrategy("used")

        Fetcher([skipped, used], work_dir).fetch(SourceLocator.remote_url(URL))

        assert skipped.calls == []
        assert len(used.calls) == 1

    def test_no_supporting_strategy(self, work_dir):
        with pytest.raises(FetchFailedError, match="No download strategy"):
            Fetcher([StubStrategy("x", supported=False)], work_dir).fetch(SourceLocator.remote_url(URL))

    def test_local_locator_is_rejected(self, work_dir, tmp_path):
        with pytest.raises(ValueError):
            Fetcher([], work_dir).fetch(SourceLocator.local_file(tmp_path / "a.mp4"))

    def test_destinations_are_unique(self, work_dir):
        fetcher = Fetcher([StubStrategy("s")], work_dir)
        paths = {fetcher.fetch(SourceLocator.remote_url(URL)).path for _ in range(20)}
        assert len(paths) == 20

    def test_youtube_stream_falls_back_to_http(self, work_dir):
        youtube_url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        ydl = FakeYDLFactory(download_error=RuntimeError("Sign in to confirm you're not a bot"))
        session = FakeSession(get_responses=[FakeResponse(200, chunks=[b"fallback-bytes"])])
        strategies = [
            YouTubeStreamDownloader(max_file_size=1024, retry_wait_seconds=0, ydl_factory=ydl),
            HttpDownloader(session=session, max_file_size=1024, retry_wait_seconds=0),
        ]

        artifact = Fetcher(strategies, work_dir).fetch(SourceLocator.remote_url(youtube_url))

        assert ydl.download_calls == 1
        assert session.get_calls[0]["url"] == youtube_url
        assert artifact.path.read_bytes() == b"fallback-bytes"

    def test_failed_stream_attempt_leaves_only_the_artifact(self, work_dir):
        youtube_url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        ydl = FakeYDLFactory(partial_bytes=b"\x00" * 512, download_error=TimeoutError("Stream download exceeded 300s timeout"))
        session = FakeSession(get_responses=[FakeResponse(200, chunks=[b"fallback-bytes"])])
        strategies = [
            YouTubeStreamDownloader(max_file_size=1024, retry_wait_seconds=0, ydl_factory=ydl),
            HttpDownloader(session=session, max_file_size=1024, retry_wait_seconds=0),
        ]

        artifact = Fetcher(strategies, work_dir).fetch(SourceLocator.remote_url(youtube_url))

        assert sorted(p.name for p in work_dir.iterdir()) == [artifact.path.name]
