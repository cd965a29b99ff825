"""
HttpDownloader 재시도 / 타임아웃 / 용량 상한 테스트

재시도 규약: max_retries=3 -> 총 4회 시도, 재시도 직전마다 경고 1회 (마지막 실패는 error 로그)
"""
import pytest
import requests

from src.downloaders.http_downloader import HttpDownloader
from tests.data.fakes import FakeResponse, FakeSession

URL = "https://cdn.example.com/videos/clip.mp4"


def _downloader(session, **kwargs):
    kwargs.setdefault("max_file_size", 1024 * 1024)
    kwargs.setdefault("retry_wait_seconds", 0)
    return HttpDownloader(session=session, **kwargs)


def _attempt_warnings(caplog):
    return [r for r in caplog.records if r.levelname == "WARNING" and "Download attempt failed" in r.getMessage()]


class TestHttpDownloader:
    def test_success_streams_to_destination(self, tmp_path):
        session = FakeSession(get_responses=[FakeResponse(200, chunks=[b"abc", b"", b"def"])])
        destination = tmp_path / "clip.mp4"

        _downloader(session, user_agent="TestAgent/1.0").download(URL, destination)

        assert destination.read_bytes() == b"abcdef"
        call = session.get_calls[0]
        assert call["stream"] is True
        assert call["headers"]["User-Agent"] == "TestAgent/1.0"
        assert call["timeout"] == 300.0

    def test_transient_failures_are_retried(self, tmp_path, caplog):
        session = FakeSession(get_responses=[
            requests.ConnectionError("connection reset"),
            FakeResponse(503),
            FakeResponse(200, chunks=[b"ok"]),
        ])
        destination = tmp_path / "clip.mp4"

        with caplog.at_level("WARNING"):
            _downloader(session).download(URL, destination)

        assert destination.read_bytes() == b"ok"
        assert len(session.get_calls) == 3
        warnings = _attempt_warnings(caplog)
        assert len(warnings) == 2
        assert "(1/4)" in warnings[0].getMessage()
        assert "HTTP error! status: 503" in warnings[1].getMessage()

    def test_exhausted_retries_surface_last_error(self, tmp_path, caplog):
        session = FakeSession(get_responses=[FakeResponse(500)])

        with caplog.at_level("WARNING"):
            with pytest.raises(requests.HTTPError, match="status: 500"):
                _downloader(session).download(URL, tmp_path / "clip.mp4")

        # 초기 1회 + 재시도 3회
        assert len(session.get_calls) == 4
        assert len(_attempt_warnings(caplog)) == 3
        assert any(r.levelname == "ERROR" and "after 4 attempts" in r.getMessage() for r in caplog.records)

    def test_wall_clock_timeout_counts_as_failed_attempt(self, tmp_path):
        ticks = iter(range(0, 10_000, 100))
        session = FakeSession(get_responses=[FakeResponse(200, chunks=[b"a", b"b", b"c"])])
        downloader = _downloader(session, timeout_seconds=150, clock=lambda: next(ticks))

        with pytest.raises(requests.Timeout, match="150s timeout"):
            downloader.download(URL, tmp_path / "clip.mp4")

        assert len(session.get_calls) == 4

    def test_stops_after_size_ceiling_without_retry(self, tmp_path):
        session = FakeSession(get_responses=[FakeResponse(200, chunks=[b"x" * 8] * 5)])
        destination = tmp_path / "clip.mp4"

        _downloader(session, max_file_size=10).download(URL, destination)

        # 상한 + 1 chunk 까지만 기록된다 (검증 단계에서 거부)
        assert destination.stat().st_size == 16
        assert len(session.get_calls) == 1

    def test_supports_http_only(self):
        downloader = _downloader(FakeSession())
        assert downloader.supports("https://example.com/a.mp4")
        assert downloader.supports("HTTP://example.com/a.mp4")
        assert not downloader.supports("ftp://example.com/a.mp4")
