"""YouTube combined audio+video stream strategy (yt-dlp)"""

import glob
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_exponential
from yt_dlp import YoutubeDL
from yt_dlp.extractor.youtube import YoutubeIE

from src.downloaders.base import BaseDownloadStrategy

logger = logging.getLogger(__name__)

# yt-dlp 가 다운로드 중 destination 옆에 만드는 임시 파일
SIDECAR_SUFFIXES = (".part", ".ytdl")


class YouTubeStreamDownloader(BaseDownloadStrategy):
    """
    YouTube 링크 전용 전략.
    SourceResolver 의 사전 검증(probe)과 Fetcher 의 다운로드 모두에 사용된다.
    """

    name = "youtube"

    def __init__(
        self,
        max_file_size: int,
        timeout_seconds: float = 300.0,
        max_retries: int = 3,
        retry_wait_seconds: float = 1.0,
        ydl_factory: Callable[[Dict[str, Any]], Any] = YoutubeDL,
    ):
        self.max_file_size = max_file_size
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_wait_seconds = retry_wait_seconds
        self.ydl_factory = ydl_factory

    def supports(self, url: str) -> bool:
        if not url:
            return False
        return bool(YoutubeIE.suitable(url.strip()))

    def probe(self, url: str) -> Dict[str, Any]:
        """
        본문 전송 없이 영상 정보(포맷 목록 포함)를 가져온다.

        Args:
            url: YouTube URL

        Returns:
            Dict: yt-dlp info dict

        Raises:
            Exception: 재시도를 모두 소진한 경우 마지막 에러
        """
        retryer = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_wait_seconds, max=30),
            before_sleep=self._log_failed_probe,
            reraise=True,
        )
        return retryer(self._extract_info, url)

    def _extract_info(self, url: str) -> Dict[str, Any]:
        opts = {"quiet": True, "no_warnings": True, "skip_download": True, "noplaylist": True}
        with self.ydl_factory(opts) as ydl:
            info = ydl.extract_info(url, download=False)
        if not info:
            raise ValueError("No video information returned")
        return info

    @staticmethod
    def select_format(formats: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
        """audio+video 결합 포맷 중 최고 화질(height, tbr 순)을 고른다."""
        combined = [
            fmt for fmt in formats or []
            if fmt.get("vcodec") not in (None, "none") and fmt.get("acodec") not in (None, "none")
        ]
        if not combined:
            return None
        return max(combined, key=lambda fmt: (fmt.get("height") or 0, fmt.get("tbr") or 0))

    @staticmethod
    def declared_size(fmt: Dict[str, Any]) -> Optional[int]:
        size = fmt.get("filesize") or fmt.get("filesize_approx")
        return int(size) if size else None

    def format_selector(self, ctx: Dict[str, Any]):
        """yt-dlp `format` 옵션용 selector. probe 와 같은 select_format 기준으로 고른다."""
        fmt = self.select_format(ctx.get("formats"))
        if fmt is not None:
            yield fmt

    def download(self, url: str, destination: Path) -> None:
        destination = Path(destination)
        deadline = time.monotonic() + self.timeout_seconds

        def _enforce_deadline(progress: Dict[str, Any]) -> None:
            if time.monotonic() > deadline:
                raise TimeoutError(f"Stream download exceeded {self.timeout_seconds:.0f}s timeout")

        opts = {
            "format": self.format_selector,
            "outtmpl": str(destination),
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "noplaylist": True,
            "overwrites": True,
            # .part 파일 없이 destination 에 바로 기록
            "nopart": True,
            "max_filesize": self.max_file_size,
            "progress_hooks": [_enforce_deadline],
        }
        try:
            with self.ydl_factory(opts) as ydl:
                retcode = ydl.download([url])
        finally:
            self._remove_sidecars(destination)

        if retcode:
            raise RuntimeError(f"yt-dlp exited with code {retcode}")
        # max_filesize 초과 시 yt-dlp 는 에러 없이 건너뛴다
        if not destination.exists():
            raise FileNotFoundError(f"yt-dlp did not produce {destination}")

        logger.info(f"Downloaded YouTube stream {url} to {destination}")

    @staticmethod
    def _remove_sidecars(destination: Path) -> None:
        """yt-dlp 가 destination 옆에 남기는 .part / .part-Frag* / .ytdl 파일 정리"""
        for sidecar in destination.parent.glob(f"{glob.escape(destination.name)}.*"):
            if not sidecar.name[len(destination.name):].startswith(SIDECAR_SUFFIXES):
                continue
            try:
                sidecar.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.error(f"Error cleaning up file {sidecar}: {e}")

    def _log_failed_probe(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"YouTube info attempt failed ({retry_state.attempt_number}/{self.max_retries + 1}): {error}"
        )
