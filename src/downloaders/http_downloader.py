"""Generic HTTP(S) download strategy"""

import logging
import time
from pathlib import Path
from typing import Callable

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.downloaders.base import BaseDownloadStrategy

logger = logging.getLogger(__name__)


class HttpDownloader(BaseDownloadStrategy):
    """
    requests 기반 스트리밍 다운로드.
    시도마다 wall-clock 타임아웃을 적용하고, 실패 시 tenacity 로 재시도한다.
    (max_retries=3 이면 총 4회 시도)
    """

    name = "http"

    def __init__(
        self,
        session: requests.Session,
        max_file_size: int,
        timeout_seconds: float = 300.0,
        max_retries: int = 3,
        retry_wait_seconds: float = 1.0,
        chunk_size: int = 1024 * 1024,
        user_agent: str = "Mozilla/5.0",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.max_file_size = max_file_size
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_wait_seconds = retry_wait_seconds
        self.chunk_size = chunk_size
        self.user_agent = user_agent
        self.clock = clock

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1

    def supports(self, url: str) -> bool:
        return url.lower().startswith(("http://", "https://"))

    def download(self, url: str, destination: Path) -> None:
        retryer = Retrying(
            stop=stop_after_attempt(self.total_attempts),
            wait=wait_exponential(multiplier=self.retry_wait_seconds, max=30),
            retry=retry_if_exception_type(requests.RequestException),
            before_sleep=self._log_failed_attempt,
            reraise=True,
        )
        try:
            written = retryer(self._download_once, url, destination)
        except requests.RequestException as e:
            logger.error(f"Download failed after {self.total_attempts} attempts: {e}")
            raise

        logger.info(f"Downloaded {written} bytes from {url} to {destination}")

    def _download_once(self, url: str, destination: Path) -> int:
        """한 번의 GET 시도. 받은 바이트 수를 반환한다."""
        deadline = self.clock() + self.timeout_seconds
        written = 0

        with self.session.get(
            url,
            headers={"User-Agent": self.user_agent},
            stream=True,
            timeout=self.timeout_seconds,
        ) as response:
            if not response.ok:
                raise requests.HTTPError(f"HTTP error! status: {response.status_code}", response=response)

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if self.clock() > deadline:
                        raise requests.Timeout(f"Download exceeded {self.timeout_seconds:.0f}s timeout")
                    if not chunk:
                        continue
                    f.write(chunk)
                    written += len(chunk)
                    # 상한을 넘으면 더 받지 않는다. 검증 단계에서 SizeExceeded 로 거부됨
                    if written > self.max_file_size:
                        logger.warning(
                            f"Download from {url} passed the {self.max_file_size} byte limit, stopping transfer"
                        )
                        break

        return written

    def _log_failed_attempt(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"Download attempt failed ({retry_state.attempt_number}/{self.total_attempts}): {error}"
        )
