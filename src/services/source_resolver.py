import logging
from typing import Optional

import requests

from src.downloaders.youtube_stream import YouTubeStreamDownloader
from src.schemas.enums.mime_type import MimeType
from src.schemas.models.common.validation_outcome import ValidationOutcome

logger = logging.getLogger(__name__)


class SourceResolver:
    """
    원격 비디오 소스를 다운로드 전에 검증한다.
    YouTube 링크는 포맷 정보를 probe 하고, 그 외 URL 은 HEAD 요청으로 확인한다.
    파일시스템에는 아무것도 쓰지 않는다.
    """

    def __init__(
        self,
        session: requests.Session,
        stream_platform: YouTubeStreamDownloader,
        max_file_size: int,
        probe_timeout_seconds: float = 10.0,
        user_agent: str = "Mozilla/5.0",
    ):
        self.session = session
        self.stream_platform = stream_platform
        self.max_file_size = max_file_size
        self.probe_timeout_seconds = probe_timeout_seconds
        self.user_agent = user_agent

    @property
    def _size_limit_message(self) -> str:
        return f"Video size exceeds {self.max_file_size // (1024 * 1024)}MB limit"

    def resolve(self, locator: Optional[str]) -> ValidationOutcome:
        """
        URL 을 검증한다.

        Args:
            locator: 사용자가 전달한 URL 문자열

        Returns:
            ValidationOutcome: valid=False 이면 reason 에 사용자용 메시지
        """
        if not locator or not locator.strip():
            return ValidationOutcome.invalid("URL is required")

        url = locator.strip()

        if self.stream_platform.supports(url):
            return self._resolve_stream_platform(url)

        return self._resolve_direct_url(url)

    def _resolve_stream_platform(self, url: str) -> ValidationOutcome:
        try:
            info = self.stream_platform.probe(url)
        except Exception as e:
            logger.warning(f"YouTube probe failed for {url}: {e}")
            return ValidationOutcome.invalid(f"YouTube video validation failed: {e}")

        fmt = self.stream_platform.select_format(info.get("formats"))
        if fmt is None:
            return ValidationOutcome.invalid("YouTube video validation failed: No suitable video format found")

        size = self.stream_platform.declared_size(fmt)
        if size is not None and size > self.max_file_size:
            return ValidationOutcome.invalid(f"YouTube video validation failed: {self._size_limit_message}")

        logger.info(f"YouTube source validated: {url} (format {fmt.get('format_id')}, size {size})")
        return ValidationOutcome.ok()

    def _resolve_direct_url(self, url: str) -> ValidationOutcome:
        try:
            response = self.session.head(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.probe_timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            logger.warning(f"HEAD probe failed for {url}: {e}")
            return ValidationOutcome.invalid(f"URL validation failed: {e}")

        if not response.ok:
            return ValidationOutcome.invalid("Invalid video URL")

        content_type = response.headers.get("content-type")
        if not MimeType.is_video(content_type):
            return ValidationOutcome.invalid("URL does not point to a video file")

        # Content-Length 가 없으면 통과 (다운로드 후 다시 검사)
        content_length = response.headers.get("content-length")
        if content_length:
            try:
                declared = int(content_length)
            except ValueError:
                logger.warning(f"Ignoring malformed Content-Length '{content_length}' for {url}")
            else:
                if declared > self.max_file_size:
                    return ValidationOutcome.invalid(self._size_limit_message)

        logger.info(f"Direct video URL validated: {url} ({content_type}, {content_length or 'unknown'} bytes)")
        return ValidationOutcome.ok()
