"""Process-wide clients and services, built once at startup and injected into the pipeline"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from src.core.config import Settings
from src.downloaders.http_downloader import HttpDownloader
from src.downloaders.youtube_stream import YouTubeStreamDownloader
from src.schemas.enums.privacy_status import PrivacyStatus
from src.services.artifact_lifecycle import ArtifactLifecycle
from src.services.auth_service import YouTubeAuthService
from src.services.fetcher import Fetcher
from src.services.metadata_service import MetadataService
from src.services.orchestrator import PipelineOrchestrator
from src.services.publisher import YouTubePublisher
from src.services.source_resolver import SourceResolver

logger = logging.getLogger(__name__)


def create_openai_client(settings: Settings) -> Optional[Any]:
    """
    OpenAI 클라이언트 초기화.
    API 키가 없거나 초기화에 실패하면 None 을 반환한다 (메타데이터는 fallback 사용).
    """
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set, metadata generation will use the fallback")
        return None

    try:
        import openai
    except ImportError as e:
        raise ImportError(
            "openai package is not installed. "
            "Install it with: pip install openai"
        ) from e

    try:
        client = openai.OpenAI(api_key=settings.OPENAI_API_KEY)
        logger.info("OpenAI client initialized successfully.")
        return client
    except Exception as e:
        logger.warning(f"OpenAI initialization failed: {e}")
        return None


def create_http_session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": settings.USER_AGENT})
    return session


@dataclass
class ServiceContainer:
    settings: Settings
    http_session: requests.Session
    openai_client: Optional[Any]
    auth_service: YouTubeAuthService
    lifecycle: ArtifactLifecycle
    orchestrator: PipelineOrchestrator

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        logger.info("Initializing service container...")

        http_session = create_http_session(settings)
        openai_client = create_openai_client(settings)

        auth_service = YouTubeAuthService(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            redirect_uri=settings.GOOGLE_REDIRECT_URI,
            scopes=settings.YOUTUBE_SCOPES,
        )
        if not auth_service.is_configured():
            logger.warning("Google OAuth client is not configured, uploads will fail until it is")

        stream_platform = YouTubeStreamDownloader(
            max_file_size=settings.MAX_FILE_SIZE,
            timeout_seconds=settings.DOWNLOAD_TIMEOUT_SECONDS,
            max_retries=settings.MAX_RETRIES,
            retry_wait_seconds=settings.RETRY_WAIT_SECONDS,
        )
        http_downloader = HttpDownloader(
            session=http_session,
            max_file_size=settings.MAX_FILE_SIZE,
            timeout_seconds=settings.DOWNLOAD_TIMEOUT_SECONDS,
            max_retries=settings.MAX_RETRIES,
            retry_wait_seconds=settings.RETRY_WAIT_SECONDS,
            chunk_size=settings.DOWNLOAD_CHUNK_SIZE,
            user_agent=settings.USER_AGENT,
        )

        lifecycle = ArtifactLifecycle(work_dir=settings.UPLOAD_DIR, max_file_size=settings.MAX_FILE_SIZE)
        orchestrator = PipelineOrchestrator(
            resolver=SourceResolver(
                session=http_session,
                stream_platform=stream_platform,
                max_file_size=settings.MAX_FILE_SIZE,
                probe_timeout_seconds=settings.PROBE_TIMEOUT_SECONDS,
                user_agent=settings.USER_AGENT,
            ),
            # 순서 중요: YouTube 스트림 우선, 실패 시 일반 HTTP 다운로드
            fetcher=Fetcher(strategies=[stream_platform, http_downloader], work_dir=settings.UPLOAD_DIR),
            lifecycle=lifecycle,
            publisher=YouTubePublisher(
                credentials_provider=auth_service.get_credentials,
                privacy_status=PrivacyStatus(settings.VIDEO_PRIVACY_STATUS),
            ),
            metadata_service=MetadataService(client=openai_client, model_name=settings.OPENAI_MODEL),
        )

        logger.info("Service container initialized successfully.")
        return cls(
            settings=settings,
            http_session=http_session,
            openai_client=openai_client,
            auth_service=auth_service,
            lifecycle=lifecycle,
            orchestrator=orchestrator,
        )

    def close(self) -> None:
        """Shutdown 시 네트워크 클라이언트 정리"""
        self.http_session.close()
        if self.openai_client is not None:
            try:
                self.openai_client.close()
            except Exception as e:
                logger.warning(f"Failed to close OpenAI client: {e}")
        logger.info("Service container closed.")
