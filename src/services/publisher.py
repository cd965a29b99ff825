import logging
import mimetypes
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload

from src.core.exceptions import UploadFailedError
from src.schemas.enums.mime_type import MimeType
from src.schemas.enums.privacy_status import PrivacyStatus
from src.schemas.models.common.publish_result import PublishResult
from src.schemas.models.common.video_metadata import VideoMetadata

logger = logging.getLogger(__name__)


class YouTubePublisher:
    """
    YouTube Data API v3 videos.insert 호출을 전담한다.
    이 계층에서는 재시도하지 않는다. 실패는 즉시 UploadFailedError 로 전달된다.
    """

    def __init__(
        self,
        credentials_provider: Callable[[], Optional[Credentials]],
        privacy_status: PrivacyStatus = PrivacyStatus.PRIVATE,
        service_builder: Callable[..., Any] = build,
    ):
        self.credentials_provider = credentials_provider
        self.privacy_status = PrivacyStatus(privacy_status)
        self._service_builder = service_builder

    def publish(self, local_path, metadata: VideoMetadata) -> PublishResult:
        credentials = self.credentials_provider()
        if credentials is None:
            raise UploadFailedError("YouTube API error: not authenticated, complete the OAuth flow at /auth first")

        path = Path(local_path)
        media = None
        try:
            youtube = self._service_builder("youtube", "v3", credentials=credentials, cache_discovery=False)
            media = MediaFileUpload(
                str(path),
                mimetype=mimetypes.guess_type(str(path))[0] or MimeType.VIDEO_ANY.value,
                chunksize=-1,
                resumable=True,
            )
            request = youtube.videos().insert(
                part="snippet,status",
                body=self._build_request_body(metadata),
                media_body=media,
            )
            logger.info(f"Uploading {path.name} to YouTube ({self.privacy_status.value})")
            response = request.execute()
        except Exception as e:
            logger.error(f"YouTube upload failed for {path.name}: {e}")
            raise UploadFailedError(f"YouTube API error: {e}", original_error=e) from e
        finally:
            if media is not None:
                media.stream().close()

        video_id = (response or {}).get("id")
        if not video_id:
            raise UploadFailedError("YouTube API error: response did not include a video id")

        logger.info(f"YouTube upload completed: {video_id}")
        return PublishResult(platform_id=video_id)

    def _build_request_body(self, metadata: VideoMetadata) -> Dict[str, Any]:
        return {
            "snippet": {
                "title": metadata.title,
                "description": metadata.description,
                "tags": metadata.tags,
            },
            "status": {
                "privacyStatus": self.privacy_status.value,
            },
        }
