import pytest

from src.core.exceptions import UploadFailedError
from src.schemas.enums.pipeline_stage import PipelineStage
from src.schemas.enums.privacy_status import PrivacyStatus
from src.schemas.models.common.video_metadata import VideoMetadata
from src.services.publisher import YouTubePublisher
from tests.data.fakes import FakeYouTubeService


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00" * 256)
    return path


@pytest.fixture
def metadata():
    return VideoMetadata(title="Cat Compilation", description="Cats doing things.", tags=["cats", "funny"])


def _publisher(youtube, credentials=object(), privacy_status=PrivacyStatus.PRIVATE):
    return YouTubePublisher(
        credentials_provider=lambda: credentials,
        privacy_status=privacy_status,
        service_builder=youtube.build,
    )


class TestYouTubePublisher:
    def test_publish_sends_metadata_unmodified(self, video_file, metadata):
        youtube = FakeYouTubeService(response={"id": "abc123"})

        result = _publisher(youtube).publish(video_file, metadata)

        assert result.platform_id == "abc123"
        assert len(youtube.insert_calls) == 1
        call = youtube.insert_calls[0]
        assert call["part"] == "snippet,status"
        assert call["body"] == {
            "snippet": {"title": "Cat Compilation", "description": "Cats doing things.", "tags": ["cats", "funny"]},
            "status": {"privacyStatus": "private"},
        }
        assert call["media_body"].mimetype() == "video/mp4"
        assert youtube.build_calls[0]["service_name"] == "youtube"
        assert youtube.build_calls[0]["version"] == "v3"

    def test_privacy_status_is_configurable(self, video_file, metadata):
        youtube = FakeYouTubeService()
        _publisher(youtube, privacy_status="unlisted").publish(video_file, metadata)
        assert youtube.insert_calls[0]["body"]["status"]["privacyStatus"] == "unlisted"

    def test_api_error_is_not_retried(self, video_file, metadata):
        youtube = FakeYouTubeService(error=RuntimeError("quotaExceeded"))

        with pytest.raises(UploadFailedError, match="YouTube API error: quotaExceeded") as exc_info:
            _publisher(youtube).publish(video_file, metadata)

        assert len(youtube.insert_calls) == 1
        assert exc_info.value.stage == PipelineStage.PUBLISHING
        assert exc_info.value.status_code == 500

    def test_missing_credentials(self, video_file, metadata):
        youtube = FakeYouTubeService()

        with pytest.raises(UploadFailedError, match="not authenticated"):
            _publisher(youtube, credentials=None).publish(video_file, metadata)

        assert youtube.insert_calls == []

    def test_response_without_id(self, video_file, metadata):
        youtube = FakeYouTubeService(response={"kind": "youtube#video"})
        with pytest.raises(UploadFailedError, match="video id"):
            _publisher(youtube).publish(video_file, metadata)
