"""Publishing pipeline 예외 정의"""

from pathlib import Path
from typing import Optional

from src.schemas.enums.pipeline_stage import PipelineStage


class PipelineError(Exception):
    """
    파이프라인 관련 기본 예외.
    status_code 로 "잘못된 입력(4xx)"과 "인프라 실패(5xx)"를 구분한다.
    """

    error: str = "Upload failed"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        stage: Optional[PipelineStage] = None,
        original_error: Optional[Exception] = None,
    ):
        self.stage = stage
        self.original_error = original_error
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


class MissingInputError(PipelineError):
    """파일과 URL 모두 없음"""

    error = "Missing video"
    status_code = 400

    def __init__(self, message: str = "Please provide either a video file or URL", **kwargs):
        kwargs.setdefault("stage", PipelineStage.IDLE)
        super().__init__(message, **kwargs)


class InvalidSourceError(PipelineError):
    """잘못된 URL / 용량 초과 / video 타입 아님"""

    error = "Invalid video URL"
    status_code = 400

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("stage", PipelineStage.VALIDATING)
        super().__init__(message, **kwargs)


class FetchFailedError(PipelineError):
    """재시도 소진 후 다운로드 실패 (network / timeout / HTTP status)"""

    error = "Download failed"

    def __init__(self, message: str, partial_path: Optional[Path] = None, **kwargs):
        kwargs.setdefault("stage", PipelineStage.FETCHING)
        self.partial_path = partial_path
        super().__init__(message, **kwargs)


class SizeExceededError(PipelineError):
    """다운로드된 파일이 최대 용량 초과"""

    error = "Video too large"

    def __init__(self, message: str = "Downloaded video exceeds 128MB limit", **kwargs):
        kwargs.setdefault("stage", PipelineStage.VERIFYING)
        super().__init__(message, **kwargs)


class EmptyArtifactError(PipelineError):
    """다운로드된 파일이 비어 있거나 존재하지 않음"""

    error = "Empty video"

    def __init__(self, message: str = "Downloaded file is empty", **kwargs):
        kwargs.setdefault("stage", PipelineStage.VERIFYING)
        super().__init__(message, **kwargs)


class UploadFailedError(PipelineError):
    """YouTube insert 호출 실패"""

    error = "Upload failed"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("stage", PipelineStage.PUBLISHING)
        super().__init__(message, **kwargs)


class MetadataGenerationError(PipelineError):
    """메타데이터 생성 실패. 파이프라인 내부에서 fallback 으로 복구되며 외부로 노출되지 않는다."""

    error = "Metadata generation failed"

    def __init__(self, message: str = "Metadata generation failed", **kwargs):
        super().__init__(message, **kwargs)


class AuthenticationError(Exception):
    """OAuth code 교환 실패"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)
