import logging
import os
from pathlib import Path
from typing import Optional

from src.core.exceptions import EmptyArtifactError, SizeExceededError
from src.schemas.models.common.transient_artifact import TransientArtifact
from src.utils.artifact_paths import build_artifact_path

logger = logging.getLogger(__name__)


class ArtifactLifecycle:
    """
    임시 비디오 파일의 생성 경로, 검증, 삭제를 담당한다.
    요청이 끝나면(성공/실패 무관) 파이프라인이 만든 임시 파일은 남지 않아야 한다.
    """

    def __init__(self, work_dir, max_file_size: int):
        self.work_dir = Path(work_dir)
        self.max_file_size = max_file_size

    def allocate_path(self) -> Path:
        """작업 디렉토리 내 고유 경로 (디렉토리 자동 생성)"""
        return build_artifact_path(self.work_dir)

    def adopt(self, path) -> TransientArtifact:
        """
        호출자가 넘긴 로컬 파일을 artifact 로 감싼다.
        owned=False 이므로 검증 실패나 release 시에도 삭제하지 않는다.
        """
        path = Path(path)
        size = path.stat().st_size if path.exists() else 0
        return TransientArtifact(path=path, size_bytes=size, owned=False)

    def verify(self, artifact: TransientArtifact) -> TransientArtifact:
        """
        실제 파일 크기를 다시 읽어 검증한다 (헤더 값은 신뢰하지 않음).

        Args:
            artifact: 검증할 artifact

        Returns:
            TransientArtifact: 실제 크기가 반영된 artifact

        Raises:
            EmptyArtifactError: 파일이 없거나 0 byte
            SizeExceededError: 최대 용량 초과
        """
        try:
            size = os.path.getsize(artifact.path)
        except FileNotFoundError:
            self._discard(artifact)
            raise EmptyArtifactError(f"Video file not found: {artifact.path.name}")

        if size > self.max_file_size:
            self._discard(artifact)
            raise SizeExceededError(
                f"Video size ({size} bytes) exceeds {self.max_file_size // (1024 * 1024)}MB limit"
            )

        if size == 0:
            self._discard(artifact)
            raise EmptyArtifactError()

        logger.info(f"Verified artifact {artifact.path.name}: {size} bytes")
        return artifact.model_copy(update={"size_bytes": size})

    def release(self, artifact: Optional[TransientArtifact]) -> None:
        """파이프라인 소유 artifact 를 삭제한다. 이미 없으면 아무것도 하지 않는다."""
        if artifact is None:
            return
        if not artifact.owned:
            logger.debug(f"Skipping release of caller-owned file: {artifact.path}")
            return
        self.release_path(artifact.path)

    def release_path(self, path) -> None:
        """
        경로의 파일을 삭제한다 (idempotent).
        삭제 실패는 로그만 남기고 원래 에러를 가리지 않도록 예외를 올리지 않는다.
        """
        if path is None:
            return
        try:
            os.remove(path)
            logger.info(f"Cleaned up temporary file: {path}")
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error(f"Error cleaning up file {path}: {e}")

    def _discard(self, artifact: TransientArtifact) -> None:
        if artifact.owned:
            self.release_path(artifact.path)
