import logging
import uuid
from typing import Optional

from src.core.exceptions import (
    FetchFailedError,
    InvalidSourceError,
    MissingInputError,
    PipelineError,
)
from src.schemas.enums.pipeline_stage import PipelineStage
from src.schemas.models.common.pipeline_result import PipelineResult
from src.schemas.models.common.publish_request import PublishRequest
from src.schemas.models.common.source_locator import SourceLocator
from src.schemas.models.common.transient_artifact import TransientArtifact
from src.schemas.models.common.video_metadata import VideoMetadata
from src.services.artifact_lifecycle import ArtifactLifecycle
from src.services.fetcher import Fetcher
from src.services.metadata_service import MetadataService
from src.services.publisher import YouTubePublisher
from src.services.source_resolver import SourceResolver

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled video"


class PipelineOrchestrator:
    """
    Coordinates one publishing request: validate -> fetch or accept local -> verify -> publish -> cleanup.
    Holds no per-request state on the instance, so one orchestrator serves concurrent requests.
    """

    def __init__(
        self,
        resolver: SourceResolver,
        fetcher: Fetcher,
        lifecycle: ArtifactLifecycle,
        publisher: YouTubePublisher,
        metadata_service: MetadataService,
    ):
        self.resolver = resolver
        self.fetcher = fetcher
        self.lifecycle = lifecycle
        self.publisher = publisher
        self.metadata_service = metadata_service

    def run(self, request: PublishRequest) -> PipelineResult:
        """
        Executes the pipeline for a single request.

        Returns:
            PipelineResult: platform id and the metadata actually used

        Raises:
            PipelineError: any stage failure (MissingInput / InvalidSource are 4xx, the rest 5xx)
        """
        run_id = uuid.uuid4().hex[:8]
        stage = PipelineStage.IDLE
        video_url = (request.video_url or "").strip() or None
        artifact: Optional[TransientArtifact] = None

        if not video_url and request.uploaded_file_path is None:
            logger.info(f"[{run_id}] {stage.value} -> {PipelineStage.FAILED.value}: missing input")
            raise MissingInputError()

        try:
            # 1. Validating
            stage = self._transition(run_id, stage, PipelineStage.VALIDATING)
            if video_url:
                outcome = self.resolver.resolve(video_url)
                if not outcome.valid:
                    raise InvalidSourceError(outcome.reason or "Invalid video URL")

            metadata = self._generate_metadata(request.title)

            # 2. Fetching (remote) / Resolving (local)
            if video_url:
                stage = self._transition(run_id, stage, PipelineStage.FETCHING)
                try:
                    artifact = self.fetcher.fetch(SourceLocator.remote_url(video_url))
                except FetchFailedError as e:
                    self.lifecycle.release_path(e.partial_path)
                    raise
            else:
                stage = self._transition(run_id, stage, PipelineStage.RESOLVING)
                artifact = self.lifecycle.adopt(request.uploaded_file_path)

            # 3. Verifying (실패 시 verify 내부에서 이미 삭제됨)
            stage = self._transition(run_id, stage, PipelineStage.VERIFYING)
            artifact = self.lifecycle.verify(artifact)

            # 4. Publishing
            stage = self._transition(run_id, stage, PipelineStage.PUBLISHING)
            publish_result = self.publisher.publish(artifact.path, metadata)

            self._transition(run_id, stage, PipelineStage.DONE)
            return PipelineResult(publish_result=publish_result, metadata=metadata)

        except PipelineError as e:
            logger.error(f"[{run_id}] {stage.value} -> {PipelineStage.FAILED.value}: {e}")
            raise
        except Exception as e:
            logger.error(f"[{run_id}] Unexpected error during {stage.value}: {e}")
            raise PipelineError(f"Upload failed: {e}", stage=stage, original_error=e) from e
        finally:
            self.lifecycle.release(artifact)

    def _generate_metadata(self, title: Optional[str]) -> VideoMetadata:
        original = (title or "").strip() or DEFAULT_TITLE
        return self.metadata_service.generate(original)

    def _transition(self, run_id: str, current: PipelineStage, target: PipelineStage) -> PipelineStage:
        logger.info(f"[{run_id}] {current.value} -> {target.value}")
        return target
