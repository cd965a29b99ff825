from pydantic import BaseModel, Field

from .publish_result import PublishResult
from .video_metadata import VideoMetadata


class PipelineResult(BaseModel):
    """파이프라인 완료(DONE) 결과"""

    publish_result: PublishResult = Field(..., description="Result of the publish call")
    metadata: VideoMetadata = Field(..., description="Metadata actually used for publishing")
