from pydantic import BaseModel, ConfigDict, Field

from src.schemas.models.common.video_metadata import VideoMetadata


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, description="Whether the upload succeeded")
    video_id: str = Field(..., alias="videoId", description="YouTube video id")
    metadata: VideoMetadata = Field(..., description="Metadata used for the upload")
