from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class TransientArtifact(BaseModel):
    """
    요청 하나가 소유하는 임시 비디오 파일.
    owned=True 인 파일만 파이프라인이 삭제한다 (호출자가 넘긴 파일은 삭제하지 않음).
    """

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Local file path")
    size_bytes: int = Field(default=0, description="File size in bytes")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation time (UTC)"
    )
    owned: bool = Field(default=True, description="Whether the pipeline owns (and deletes) the file")
