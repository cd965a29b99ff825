from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class PublishRequest(BaseModel):
    """HTTP 계층에서 오케스트레이터로 전달되는 입력"""

    title: Optional[str] = Field(default=None, description="Original video title")
    video_url: Optional[str] = Field(default=None, description="Remote video URL")
    uploaded_file_path: Optional[Path] = Field(default=None, description="Caller-owned local file path")
