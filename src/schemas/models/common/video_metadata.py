from typing import List

from pydantic import BaseModel, Field


class VideoMetadata(BaseModel):
    """Video metadata passed through unmodified to the publisher"""

    title: str = Field(..., description="Engaging version of the input title")
    description: str = Field(default="", description="Compelling 2-3 paragraph description")
    tags: List[str] = Field(default_factory=list, description="15-20 relevant keywords")

    @classmethod
    def fallback(cls, title: str) -> "VideoMetadata":
        """텍스트 생성 실패 시 사용하는 결정적(deterministic) 기본값"""
        return cls(title=title, description=f"Uploaded video: {title}", tags=[])
