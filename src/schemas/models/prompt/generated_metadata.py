from typing import List

from pydantic import BaseModel, Field


class GeneratedMetadata(BaseModel):
    """YouTube SEO metadata response model"""

    title: str = Field(..., description="Engaging version of the input title")
    description: str = Field(..., description="Compelling description, 2-3 paragraphs")
    tags: List[str] = Field(..., description="15-20 relevant keywords")
