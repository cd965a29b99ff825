from pydantic import BaseModel, Field


class PublishResult(BaseModel):
    platform_id: str = Field(..., description="Platform-assigned video identifier")
