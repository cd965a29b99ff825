from typing import Optional

from pydantic import BaseModel, Field


class ValidationOutcome(BaseModel):
    """SourceResolver 검증 결과"""

    valid: bool = Field(..., description="Whether the source passed validation")
    reason: Optional[str] = Field(default=None, description="Human readable reason when invalid")

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationOutcome":
        return cls(valid=False, reason=reason)
