from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Short error title")
    details: Optional[str] = Field(default=None, description="Human readable detail from the innermost cause")
