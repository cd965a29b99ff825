from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.schemas.enums.source_kind import SourceKind


class SourceLocator(BaseModel):
    """요청 단위로 생성되는 비디오 소스 참조 (로컬 경로 또는 원격 URL)"""

    model_config = ConfigDict(frozen=True)

    kind: SourceKind = Field(..., description="Source kind (LOCAL_FILE or REMOTE_URL)")
    path: Optional[Path] = Field(default=None, description="Local file path (LOCAL_FILE only)")
    url: Optional[str] = Field(default=None, description="Remote URL (REMOTE_URL only)")

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "SourceLocator":
        if self.kind == SourceKind.LOCAL_FILE and self.path is None:
            raise ValueError("LOCAL_FILE locator requires a path")
        if self.kind == SourceKind.REMOTE_URL and not self.url:
            raise ValueError("REMOTE_URL locator requires a url")
        return self

    @classmethod
    def local_file(cls, path) -> "SourceLocator":
        return cls(kind=SourceKind.LOCAL_FILE, path=Path(path))

    @classmethod
    def remote_url(cls, url: str) -> "SourceLocator":
        return cls(kind=SourceKind.REMOTE_URL, url=url.strip())
