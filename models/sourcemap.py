from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from datetime import datetime


class SourcemapDocument(BaseModel):
    """Decoded sourcemap. Only the embedded sources are of interest."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    sources: List[str]
    sources_content: List[Optional[str]] = Field(alias="sourcesContent")

    @model_validator(mode="after")
    def check_alignment(self):
        if len(self.sources) != len(self.sources_content):
            raise ValueError(
                f"sources ({len(self.sources)}) and sourcesContent "
                f"({len(self.sources_content)}) differ in length"
            )
        return self

    def embedded_sources(self):
        """Yields (source, content) pairs that carry content."""
        for source, content in zip(self.sources, self.sources_content):
            if not content:
                continue
            yield source, content


class FileOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    is_changed: bool
    # Only set when an existing file was overwritten
    previous_modified: Optional[datetime] = None

    @property
    def is_new(self) -> bool:
        return self.is_changed and self.previous_modified is None


class ExtractionOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    success: bool = True
    error: Optional[str] = None
    files: List[FileOutcome] = Field(default_factory=list)

    @property
    def changed_files(self) -> List[FileOutcome]:
        return [f for f in self.files if f.is_changed]

    @classmethod
    def failure(cls, url: str, error: str) -> "ExtractionOutcome":
        return cls(url=url, success=False, error=error)
