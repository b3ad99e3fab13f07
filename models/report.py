from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from models.sourcemap import ExtractionOutcome


class FailedDownload(BaseModel):
    url: str
    error: str


class ChangeSet(BaseModel):
    # path -> previous modified time (None for new files)
    changed: Dict[str, Optional[datetime]] = Field(default_factory=dict)
    failed: List[FailedDownload] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.changed and not self.failed


class ChangeReport(BaseModel):
    commit_message: str
    notification_message: str
    changed_count: int = 0
    failed_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.changed_count == 0 and self.failed_count == 0


class RevisionsOutcome(BaseModel):
    success: bool = True
    error: Optional[str] = None
    paths: List[str] = Field(default_factory=list)
    skipped: bool = False


class SyncResult(BaseModel):
    outcomes: List[ExtractionOutcome] = Field(default_factory=list)
    report: ChangeReport
    revisions: RevisionsOutcome
    duration: float = 0.0
    persisted: bool = False
