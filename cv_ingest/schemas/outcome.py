"""Pipeline outcome and the diagnostics returned alongside it."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .parsed_document import ParsedDocument
from .raw_document import BackendAttempt, ExtractionBackend


class NameCandidate(BaseModel):
    """A name-shaped substring considered by the name resolver."""

    text: str
    line_index: int = Field(default=-1, description="Line the candidate came from; -1 when derived from email/filename")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    source: str = Field(default="contextual", description="Strategy that proposed the candidate")


class FailureReason(str, Enum):
    """Reasons a document produced no ParsedDocument."""

    UNEXTRACTABLE_DOCUMENT = "unextractable_document"


class ParseDiagnostics(BaseModel):
    """Inspectable trace of one parse: which backend won and how the name was chosen."""

    backend_used: Optional[ExtractionBackend] = None
    backend_attempts: List[BackendAttempt] = Field(default_factory=list)
    name_strategy: Optional[str] = None
    name_candidates: List[NameCandidate] = Field(default_factory=list)
    rejected_name_candidates: List[NameCandidate] = Field(default_factory=list)
    line_count: int = 0


class ParseOutcome(BaseModel):
    """Either a parsed document or an explicit failure reason, never both."""

    success: bool
    reason: Optional[FailureReason] = None
    document: Optional[ParsedDocument] = None
    diagnostics: ParseDiagnostics = Field(default_factory=ParseDiagnostics)

    @model_validator(mode="after")
    def _check_exclusive(self):
        if self.success and (self.document is None or self.reason is not None):
            raise ValueError("successful outcome needs a document and no reason")
        if not self.success and (self.reason is None or self.document is not None):
            raise ValueError("failed outcome needs a reason and no document")
        return self

    @property
    def needs_review(self) -> bool:
        """Parsed, but partial: no name, or neither an email nor any work history."""
        if not self.success or self.document is None:
            return False
        info = self.document.personal_info
        if not info.name:
            return True
        return not info.email and not self.document.work_experience
