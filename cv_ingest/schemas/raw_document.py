"""Input document and extraction-stage schemas."""

from enum import Enum
from pathlib import PurePath
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExtractionBackend(str, Enum):
    """Text extraction backends, in cascade order."""

    PLAIN = "plain"
    PDF_TEXT = "pdf_text"
    DOCX_TEXT = "docx_text"
    OLE_DOC = "ole_doc"
    GENERIC_FALLBACK = "generic_fallback"
    OCR = "ocr"


class RawDocument(BaseModel):
    """Uploaded document as handed over by the caller. Never persisted by the pipeline."""

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(default=b"", description="Raw file bytes, already read by the caller")
    declared_mime_type: str = Field(default="", description="MIME type declared by the upload")
    file_name: Optional[str] = Field(default=None, description="Original file name, if known")
    file_extension: str = Field(default="", description="Lowercase extension with leading dot, e.g. '.pdf'")

    @model_validator(mode="before")
    @classmethod
    def _derive_extension(cls, data):
        if isinstance(data, dict):
            ext = (data.get("file_extension") or "").strip().lower()
            name = data.get("file_name")
            if not ext and name:
                ext = PurePath(str(name)).suffix.lower()
            if ext and not ext.startswith("."):
                ext = "." + ext
            data = {**data, "file_extension": ext}
        return data


class BackendAttempt(BaseModel):
    """One cascade attempt, successful or not."""

    backend: ExtractionBackend
    succeeded: bool
    error: Optional[str] = Field(default=None, description="Failure reason when succeeded is False")
    detail: Optional[str] = Field(default=None, description="Tier or encoding that produced the text, e.g. piece_table")
    chars: int = Field(default=0, description="Length of the extracted text")
    duration_ms: float = Field(default=0.0, description="Wall time spent in the backend")


class ExtractionResult(BaseModel):
    """Outcome of the extraction cascade; text is empty only when success is False."""

    text: str = ""
    backend_used: Optional[ExtractionBackend] = None
    success: bool = False
    attempts: List[BackendAttempt] = Field(default_factory=list)


class NormalizedText(BaseModel):
    """Cleaned text plus its ordered, non-empty, trimmed lines."""

    cleaned_text: str = ""
    lines: List[str] = Field(default_factory=list)
