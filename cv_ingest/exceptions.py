"""Error taxonomy for the CV ingestion pipeline.

Only the caller-side upload check raises to the outside. Backend failures stay inside the
extraction cascade, and an unextractable document is reported as a ParseOutcome, not raised.
"""

from typing import Optional


class CVIngestError(Exception):
    """Base class for every error raised by cv_ingest."""


class BackendFailure(CVIngestError):
    """A single extraction backend raised or produced no text. Caught by the cascade."""

    def __init__(self, backend: str, message: str):
        super().__init__(f"{backend}: {message}")
        self.backend = backend
        self.message = message


class OcrTimeout(BackendFailure):
    """OCR exceeded its time budget; handled exactly like any other OCR failure."""

    def __init__(self, timeout_seconds: float):
        super().__init__("ocr", f"timed out after {timeout_seconds:.1f}s")
        self.timeout_seconds = timeout_seconds


class UnsupportedUpload(CVIngestError):
    """Upload rejected by the caller-side validator (size, extension or MIME mismatch)."""

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.file_name = file_name
