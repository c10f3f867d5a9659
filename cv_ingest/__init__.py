"""cv_ingest: turn uploaded résumés (TXT/PDF/DOC/DOCX, images via OCR) into structured candidate records."""

from cv_ingest.cv_pipeline import (
    detect_format,
    extract_text,
    normalize,
    parse_document,
    parse_raw_document,
    parse_text,
)
from cv_ingest.exceptions import BackendFailure, CVIngestError, OcrTimeout, UnsupportedUpload
from cv_ingest.extractors import extract_personal_info, extract_work_experience, resolve_name
from cv_ingest.schemas import (
    FailureReason,
    ParsedDocument,
    ParseOutcome,
    ParserSettings,
    RawDocument,
    get_default_settings,
    load_settings,
)
from cv_ingest.services import validate_upload

__version__ = "0.1.0"

__all__ = [
    "parse_document",
    "parse_raw_document",
    "parse_text",
    "extract_text",
    "detect_format",
    "normalize",
    "extract_personal_info",
    "extract_work_experience",
    "resolve_name",
    "validate_upload",
    "RawDocument",
    "ParsedDocument",
    "ParseOutcome",
    "FailureReason",
    "ParserSettings",
    "get_default_settings",
    "load_settings",
    "CVIngestError",
    "BackendFailure",
    "OcrTimeout",
    "UnsupportedUpload",
]
