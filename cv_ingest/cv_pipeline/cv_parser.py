"""CV parser: bytes -> text -> normalized lines -> fields -> ParsedDocument (in-memory)."""

from typing import Optional, Tuple

from cv_ingest.cv_pipeline.text_extractor import DOCUMENT_TYPES, detect_format, extract_text
from cv_ingest.cv_pipeline.text_normalizer import normalize
from cv_ingest.extractors.name_resolver import NameResolution
from cv_ingest.extractors.personal_info import extract_personal_info_traced
from cv_ingest.extractors.sections import (
    extract_certifications,
    extract_education,
    extract_languages,
    extract_skills,
    extract_summary,
)
from cv_ingest.extractors.work_experience import extract_work_experience
from cv_ingest.schemas.outcome import FailureReason, ParseDiagnostics, ParseOutcome
from cv_ingest.schemas.parsed_document import ParsedDocument
from cv_ingest.schemas.raw_document import ExtractionResult, RawDocument
from cv_ingest.schemas.settings import ParserSettings, get_default_settings
from cv_ingest.utils.logger import get_logger

logger = get_logger(__name__)


def _build_document(
    text: str,
    document_type: str,
    file_name: Optional[str],
    settings: ParserSettings,
) -> Tuple[ParsedDocument, NameResolution, int]:
    normalized = normalize(text, settings)
    lines = normalized.lines
    personal_info, resolution = extract_personal_info_traced(normalized, file_name, settings)
    document = ParsedDocument(
        personal_info=personal_info,
        work_experience=extract_work_experience(lines, settings),
        education=extract_education(lines),
        skills=extract_skills(lines, settings),
        languages=extract_languages(lines),
        certifications=extract_certifications(lines),
        summary=extract_summary(lines),
        document_type=document_type,
        original_file_name=file_name,
    )
    return document, resolution, len(lines)


def parse_text(
    text: str,
    file_name: Optional[str] = None,
    settings: Optional[ParserSettings] = None,
) -> ParsedDocument:
    """
    Parse already-extracted text. Never raises on odd input; empty text gives an
    empty ParsedDocument.
    """
    settings = settings or get_default_settings()
    document, _, _ = _build_document(text or "", "Text", file_name, settings)
    return document


def parse_raw_document(raw: RawDocument, settings: Optional[ParserSettings] = None) -> ParseOutcome:
    """
    Run the full pipeline on a RawDocument.
    The only failure is an unextractable document, reported in the outcome rather than raised.
    """
    settings = settings or get_default_settings()
    fmt = detect_format(raw.declared_mime_type, raw.file_extension, raw.content)
    extraction: ExtractionResult = extract_text(
        raw.content, raw.declared_mime_type, raw.file_extension, settings
    )
    diagnostics = ParseDiagnostics(
        backend_used=extraction.backend_used,
        backend_attempts=extraction.attempts,
    )
    if not extraction.success:
        logger.info("Unextractable document: %s", raw.file_name or "<unnamed>")
        return ParseOutcome(
            success=False,
            reason=FailureReason.UNEXTRACTABLE_DOCUMENT,
            diagnostics=diagnostics,
        )

    document, resolution, line_count = _build_document(
        extraction.text, DOCUMENT_TYPES[fmt], raw.file_name, settings
    )
    diagnostics = diagnostics.model_copy(
        update={
            "name_strategy": resolution.strategy,
            "name_candidates": resolution.candidates,
            "rejected_name_candidates": resolution.rejected,
            "line_count": line_count,
        }
    )
    logger.info(
        "Parsed %s via %s: name=%s, %d work entries, %d skills",
        raw.file_name or "<unnamed>",
        extraction.backend_used.value if extraction.backend_used else "-",
        "yes" if document.personal_info.name else "no",
        len(document.work_experience),
        len(document.skills),
    )
    return ParseOutcome(success=True, document=document, diagnostics=diagnostics)


def parse_document(
    content: bytes,
    declared_mime_type: str = "",
    file_extension: str = "",
    file_name: Optional[str] = None,
    settings: Optional[ParserSettings] = None,
) -> ParseOutcome:
    """
    Parse an uploaded CV from bytes already read by the caller.
    Returns ParseOutcome(success=True, document=...) or
    ParseOutcome(success=False, reason=FailureReason.UNEXTRACTABLE_DOCUMENT).
    """
    raw = RawDocument(
        content=content or b"",
        declared_mime_type=declared_mime_type or "",
        file_name=file_name,
        file_extension=file_extension or "",
    )
    return parse_raw_document(raw, settings)
