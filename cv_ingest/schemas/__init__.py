"""Schema exports."""

from .outcome import FailureReason, NameCandidate, ParseDiagnostics, ParseOutcome
from .parsed_document import EducationEntry, ParsedDocument, PersonalInfo, WorkExperienceEntry
from .raw_document import (
    BackendAttempt,
    ExtractionBackend,
    ExtractionResult,
    NormalizedText,
    RawDocument,
)
from .settings import ParserSettings, get_default_settings, load_settings

__all__ = [
    "RawDocument",
    "ExtractionBackend",
    "BackendAttempt",
    "ExtractionResult",
    "NormalizedText",
    "NameCandidate",
    "PersonalInfo",
    "WorkExperienceEntry",
    "EducationEntry",
    "ParsedDocument",
    "ParseDiagnostics",
    "FailureReason",
    "ParseOutcome",
    "ParserSettings",
    "get_default_settings",
    "load_settings",
]
