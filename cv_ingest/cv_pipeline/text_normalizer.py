"""Clean extracted résumé text and split it into stable, non-empty lines."""

import re
import unicodedata
from typing import Iterable, List, Optional, Tuple

from cv_ingest.config import TRUNCATION_REPAIRS
from cv_ingest.schemas.raw_document import NormalizedText
from cv_ingest.schemas.settings import ParserSettings, get_default_settings

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_LONG_DIGIT_RUN = re.compile(r"\d{8,}")
# Positional numbers left by some DOC/PDF backends ("12 Managed budgets"). Years have four digits and are kept.
_LEADING_NUMBER = re.compile(r"^[ \t]*(?:\d{1,3}[ \t]+)+(?=[A-Za-z•*])")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


def _normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC) and unify line endings."""
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\u2028", "\n").replace("\u2029", "\n").replace("\x0c", "\n")
    text = _CONTROL_CHARS.sub(" ", text)
    return unicodedata.normalize("NFC", text)


def _apply_repairs(text: str, repairs: Iterable[Tuple[str, str]]) -> str:
    for pattern, replacement in repairs:
        text = re.sub(pattern, replacement, text)
    return text


def _clean_line(line: str) -> str:
    return _LEADING_NUMBER.sub("", line).strip()


def _keep_line(line: str) -> bool:
    return bool(line) and not line.isdigit() and len(line) > 2


def _split_run_on(line: str) -> List[str]:
    """Re-split an implausibly long line into sentence-sized fragments."""
    fragments = []
    for sentence in _SENTENCE_SPLIT.split(line):
        sentence = _clean_line(sentence)
        if 10 <= len(sentence) <= 200 and not sentence.replace(" ", "").isdigit():
            fragments.append(sentence)
    return fragments


def normalize(raw_text: Optional[str], settings: Optional[ParserSettings] = None) -> NormalizedText:
    """
    Clean raw extracted text:
    unify line endings, strip format artifacts (positional numbers, long digit runs),
    repair known truncations, collapse whitespace, and split into trimmed lines.
    Pure and idempotent: normalize(normalize(x).cleaned_text) == normalize(x).
    """
    settings = settings or get_default_settings()
    text = _normalize_unicode(raw_text or "")
    if not text.strip():
        return NormalizedText()

    text = _LONG_DIGIT_RUN.sub("", text)
    text = _apply_repairs(text, TRUNCATION_REPAIRS)
    text = _apply_repairs(text, settings.extra_truncation_repairs)

    # Collapse whitespace and newlines
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n\s*\n", "\n\n", text)

    lines: List[str] = []
    for line in text.split("\n"):
        line = _clean_line(line)
        if not _keep_line(line):
            continue
        if len(line) > settings.long_line_threshold:
            lines.extend(f for f in _split_run_on(line) if _keep_line(f))
        else:
            lines.append(line)

    return NormalizedText(cleaned_text="\n".join(lines), lines=lines)
