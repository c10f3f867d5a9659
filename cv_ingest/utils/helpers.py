"""Helper utilities shared by the field extractors."""

import re
from typing import Iterable, List, Optional, Sequence

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"\(?\d{3}\)?[-.\s]*\d{3}[-.\s]*\d{4}")
INTERNATIONAL_PHONE_PATTERN = re.compile(r"\+\d[\d\s().-]{7,20}\d")
URL_PATTERN = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)

BULLET_CHARS = "•*-·▪◦‣"


def extract_emails(text: str) -> List[str]:
    """Extract email addresses from text using regex, in document order without duplicates."""
    if not text:
        return []
    return list(dict.fromkeys(EMAIL_PATTERN.findall(text)))


def first_email(text: str) -> Optional[str]:
    """First email address in the text, or None."""
    emails = extract_emails(text)
    return emails[0] if emails else None


def strip_bullet(line: str) -> str:
    """Remove a single leading bullet marker and the whitespace after it."""
    stripped = (line or "").strip()
    if stripped and stripped[0] in BULLET_CHARS:
        stripped = stripped[1:].strip()
    return stripped


def deduplicate(items: Iterable[str], case_sensitive: bool = True) -> List[str]:
    """Remove duplicates, preserving first occurrence order and spelling."""
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        key = item if case_sensitive else item.lower()
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result


def keyword_pattern(keywords: Sequence[str]) -> re.Pattern:
    """Case-insensitive whole-word alternation over the given keywords."""
    escaped = sorted((re.escape(k) for k in keywords if k), key=len, reverse=True)
    if not escaped:
        return re.compile(r"(?!x)x")  # matches nothing
    return re.compile(r"\b(?:" + "|".join(escaped) + r")\b", re.IGNORECASE)


def contains_keyword(text: str, keywords: Sequence[str]) -> bool:
    """True if any keyword appears in the text as a whole word (case-insensitive)."""
    return bool(text) and keyword_pattern(keywords).search(text) is not None


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Strip a string; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
