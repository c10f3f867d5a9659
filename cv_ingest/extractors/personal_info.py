"""Personal info extraction: name (via the resolver), email, phone, LinkedIn and address."""

import re
from typing import Optional, Tuple

from cv_ingest.extractors.name_resolver import NameResolution, resolve_name, split_name
from cv_ingest.schemas.parsed_document import PersonalInfo
from cv_ingest.schemas.raw_document import NormalizedText
from cv_ingest.schemas.settings import ParserSettings, get_default_settings
from cv_ingest.utils.helpers import INTERNATIONAL_PHONE_PATTERN, PHONE_PATTERN, first_email

_LINKEDIN_URL = re.compile(r"linkedin\.com/in/([A-Za-z0-9_\-%]+)", re.IGNORECASE)
_LINKEDIN_LABEL = re.compile(r"\bLinkedIn\s*:\s*(\S+)", re.IGNORECASE)
_ADDRESS_LABEL = re.compile(r"\b(?:Address|Location)\s*:[ \t]*([^\n|]+)", re.IGNORECASE)


def extract_phone(text: str) -> Optional[str]:
    """First North-American style number, else the first '+'-prefixed number with 9-15 digits."""
    if not text:
        return None
    m = PHONE_PATTERN.search(text)
    if m:
        return m.group(0).strip()
    for m in INTERNATIONAL_PHONE_PATTERN.finditer(text):
        digits = re.sub(r"\D", "", m.group(0))
        if 9 <= len(digits) <= 15:
            return m.group(0).strip()
    return None


def extract_linkedin(text: str) -> Optional[str]:
    """Canonical profile URL from linkedin.com/in/<handle>, else the value after a 'LinkedIn:' label."""
    if not text:
        return None
    m = _LINKEDIN_URL.search(text)
    if m:
        return f"https://www.linkedin.com/in/{m.group(1).rstrip('/')}"
    m = _LINKEDIN_LABEL.search(text)
    if m:
        value = m.group(1).rstrip(".,;")
        return value or None
    return None


def extract_address(text: str) -> Optional[str]:
    """Rest of the line after an 'Address:' or 'Location:' label."""
    if not text:
        return None
    m = _ADDRESS_LABEL.search(text)
    if not m:
        return None
    return m.group(1).strip().rstrip(",;") or None


def extract_personal_info_traced(
    normalized: NormalizedText,
    file_name: Optional[str] = None,
    settings: Optional[ParserSettings] = None,
) -> Tuple[PersonalInfo, NameResolution]:
    """Personal info plus the name resolution trace used for diagnostics."""
    settings = settings or get_default_settings()
    text = normalized.cleaned_text
    email = first_email(text)
    resolution = resolve_name(normalized.lines, text, file_name=file_name, email=email, settings=settings)
    first_name, last_name = split_name(resolution.name)
    info = PersonalInfo(
        name=resolution.name,
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=extract_phone(text),
        linkedin=extract_linkedin(text),
        address=extract_address(text),
    )
    return info, resolution


def extract_personal_info(
    normalized: NormalizedText,
    file_name: Optional[str] = None,
    settings: Optional[ParserSettings] = None,
) -> PersonalInfo:
    """
    Extract contact details from normalized text. Every field is best-effort;
    a field that cannot be found is simply None.
    """
    info, _ = extract_personal_info_traced(normalized, file_name, settings)
    return info
