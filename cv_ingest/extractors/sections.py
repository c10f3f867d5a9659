"""Section-based extractors: education, skills, languages, certifications and summary."""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from cv_ingest.schemas.parsed_document import EducationEntry
from cv_ingest.schemas.settings import ParserSettings, get_default_settings
from cv_ingest.utils.helpers import (
    EMAIL_PATTERN,
    PHONE_PATTERN,
    URL_PATTERN,
    deduplicate,
    strip_bullet,
)

SECTION_HEADINGS: Dict[str, Tuple[str, ...]] = {
    "education": (
        "EDUCATION", "ACADEMIC BACKGROUND", "ACADEMIC QUALIFICATIONS", "EDUCATIONAL BACKGROUND",
        "QUALIFICATIONS", "EDUCATION AND TRAINING", "EDUCATION & TRAINING",
    ),
    "skills": (
        "SKILLS", "TECHNICAL SKILLS", "KEY SKILLS", "CORE SKILLS", "COMPETENCIES",
        "CORE COMPETENCIES", "SKILLS AND ABILITIES", "SKILLS & ABILITIES",
    ),
    "languages": ("LANGUAGES", "LANGUAGE SKILLS"),
    "certifications": (
        "CERTIFICATIONS", "CERTIFICATES", "LICENSES", "LICENSES AND CERTIFICATIONS",
        "LICENSES & CERTIFICATIONS", "CERTIFICATIONS AND LICENSES",
    ),
    "summary": (
        "SUMMARY", "PROFESSIONAL SUMMARY", "CAREER SUMMARY", "OBJECTIVE", "CAREER OBJECTIVE",
        "PROFILE", "PROFESSIONAL PROFILE", "PERSONAL PROFILE", "ABOUT", "ABOUT ME",
    ),
    "experience": (
        "EXPERIENCE", "WORK EXPERIENCE", "PROFESSIONAL EXPERIENCE", "RELEVANT EXPERIENCE",
        "EMPLOYMENT", "EMPLOYMENT HISTORY", "WORK HISTORY", "CAREER HISTORY",
    ),
    "other": (
        "PROJECTS", "REFERENCES", "INTERESTS", "HOBBIES", "ACHIEVEMENTS", "AWARDS",
        "VOLUNTEER EXPERIENCE", "VOLUNTEERING", "PUBLICATIONS", "CONTACT",
        "CONTACT INFORMATION", "CONTACT DETAILS", "PERSONAL DETAILS", "ACTIVITIES",
    ),
}

_HEADING_LOOKUP = {h.casefold(): key for key, headings in SECTION_HEADINGS.items() for h in headings}
_HEADING_RE = re.compile(
    r"^(?P<heading>"
    + "|".join(r"\s+".join(re.escape(w) for w in h.split()) for h in sorted(_HEADING_LOOKUP, key=len, reverse=True))
    + r")\s*(?::\s*(?P<rest>.*))?$",
    re.IGNORECASE,
)
_TOKEN_SPLIT = re.compile(r"[,•\n;|]")
_DEGREE = re.compile(
    r"\b(?:degree|bachelor'?s?|master'?s?|ph\.?\s?d|doctorate|diploma|b\.?sc|m\.?sc|mba|b\.?a|b\.?s|m\.?a|m\.?s)(?![A-Za-z])",
    re.IGNORECASE,
)
_INSTITUTION = re.compile(r"\b(?:university|college|institute|school|academy|polytechnic)\b", re.IGNORECASE)
_DEGREE_SPLIT = re.compile(r"\s*(?:,|\||–|—|\s-\s|\bat\b)\s*")
_PROFICIENCY = re.compile(r"\b(?:proficient|skilled|strong)\s+(?:in|with)\s+([^.\n;:]+)", re.IGNORECASE)
_LIST_SPLIT = re.compile(r"\s*(?:,|&|\band\b)\s*", re.IGNORECASE)
_CONTACT_LINE = re.compile(r"\b(?:linkedin|address|location|phone|tel|mobile)\b", re.IGNORECASE)


def section_heading(line: str) -> Optional[Tuple[str, str]]:
    """
    (section key, inline content) when the line is a known heading,
    alone or followed by ':' and content ("Skills: Python, SQL"). Otherwise None.
    """
    m = _HEADING_RE.match((line or "").strip())
    if not m:
        return None
    # IGNORECASE also matches letters such as U+0130 that do not fold back to a known heading
    key = _HEADING_LOOKUP.get(" ".join(m.group("heading").split()).casefold())
    if key is None:
        return None
    return key, (m.group("rest") or "").strip()


def find_section(lines: Sequence[str], key: str) -> Optional[List[str]]:
    """Lines of the first section with the given key, up to the next heading. None if absent."""
    for i, line in enumerate(lines):
        found = section_heading(line)
        if not found or found[0] != key:
            continue
        body = [found[1]] if found[1] else []
        for following in lines[i + 1:]:
            if section_heading(following):
                break
            body.append(following)
        return body
    return None


def split_tokens(block: Sequence[str], min_len: int = 1, max_len: int = 80) -> List[str]:
    """Split section lines on , • ; | and newlines; keep tokens with min_len < len < max_len."""
    tokens = []
    for raw in _TOKEN_SPLIT.split("\n".join(block)):
        token = strip_bullet(raw).strip(" .")
        if min_len < len(token) < max_len:
            tokens.append(token)
    return deduplicate(tokens, case_sensitive=False)


def _split_degree_line(line: str) -> Tuple[str, Optional[str]]:
    """'BA English, University of Leeds' -> ('BA English', 'University of Leeds')."""
    parts = [p for p in _DEGREE_SPLIT.split(line) if p.strip() and not p.strip().isdigit()]
    institution = next((p for p in parts if _INSTITUTION.search(p) and not _DEGREE.search(p)), None)
    if not institution:
        return line, None
    degree = ", ".join(p for p in parts if p is not institution and not _INSTITUTION.search(p))
    return degree or line, institution.strip()


def extract_education(lines: Sequence[str]) -> List[EducationEntry]:
    """
    Degree-keyword lines paired with an adjacent institution line.
    Without an education heading the whole document is scanned, but only pairs with an institution count.
    """
    section = find_section(lines, "education")
    scope = section if section is not None else list(lines)
    require_institution = section is None
    entries: List[EducationEntry] = []
    seen = set()

    for i, line in enumerate(scope):
        if not _DEGREE.search(line):
            continue
        degree, institution = line.strip(), None
        if _INSTITUTION.search(line):
            degree, institution = _split_degree_line(line.strip())
        else:
            for j in (i + 1, i - 1):
                if 0 <= j < len(scope) and _INSTITUTION.search(scope[j]) and not _DEGREE.search(scope[j]):
                    institution = scope[j].strip()
                    break
        if require_institution and not institution:
            continue
        degree = strip_bullet(degree)
        if not degree or degree.lower() in seen:
            continue
        seen.add(degree.lower())
        entries.append(EducationEntry(degree=degree, institution=institution))
    return entries


def _vocabulary_hits(text: str, vocabulary: Sequence[str]) -> List[str]:
    """Vocabulary terms present as whole words, in order of first appearance, canonical spelling."""
    hits = []
    for term in vocabulary:
        m = re.search(r"\b" + re.escape(term) + r"\b", text, re.IGNORECASE)
        if m:
            hits.append((m.start(), term))
    return [term for _, term in sorted(hits)]


def _proficiency_lists(text: str) -> List[str]:
    """Items from 'Proficient in X, Y and Z' style sentences."""
    items = []
    for m in _PROFICIENCY.finditer(text):
        for item in _LIST_SPLIT.split(m.group(1)):
            item = item.strip(" .")
            if 2 < len(item) < 50:
                items.append(item)
    return items


def extract_skills(lines: Sequence[str], settings: Optional[ParserSettings] = None) -> List[str]:
    """Skills section tokens, then vocabulary hits anywhere, then 'Proficient in ...' lists."""
    settings = settings or get_default_settings()
    text = "\n".join(lines)
    section = find_section(lines, "skills") or []
    skills = split_tokens(section, min_len=2, max_len=50)
    skills += _vocabulary_hits(text, settings.skill_vocabulary)
    skills += _proficiency_lists(text)
    return deduplicate(skills, case_sensitive=False)


def extract_languages(lines: Sequence[str]) -> List[str]:
    return split_tokens(find_section(lines, "languages") or [])


def extract_certifications(lines: Sequence[str]) -> List[str]:
    return split_tokens(find_section(lines, "certifications") or [])


def _is_contact_line(line: str) -> bool:
    return bool(
        EMAIL_PATTERN.search(line)
        or PHONE_PATTERN.search(line)
        or URL_PATTERN.search(line)
        or _CONTACT_LINE.search(line)
    )


def extract_summary(lines: Sequence[str]) -> Optional[str]:
    """
    Explicit summary/objective/profile section if longer than 50 chars.
    Otherwise the prose before the first heading (contact lines and lines under
    four words skipped), again only if longer than 50 chars.
    """
    section = find_section(lines, "summary")
    if section:
        summary = " ".join(s.strip() for s in section if s.strip())
        if len(summary) > 50:
            return summary

    first_heading = next((i for i, line in enumerate(lines) if section_heading(line)), None)
    if first_heading is None:
        return None
    intro = [
        line.strip()
        for line in lines[:first_heading]
        if not _is_contact_line(line) and len(line.split()) >= 4
    ]
    summary = " ".join(intro)
    return summary if len(summary) > 50 else None
