"""
Candidate-name resolution.

Strategies run in order until one yields a name:
email cross-validation, filename cross-validation, contextual scoring of the
first lines, and finally the email-derived name on its own.
"""

import re
from pathlib import PurePath
from typing import Callable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from cv_ingest.extractors.sections import section_heading
from cv_ingest.schemas.outcome import NameCandidate
from cv_ingest.schemas.settings import ParserSettings, get_default_settings
from cv_ingest.utils.helpers import (
    EMAIL_PATTERN,
    PHONE_PATTERN,
    contains_keyword,
    first_email,
)
from cv_ingest.utils.logger import get_logger

logger = get_logger(__name__)

_DISALLOWED_CHARS = set("@/:#$%&*()[]{}<>|\\")
_SEPARATED_LOCAL_PART = re.compile(r"^([a-z]+)[._-]([a-z]+)(?:[._-]([a-z]+))?\d*$")
_COMPACT_LOCAL_PART = re.compile(r"^([a-z]{2,})\d*$")
_WORD_SPLIT = re.compile(r"[ \-']+")
_FILENAME_NOISE = {
    "resume", "cv", "curriculum", "vitae", "final", "updated", "new", "copy",
    "draft", "latest", "version", "the", "of", "my",
}
_CANDIDATE_PATTERNS = (
    re.compile(r"^([A-Z][a-z]+\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)(?:\s|$)"),
    re.compile(r"([A-Z][a-z]+\s+[A-Z][a-z]+)"),
    re.compile(r"^([A-Z]+\s+[A-Z]+)$"),
)
_CONTACT_CLUE = re.compile(
    r"@|\b(?:phone|tel|mobile|address|linkedin)\b|\(\d{3}\)|\d{3}[-.\s]\d{3}[-.\s]\d{4}",
    re.IGNORECASE,
)


class NameContext(BaseModel):
    """Everything a strategy may look at. Built once per document."""

    lines: List[str] = Field(default_factory=list)
    text: str = ""
    email: Optional[str] = None
    email_name: Optional[str] = None
    filename_name: Optional[str] = None
    settings: ParserSettings = Field(default_factory=get_default_settings)


class NameResolution(BaseModel):
    """Result of one strategy, or of the whole resolver."""

    name: Optional[str] = None
    strategy: Optional[str] = None
    confidence: float = 0.0
    candidates: List[NameCandidate] = Field(default_factory=list)
    rejected: List[NameCandidate] = Field(default_factory=list)


def format_proper_name(name: str) -> str:
    """'jANE doe' -> 'Jane Doe'."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in name.split())


def _display_case(matched: str) -> str:
    """Keep the document's spelling unless it is all upper or all lower case."""
    collapsed = " ".join(matched.split())
    if collapsed.isupper() or collapsed.islower():
        return format_proper_name(collapsed)
    return collapsed


def find_name_in_text(name: Optional[str], text: str) -> Optional[str]:
    """
    Search the document for "first last" (case-insensitive, word boundaries, any whitespace between).
    Returns the document's spelling, or None.
    """
    if not name or not text:
        return None
    parts = name.split()
    if len(parts) >= 2:
        parts = [parts[0], parts[-1]]
    pattern = r"\b" + r"\s+".join(re.escape(p) for p in parts) + r"\b"
    m = re.search(pattern, text, re.IGNORECASE)
    return _display_case(m.group(0)) if m else None


def name_from_email(email: Optional[str], text: str = "") -> Optional[str]:
    """
    Derive a name from an email local part.
    first.last, first_last and first-last need no document; firstlast and flast
    are only resolvable against consecutive word pairs found in the text.
    """
    if not email or "@" not in email:
        return None
    local = email.split("@", 1)[0].lower()
    m = _SEPARATED_LOCAL_PART.match(local)
    if m:
        first, last = m.group(1), m.group(3) or m.group(2)
        if len(first) < 2 or len(last) < 2:
            return None
        return f"{first.capitalize()} {last.capitalize()}"
    m = _COMPACT_LOCAL_PART.match(local)
    if not m or not text:
        return None
    compact = m.group(1)
    words = re.findall(r"[A-Za-z]+", text)
    for first, last in zip(words, words[1:]):
        pair = (first + last).lower()
        initial = (first[0] + last).lower()
        if len(last) > 1 and (pair == compact or initial == compact):
            return f"{first.capitalize()} {last.capitalize()}"
    return None


def name_from_filename(file_name: Optional[str]) -> Optional[str]:
    """'Jane_Doe_Resume.pdf' -> 'Jane Doe'; noise words (resume, cv, final, ...) are skipped."""
    if not file_name:
        return None
    stem = PurePath(file_name).stem
    stem = re.sub(r"[_\-.]+", " ", stem)
    tokens = [t for t in stem.split() if t.isalpha() and len(t) > 1 and t.lower() not in _FILENAME_NOISE]
    for first, last in zip(tokens, tokens[1:]):
        if first[0].isupper() and last[0].isupper():
            return f"{first} {last}"
    if len(tokens) >= 2:
        return f"{tokens[0].capitalize()} {tokens[1].capitalize()}"
    return None


def _has_proper_casing(name: str, particles: Sequence[str]) -> bool:
    allowed = {p.lower() for p in particles}
    for word in _WORD_SPLIT.split(name):
        if not word:
            continue
        letters = word.replace(".", "")
        if len(word) > 1 and not word[0].isupper() and word.lower() not in allowed:
            return False
        if len(letters) > 2 and letters.isupper():
            return False
        if len(letters) > 2 and letters.islower() and word.lower() not in allowed:
            return False
    return True


def is_valid_person_name(candidate: Optional[str], settings: Optional[ParserSettings] = None) -> bool:
    """
    Whether a string plausibly is a person's name.
    Rejects: <2 or >100 chars, disallowed symbols, >20% digits, email/URL/phone
    fragments, bad casing, and anything containing a non-name keyword.
    """
    settings = settings or get_default_settings()
    if not candidate or not candidate.strip():
        return False
    name = candidate.strip()
    if len(name) < 2 or len(name) > 100:
        return False
    if any(c in _DISALLOWED_CHARS for c in name):
        return False
    digits = sum(c.isdigit() for c in name)
    if digits and digits / len(name) > 0.2:
        return False
    if not any(c.isalpha() for c in name):
        return False
    lowered = name.lower()
    if "www" in lowered or ".com" in lowered or "http" in lowered or EMAIL_PATTERN.search(name):
        return False
    if PHONE_PATTERN.search(name):
        return False
    if not _has_proper_casing(name, settings.name_particles):
        return False
    if contains_keyword(name, settings.non_name_keywords):
        return False
    return True


def is_job_title_or_company(candidate: str, settings: Optional[ParserSettings] = None) -> bool:
    settings = settings or get_default_settings()
    return contains_keyword(candidate, settings.job_title_keywords)


def name_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Exact (ignoring case/spaces) -> 1.0, containment -> 0.8, else shared-token ratio."""
    if not a or not b:
        return 0.0
    norm_a = a.lower().replace(" ", "")
    norm_b = b.lower().replace(" ", "")
    if norm_a == norm_b:
        return 1.0
    if norm_a in norm_b or norm_b in norm_a:
        return 0.8
    parts_a = set(a.lower().split())
    parts_b = set(b.lower().split())
    total = max(len(a.lower().split()), len(b.lower().split()))
    return len(parts_a & parts_b) / total if total else 0.0


def split_name(name: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """First token (+ middle names) and last token. A single token is a first name only."""
    if not name:
        return None, None
    parts = name.split()
    if len(parts) == 1:
        return parts[0], None
    return " ".join(parts[:-1]), parts[-1]


def _has_contact_context(lines: Sequence[str], index: int) -> bool:
    nearby = lines[max(0, index - 2): index + 3]
    if not any(_CONTACT_CLUE.search(line) for line in nearby):
        return False
    return not any(section_heading(line) for line in lines[max(0, index - 1): index + 2])


def score_candidate(candidate: str, line_index: int, ctx: NameContext) -> float:
    """Weighted confidence in [0, 1] that a name-shaped string on a given line is the candidate's name."""
    s = ctx.settings
    score = 0.0
    if is_valid_person_name(candidate, s):
        score += s.weight_valid_name
    if ctx.email_name:
        score += s.weight_email_similarity * name_similarity(candidate, ctx.email_name)
    if ctx.filename_name:
        score += s.weight_filename_similarity * name_similarity(candidate, ctx.filename_name)
    if line_index < 5:
        score += s.weight_first_five_lines
    elif line_index < 10:
        score += s.weight_first_ten_lines
    if _has_contact_context(ctx.lines, line_index):
        score += s.weight_contact_context
    if is_job_title_or_company(candidate, s):
        score += s.penalty_title_keyword
    return round(max(0.0, min(1.0, score)), 4)


def candidate_names(lines: Sequence[str], max_lines: int) -> List[Tuple[str, int]]:
    """Name-shaped substrings from the first lines, in document order. All-caps hits are title-cased."""
    found: List[Tuple[str, int]] = []
    for index, line in enumerate(lines[:max_lines]):
        line = line.strip()
        for pattern in _CANDIDATE_PATTERNS:
            m = pattern.search(line)
            if not m:
                continue
            name = m.group(1).strip()
            if name.isupper():
                name = format_proper_name(name)
            if (name, index) not in found:
                found.append((name, index))
    return found


def email_cross_validated(ctx: NameContext) -> Optional[NameResolution]:
    match = find_name_in_text(ctx.email_name, ctx.text)
    if not match:
        return None
    return NameResolution(name=match, strategy="email_cross_validated", confidence=1.0)


def filename_cross_validated(ctx: NameContext) -> Optional[NameResolution]:
    match = find_name_in_text(ctx.filename_name, ctx.text)
    if not match:
        return None
    return NameResolution(name=match, strategy="filename_cross_validated", confidence=1.0)


def contextual_scoring(ctx: NameContext) -> Optional[NameResolution]:
    """Score every candidate; the first valid one at or above the threshold wins."""
    accepted: List[NameCandidate] = []
    rejected: List[NameCandidate] = []
    winner: Optional[NameCandidate] = None
    for name, index in candidate_names(ctx.lines, ctx.settings.max_candidate_lines):
        score = score_candidate(name, index, ctx)
        candidate = NameCandidate(text=name, line_index=index, confidence=score, source="contextual")
        logger.debug("Name candidate %r on line %d scored %.2f", name, index, score)
        if not is_valid_person_name(name, ctx.settings) or is_job_title_or_company(name, ctx.settings):
            rejected.append(candidate)
            continue
        accepted.append(candidate)
        if winner is None and score >= ctx.settings.name_confidence_threshold:
            winner = candidate
    if not accepted and not rejected:
        return None
    return NameResolution(
        name=winner.text if winner else None,
        strategy="contextual_scoring" if winner else None,
        confidence=winner.confidence if winner else 0.0,
        candidates=accepted,
        rejected=rejected,
    )


def email_fallback(ctx: NameContext) -> Optional[NameResolution]:
    if ctx.email_name and is_valid_person_name(ctx.email_name, ctx.settings):
        return NameResolution(
            name=format_proper_name(ctx.email_name), strategy="email_fallback", confidence=0.5
        )
    return None


NameStrategy = Callable[[NameContext], Optional[NameResolution]]

DEFAULT_STRATEGIES: Tuple[NameStrategy, ...] = (
    email_cross_validated,
    filename_cross_validated,
    contextual_scoring,
    email_fallback,
)


def resolve_name(
    lines: Sequence[str],
    text: str = "",
    file_name: Optional[str] = None,
    email: Optional[str] = None,
    settings: Optional[ParserSettings] = None,
    strategies: Sequence[NameStrategy] = DEFAULT_STRATEGIES,
) -> NameResolution:
    """
    Run the strategies in order and return the first name found, together with
    every scored and rejected candidate seen on the way.
    """
    settings = settings or get_default_settings()
    text = text or "\n".join(lines)
    email = email or first_email(text)
    ctx = NameContext(
        lines=list(lines),
        text=text,
        email=email,
        email_name=name_from_email(email, text),
        filename_name=name_from_filename(file_name),
        settings=settings,
    )
    result = NameResolution()
    for strategy in strategies:
        outcome = strategy(ctx)
        if outcome is None:
            continue
        result.candidates.extend(outcome.candidates)
        result.rejected.extend(outcome.rejected)
        if outcome.name:
            result.name = outcome.name
            result.strategy = outcome.strategy
            result.confidence = outcome.confidence
            logger.debug("Name %r resolved by %s", outcome.name, outcome.strategy)
            break
    return result
