"""Work experience extraction: role-keyword title lines with a nearby employer and date range."""

import re
from typing import List, Optional, Sequence

from cv_ingest.extractors.sections import section_heading
from cv_ingest.schemas.parsed_document import WorkExperienceEntry
from cv_ingest.schemas.settings import ParserSettings, get_default_settings
from cv_ingest.utils.date_parser import YearRange, is_date_line, parse_year_range
from cv_ingest.utils.helpers import deduplicate, keyword_pattern, strip_bullet
from cv_ingest.utils.logger import get_logger

logger = get_logger(__name__)

COMPANY_WINDOW = 3
DATE_WINDOW = 5


class _TitleMatcher:
    """A line is a job title when it ends in a role keyword and reads like a heading, not prose."""

    def __init__(self, settings: ParserSettings):
        escaped = sorted((re.escape(k) for k in settings.role_keywords if k), key=len, reverse=True)
        self._pattern = re.compile(r"\b(?:" + "|".join(escaped) + r")$", re.IGNORECASE) if escaped else None
        self._max_words = settings.max_title_words

    def __call__(self, line: str) -> bool:
        line = line.strip()
        if not self._pattern or "@" in line:
            return False
        return bool(self._pattern.search(line)) and len(line.split()) <= self._max_words


def _find_company(lines: Sequence[str], start: int, company_re: re.Pattern) -> Optional[str]:
    for line in lines[start + 1: start + 1 + COMPANY_WINDOW]:
        if company_re.search(line):
            return line.strip()
    return None


def _find_dates(lines: Sequence[str], start: int) -> Optional[YearRange]:
    for line in lines[start + 1: start + 1 + DATE_WINDOW]:
        found = parse_year_range(line)
        if found:
            return found
    return None


def _collect_responsibilities(
    lines: Sequence[str],
    start: int,
    company: Optional[str],
    is_title,
    settings: ParserSettings,
) -> List[str]:
    """Lines after the title, up to the next title or section heading."""
    collected: List[str] = []
    company_key = (company or "").lower()
    for j in range(start + 1, len(lines)):
        line = lines[j].strip()
        if j > start + 1 and is_title(line):
            break
        if section_heading(line):
            break
        if len(line) <= settings.min_description_length or "@" in line:
            continue
        if is_date_line(line) or (company_key and line.lower() == company_key):
            continue
        cleaned = strip_bullet(line)
        if cleaned:
            collected.append(cleaned)
    return deduplicate(collected)


def extract_work_experience(
    lines: Sequence[str],
    settings: Optional[ParserSettings] = None,
) -> List[WorkExperienceEntry]:
    """
    Scan normalized lines for job titles. For each title (first occurrence only):
    - company: first line within the next 3 containing an organization keyword
    - dates: first YYYY - YYYY|Present range within the next 5 lines
    - responsibilities: following lines until the next title or section heading
    Titles without an identifiable company are dropped.
    """
    settings = settings or get_default_settings()
    is_title = _TitleMatcher(settings)
    company_re = keyword_pattern(settings.company_keywords)
    entries: List[WorkExperienceEntry] = []
    seen_titles = set()

    for i in range(len(lines) - 1):
        title = lines[i].strip()
        if not is_title(title):
            continue
        key = title.lower()
        if key in seen_titles:
            continue
        seen_titles.add(key)

        company = _find_company(lines, i, company_re)
        if not company:
            logger.debug("Dropping title %r: no company within %d lines", title, COMPANY_WINDOW)
            continue
        dates = _find_dates(lines, i)
        responsibilities = _collect_responsibilities(lines, i, company, is_title, settings)
        entries.append(
            WorkExperienceEntry(
                job_title=title,
                company=company,
                start_date=dates.start if dates else None,
                end_date=dates.end if dates else None,
                is_current_position=dates.is_current if dates else False,
                description=" ".join(responsibilities) or None,
                responsibilities=responsibilities,
            )
        )
    return entries
