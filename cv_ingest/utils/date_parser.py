"""Parse employment year ranges ("2019 - 2021", "Jan 2020 – Present") from résumé lines."""

import re
from typing import NamedTuple, Optional

MONTHS = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|jun(?:e)?|jul(?:y)?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
OPEN_ENDED = ("present", "current", "now")

_YEAR_RANGE = re.compile(
    r"(\d{4})\s*(?:-|–|—|\bto\b)\s*(?:" + MONTHS + r"\s*)?(\d{4}|present|current|now)\b",
    re.IGNORECASE,
)
_LEADING_YEAR = re.compile(r"^\d{4}")


class YearRange(NamedTuple):
    """Start/end tokens of an employment period; open ends are normalised to "Present"."""

    start: str
    end: str
    is_current: bool


def parse_year_range(line: str) -> Optional[YearRange]:
    """
    Find the first "YYYY - YYYY|Present" range in a line.
    Month names before either year are tolerated and dropped.
    Returns None if the line has no range.
    """
    if not line:
        return None
    m = _YEAR_RANGE.search(line)
    if not m:
        return None
    start, end = m.group(1), m.group(2)
    is_current = end.lower() in OPEN_ENDED
    if is_current:
        end = "Present"
    return YearRange(start=start, end=end, is_current=is_current)


def is_date_line(line: str) -> bool:
    """
    True for lines that are only a date or year range ("2019 - 2021", "Jan 2020 – Present").
    Lines that start with a year are treated as dates too.
    """
    text = (line or "").strip()
    if not text:
        return False
    if _LEADING_YEAR.match(text):
        return True
    if not _YEAR_RANGE.search(text):
        return False
    rest = _YEAR_RANGE.sub(" ", text)
    rest = re.sub(r"\b" + MONTHS, " ", rest, flags=re.IGNORECASE)
    return len(re.findall(r"[A-Za-z]", rest)) < 3
