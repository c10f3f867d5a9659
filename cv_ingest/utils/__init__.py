"""Utility exports."""

from .date_parser import YearRange, is_date_line, parse_year_range
from .helpers import (
    clean_optional,
    contains_keyword,
    deduplicate,
    extract_emails,
    first_email,
    keyword_pattern,
    strip_bullet,
)
from .logger import get_logger

__all__ = [
    "get_logger",
    "extract_emails",
    "first_email",
    "strip_bullet",
    "deduplicate",
    "keyword_pattern",
    "contains_keyword",
    "clean_optional",
    "parse_year_range",
    "is_date_line",
    "YearRange",
]
