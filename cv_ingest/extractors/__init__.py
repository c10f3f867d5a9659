"""Field extractors over normalized résumé text."""

from .name_resolver import (
    DEFAULT_STRATEGIES,
    NameResolution,
    is_valid_person_name,
    name_similarity,
    resolve_name,
    split_name,
)
from .personal_info import extract_personal_info, extract_personal_info_traced
from .sections import (
    extract_certifications,
    extract_education,
    extract_languages,
    extract_skills,
    extract_summary,
    find_section,
)
from .work_experience import extract_work_experience

__all__ = [
    "resolve_name",
    "NameResolution",
    "DEFAULT_STRATEGIES",
    "is_valid_person_name",
    "name_similarity",
    "split_name",
    "extract_personal_info",
    "extract_personal_info_traced",
    "extract_work_experience",
    "extract_education",
    "extract_skills",
    "extract_languages",
    "extract_certifications",
    "extract_summary",
    "find_section",
]
