"""Tunable parser settings, passed explicitly through the pipeline."""

import json
from pathlib import Path
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from cv_ingest import config


class ParserSettings(BaseModel):
    """
    Every threshold, weight and keyword table used by the pipeline.
    Frozen: derive variants with settings.model_copy(update={...}).
    """

    model_config = ConfigDict(frozen=True)

    # Name resolution
    name_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    max_candidate_lines: int = Field(default=20, ge=1)
    weight_valid_name: float = 0.3
    weight_email_similarity: float = 0.4
    weight_filename_similarity: float = 0.3
    weight_first_five_lines: float = 0.2
    weight_first_ten_lines: float = 0.1
    weight_contact_context: float = 0.2
    penalty_title_keyword: float = -0.5
    job_title_keywords: Tuple[str, ...] = config.JOB_TITLE_KEYWORDS
    non_name_keywords: Tuple[str, ...] = config.NON_NAME_KEYWORDS
    name_particles: Tuple[str, ...] = config.NAME_PARTICLES

    # Work experience
    role_keywords: Tuple[str, ...] = config.ROLE_KEYWORDS
    company_keywords: Tuple[str, ...] = config.COMPANY_KEYWORDS
    min_description_length: int = Field(default=5, ge=0)
    max_title_words: int = Field(default=8, ge=1)

    # Skills
    skill_vocabulary: Tuple[str, ...] = config.SKILL_VOCABULARY

    # Normalizer
    long_line_threshold: int = Field(default=1000, ge=1)
    extra_truncation_repairs: Tuple[Tuple[str, str], ...] = ()

    # OCR
    ocr_enabled: bool = False
    ocr_timeout_seconds: float = Field(default=30.0, gt=0)
    ocr_language: str = "eng"
    ocr_zoom: float = Field(default=2.0, gt=0)
    ocr_max_pages: int = Field(default=5, ge=1)


def get_default_settings() -> ParserSettings:
    """Settings built from the environment-backed constants in config."""
    return ParserSettings(
        name_confidence_threshold=config.NAME_CONFIDENCE_THRESHOLD,
        max_candidate_lines=config.MAX_CANDIDATE_LINES,
        min_description_length=config.MIN_DESCRIPTION_LENGTH,
        long_line_threshold=config.LONG_LINE_THRESHOLD,
        ocr_enabled=config.OCR_ENABLED,
        ocr_timeout_seconds=config.OCR_TIMEOUT_SECONDS,
        ocr_language=config.OCR_LANGUAGE,
        ocr_zoom=config.OCR_ZOOM,
        ocr_max_pages=config.OCR_MAX_PAGES,
    )


def load_settings(path: Optional[Union[str, Path]] = None) -> ParserSettings:
    """
    Default settings with overrides from a JSON file (keys are ParserSettings fields).
    Path defaults to CV_INGEST_SETTINGS_FILE; with neither, the defaults are returned.
    """
    path = path or config.SETTINGS_FILE
    base = get_default_settings()
    if not path:
        return base
    overrides = json.loads(Path(path).read_text(encoding="utf-8"))
    return ParserSettings.model_validate({**base.model_dump(), **overrides})
