"""Structured candidate record assembled from a résumé."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def _blank_to_none(data):
    """Strip string values; blank strings become None."""
    if not isinstance(data, dict):
        return data
    cleaned = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip() or None
        cleaned[key] = value
    return cleaned


class _StrippedModel(BaseModel):
    """Base for records whose string fields are trimmed and never blank."""

    @model_validator(mode="before")
    @classmethod
    def _strip_strings(cls, data):
        return _blank_to_none(data)


def _clean_list(values):
    if values is None:
        return []
    return [v.strip() for v in values if isinstance(v, str) and v.strip()]


class PersonalInfo(_StrippedModel):
    """Contact details; every field is optional and absence is expected."""

    name: Optional[str] = Field(default=None, description="Full name as spelled in the document")
    first_name: Optional[str] = Field(default=None, description="First token plus any middle names")
    last_name: Optional[str] = Field(default=None, description="Last token of the name")
    email: Optional[str] = Field(default=None, description="First email address found")
    phone: Optional[str] = Field(default=None, description="First phone number found")
    linkedin: Optional[str] = Field(default=None, description="LinkedIn profile URL or label value")
    address: Optional[str] = Field(default=None, description="Value of an Address/Location label")


class WorkExperienceEntry(_StrippedModel):
    """One employment entry, in document order."""

    job_title: str = Field(..., min_length=1, description="Line ending in a role keyword")
    company: Optional[str] = Field(default=None, description="Employer line found near the title")
    start_date: Optional[str] = Field(default=None, description="Start year")
    end_date: Optional[str] = Field(default=None, description="End year or 'Present'")
    is_current_position: bool = Field(default=False, description="True when the range ends in Present/Current/Now")
    description: Optional[str] = Field(default=None, description="Responsibilities joined into one paragraph")
    responsibilities: List[str] = Field(default_factory=list, description="Bullet-stripped responsibility lines")

    @field_validator("responsibilities", mode="before")
    @classmethod
    def _clean_responsibilities(cls, v):
        return _clean_list(v)


class EducationEntry(_StrippedModel):
    """Degree line and, when found, its institution."""

    degree: str = Field(..., min_length=1)
    institution: Optional[str] = None


class ParsedDocument(BaseModel):
    """Final output of the pipeline. Produced whenever text extraction succeeded."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    work_experience: List[WorkExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    summary: Optional[str] = None
    document_type: str = Field(default="Unknown", description="PDF, Word Document, Text, Image or Unknown")
    original_file_name: Optional[str] = None
    parsed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("skills", "languages", "certifications", mode="before")
    @classmethod
    def _clean_lists(cls, v):
        return _clean_list(v)

    @field_validator("summary", "original_file_name", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v
