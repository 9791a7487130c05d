"""Structured candidate record extracted from a CV, and its anonymous counterpart."""

import math
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cv_intake_ai.utils.helpers import random_base36, timestamp_ms, to_base36

CVSection = Literal["skills", "experience", "education"]
QuestionCategory = Literal["personal", "veteran", "visa", "linkedin"]
ExtractionSource = Literal["llm", "fallback"]

CV_SECTIONS: tuple = ("skills", "experience", "education")
QUESTION_CATEGORIES: tuple = ("personal", "veteran", "visa", "linkedin")
QUESTION_COUNT = 5

# Fields of CandidateRecord that identify the person; never copied to AnonymousCandidateRecord
PERSONAL_FIELDS: tuple = ("full_name", "email", "phone", "location", "website", "profile_pic")


def clamp_rating(value: int) -> int:
    """Clamp a cultural-fit rating to 1-5. Non-numeric or non-finite input raises ValueError."""
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"rating must be a number, got {type(value).__name__}")
    rating = float(value)
    if not math.isfinite(rating):
        raise ValueError("rating must be finite")
    return max(1, min(5, int(rating)))


def _none_to_empty(value):
    return "" if value is None else value


class EducationEntry(BaseModel):
    school: str = Field(default="", description="Institution name")
    degree: str = Field(default="", description="Degree type and field")
    period: str = Field(default="", description="e.g. 2018-2022")

    @field_validator("school", "degree", "period", mode="before")
    @classmethod
    def _strings(cls, value):
        return _none_to_empty(value)


class ExperienceEntry(BaseModel):
    company: str = Field(default="", description="Company or organization name")
    role: str = Field(default="", description="Job title or position")
    period: str = Field(default="", description="e.g. 2020-Present")
    details: List[str] = Field(default_factory=list, description="Responsibilities and achievements")

    @field_validator("company", "role", "period", mode="before")
    @classmethod
    def _strings(cls, value):
        return _none_to_empty(value)

    @field_validator("details", mode="before")
    @classmethod
    def _details_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"details must be a list of strings, got {type(value).__name__}")
        return [str(v) for v in value if v is not None and str(v).strip()]


class ReflectiveQuestion(BaseModel):
    """LinkedIn-style question/answer pair. synthetic=True marks templated, non-personalized content."""

    id: str
    question: str
    answer: str
    category: QuestionCategory = "personal"
    synthetic: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _id_str(cls, value):
        return str(value)


def _validate_section_order(value: List[str]) -> List[str]:
    order: List[str] = []
    for section in value:
        if section not in CV_SECTIONS:
            raise ValueError(f"unknown section: {section!r}")
        if section in order:
            raise ValueError(f"duplicate section: {section!r}")
        order.append(section)
    return order


class _CandidateContent(BaseModel):
    """Non-identifying CV content shared by both record types."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(default="Professional", description="Current or most recent job title")
    summary: str = Field(default="", description="Professional summary")
    section_order: List[CVSection] = Field(default_factory=lambda: list(CV_SECTIONS), alias="sectionOrder")
    skills: List[str] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    cultural_fit_rating: int = Field(default=3, alias="culturalFitRating", description="1-5")
    linkedin_questions: List[ReflectiveQuestion] = Field(default_factory=list, alias="linkedinQuestions")
    extraction_source: ExtractionSource = Field(default="fallback", alias="extractionSource")

    @field_validator("section_order")
    @classmethod
    def _section_order(cls, value):
        return _validate_section_order(value)

    @field_validator("cultural_fit_rating", mode="before")
    @classmethod
    def _rating(cls, value):
        return clamp_rating(value)


class CandidateRecord(_CandidateContent):
    """Structured CV data produced once per upload by the candidate structurer."""

    full_name: str = Field(default="Unknown Candidate", alias="fullName")
    email: str = ""
    phone: str = ""
    location: str = ""
    website: str = ""
    profile_pic: str = Field(default="", alias="profilePic")


class AnonymousCandidateRecord(_CandidateContent):
    """
    CandidateRecord without personal fields, keyed by an opaque internal id.
    Owned by the editing UI after creation; edits go through candidate_editor.
    """

    id: str


def generate_candidate_id() -> str:
    """Opaque id: CV-<base36 ms timestamp>-<6 random base36 chars>, uppercased."""
    return f"CV-{to_base36(timestamp_ms())}-{random_base36(6)}".upper()


def create_anonymous_candidate(
    candidate: CandidateRecord,
    candidate_id: Optional[str] = None,
) -> AnonymousCandidateRecord:
    """
    Derive the anonymous record: every non-identifying field is deep-copied,
    personal fields are dropped and replaced by a generated id.
    """
    content = candidate.model_dump(exclude=set(PERSONAL_FIELDS))
    return AnonymousCandidateRecord(id=candidate_id or generate_candidate_id(), **content)
