"""Document signals derived from cleaned CV text (structure probes and contact regexes)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StructureSignals(BaseModel):
    """Which CV sections were detected, and a coarse confidence score."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    confidence: int = Field(default=0, ge=0, le=100, description="Share of detected sections (0, 25, 50, 75, 100)")
    has_contact_info: bool = Field(default=False, alias="hasContactInfo")
    has_experience: bool = Field(default=False, alias="hasExperience")
    has_education: bool = Field(default=False, alias="hasEducation")
    has_skills: bool = Field(default=False, alias="hasSkills")


class ContactSignals(BaseModel):
    """Best-effort contact fields; first regex match per field, unvalidated."""

    model_config = ConfigDict(frozen=True)

    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
