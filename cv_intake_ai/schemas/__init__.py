"""Schema exports."""

from .candidate import (
    AnonymousCandidateRecord,
    CandidateRecord,
    EducationEntry,
    ExperienceEntry,
    ReflectiveQuestion,
    create_anonymous_candidate,
)
from .processed_upload import ProcessedUpload
from .quality import QualityReport
from .signals import ContactSignals, StructureSignals

__all__ = [
    "CandidateRecord",
    "AnonymousCandidateRecord",
    "EducationEntry",
    "ExperienceEntry",
    "ReflectiveQuestion",
    "create_anonymous_candidate",
    "ProcessedUpload",
    "QualityReport",
    "StructureSignals",
    "ContactSignals",
]
