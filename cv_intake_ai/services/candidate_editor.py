"""Edits to an anonymous candidate record. Every function returns a new record; inputs are not mutated."""

from typing import Any, Dict, List, Sequence

from cv_intake_ai.schemas.candidate import (
    AnonymousCandidateRecord,
    EducationEntry,
    ExperienceEntry,
    clamp_rating,
)

EDITABLE_FIELDS = ("title", "summary")


def _moved(items: Sequence, from_index: int, to_index: int) -> List:
    """Copy of items with one element moved (drag-and-drop reorder). Indexes out of range raise IndexError."""
    result = list(items)
    if not 0 <= from_index < len(result) or not 0 <= to_index < len(result):
        raise IndexError(f"cannot move {from_index} -> {to_index} in list of {len(result)}")
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def add_skill(record: AnonymousCandidateRecord, skill: str) -> AnonymousCandidateRecord:
    """Append a skill; blank input and exact duplicates are ignored."""
    value = (skill or "").strip()
    if not value or value in record.skills:
        return record.model_copy(deep=True)
    return record.model_copy(update={"skills": [*record.skills, value]}, deep=True)


def remove_skill(record: AnonymousCandidateRecord, index: int) -> AnonymousCandidateRecord:
    skills = list(record.skills)
    del skills[index]
    return record.model_copy(update={"skills": skills}, deep=True)


def move_skill(record: AnonymousCandidateRecord, from_index: int, to_index: int) -> AnonymousCandidateRecord:
    return record.model_copy(update={"skills": _moved(record.skills, from_index, to_index)}, deep=True)


def move_section(record: AnonymousCandidateRecord, from_index: int, to_index: int) -> AnonymousCandidateRecord:
    return record.model_copy(
        update={"section_order": _moved(record.section_order, from_index, to_index)}, deep=True
    )


def move_experience(record: AnonymousCandidateRecord, from_index: int, to_index: int) -> AnonymousCandidateRecord:
    return record.model_copy(
        update={"experience": _moved(record.experience, from_index, to_index)}, deep=True
    )


def set_rating(record: AnonymousCandidateRecord, rating: int) -> AnonymousCandidateRecord:
    return record.model_copy(update={"cultural_fit_rating": clamp_rating(rating)}, deep=True)


def update_fields(record: AnonymousCandidateRecord, **changes: Any) -> AnonymousCandidateRecord:
    """Update free-text fields (title, summary)."""
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"not editable: {', '.join(sorted(unknown))}")
    return record.model_copy(update={k: str(v) for k, v in changes.items()}, deep=True)


def update_experience(
    record: AnonymousCandidateRecord, index: int, changes: Dict[str, Any]
) -> AnonymousCandidateRecord:
    """Replace fields of one experience entry; the entry is re-validated."""
    experience = list(record.experience)
    experience[index] = ExperienceEntry.model_validate({**experience[index].model_dump(), **changes})
    return record.model_copy(update={"experience": experience}, deep=True)


def update_education(
    record: AnonymousCandidateRecord, index: int, changes: Dict[str, Any]
) -> AnonymousCandidateRecord:
    education = list(record.education)
    education[index] = EducationEntry.model_validate({**education[index].model_dump(), **changes})
    return record.model_copy(update={"education": education}, deep=True)
