import pytest
from pydantic import ValidationError

from conftest import LLM_CANDIDATE
from cv_intake_ai.schemas.candidate import CandidateRecord, create_anonymous_candidate
from cv_intake_ai.services.candidate_editor import (
    add_skill,
    move_experience,
    move_section,
    move_skill,
    remove_skill,
    set_rating,
    update_education,
    update_experience,
    update_fields,
)


@pytest.fixture
def record():
    return create_anonymous_candidate(CandidateRecord.model_validate(LLM_CANDIDATE), candidate_id="CV-1-ABCDEF")


def test_add_skill(record):
    edited = add_skill(record, "  Kubernetes ")
    assert edited.skills == ["Python", "AWS", "Docker", "Kubernetes"]
    assert record.skills == ["Python", "AWS", "Docker"]
    assert add_skill(record, "Python").skills == record.skills
    assert add_skill(record, "   ").skills == record.skills


def test_remove_and_move_skill(record):
    assert remove_skill(record, 1).skills == ["Python", "Docker"]
    assert move_skill(record, 2, 0).skills == ["Docker", "Python", "AWS"]
    with pytest.raises(IndexError):
        move_skill(record, 0, 3)


def test_move_section(record):
    edited = move_section(record, 0, 2)
    assert edited.section_order == ["skills", "education", "experience"]
    assert record.section_order == ["experience", "skills", "education"]


def test_move_experience(record):
    globex = record.experience[0].model_copy(update={"company": "Globex"})
    two = record.model_copy(update={"experience": [*record.experience, globex]})
    assert [e.company for e in move_experience(two, 1, 0).experience] == ["Globex", "Acme Corp"]


@pytest.mark.parametrize("rating,expected", [(0, 1), (4, 4), (9, 5)])
def test_set_rating_clamps(record, rating, expected):
    assert set_rating(record, rating).cultural_fit_rating == expected


def test_update_fields(record):
    edited = update_fields(record, title="Staff Engineer", summary="New summary")
    assert edited.title == "Staff Engineer"
    assert edited.summary == "New summary"
    assert edited.id == record.id
    with pytest.raises(ValueError):
        update_fields(record, email="x@y.com")


def test_update_experience_revalidates(record):
    edited = update_experience(record, 0, {"role": "Lead", "details": "One line"})
    assert edited.experience[0].role == "Lead"
    assert edited.experience[0].details == ["One line"]
    assert record.experience[0].role == "Backend Engineer"
    with pytest.raises(ValidationError):
        update_experience(record, 0, {"company": ["not", "a", "string"]})


def test_update_education(record):
    edited = update_education(record, 0, {"period": "2013-2017"})
    assert edited.education[0].period == "2013-2017"
    assert edited.education[0].school == "State University"


def test_edits_do_not_share_nested_state(record):
    edited = add_skill(record, "Go")
    edited.experience[0].details.append("mutated")
    assert "mutated" not in record.experience[0].details
