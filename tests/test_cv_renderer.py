import pytest

from conftest import LLM_CANDIDATE
from cv_intake_ai.schemas.candidate import CandidateRecord, create_anonymous_candidate
from cv_intake_ai.services.candidate_editor import move_section
from cv_intake_ai.services.cv_renderer import LetterHead, render_candidate


@pytest.fixture
def candidate():
    return CandidateRecord.model_validate(LLM_CANDIDATE)


@pytest.fixture
def anonymous(candidate):
    return create_anonymous_candidate(candidate, candidate_id="CV-1-ABCDEF")


@pytest.mark.parametrize("design", ["classic", "modern", "compact"])
def test_anonymous_render_has_no_personal_data(anonymous, design):
    text = render_candidate(anonymous, design=design)
    assert "Candidate CV-1-ABCDEF" in text
    for value in ("Jane Doe", "jane.doe@example.com", "555-123-4567", "janedoe.dev"):
        assert value not in text
    assert "Acme Corp" in text
    assert "Senior Backend Engineer" in text


def test_candidate_render_shows_contact(candidate):
    text = render_candidate(candidate)
    assert text.startswith("# Jane Doe")
    assert "jane.doe@example.com | 555-123-4567" in text


def test_sections_follow_section_order(anonymous):
    text = render_candidate(anonymous)
    assert text.index("## Experience") < text.index("## Skills") < text.index("## Education")
    reordered = render_candidate(move_section(anonymous, 2, 0))
    assert reordered.index("## Education") < reordered.index("## Experience")


def test_letterhead_and_rating(anonymous):
    text = render_candidate(anonymous, letterhead=LetterHead(company_name="Talent Co", email="hr@talent.co"))
    assert text.startswith("**Talent Co**\nhr@talent.co")
    assert "★★★★☆ (4/5)" in text


def test_synthetic_questions_are_marked(anonymous):
    padded = anonymous.model_copy(
        update={"linkedin_questions": [q.model_copy(update={"synthetic": True}) for q in anonymous.linkedin_questions]}
    )
    assert "_(template)_" in render_candidate(padded)
    assert "_(template)_" not in render_candidate(anonymous)
    assert "## Reflective Questions" not in render_candidate(anonymous, include_questions=False)


def test_unknown_design(anonymous):
    with pytest.raises(ValueError):
        render_candidate(anonymous, design="fancy")
