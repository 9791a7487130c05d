import asyncio
import json

from conftest import LLM_CANDIDATE, FakeLLMClient
from cv_intake_ai.cv_pipeline.candidate_structurer import (
    CV_STRUCTURING_SYSTEM_PROMPT,
    STRUCTURING_MAX_TOKENS,
    STRUCTURING_TEMPERATURE,
    build_structuring_prompt,
    merge_llm_candidate,
    structure_candidate,
)
from cv_intake_ai.cv_pipeline.document_signals import detect_document_structure, extract_contact_info
from cv_intake_ai.schemas.signals import ContactSignals
from cv_intake_ai.utils.helpers import parse_llm_json


def _structure(text, reply=None, client=None):
    structure = detect_document_structure(text)
    contact = extract_contact_info(text)
    if client is None and reply is not None:
        client = FakeLLMClient({"CV data extraction": reply})
    return asyncio.run(structure_candidate(text, structure, contact, client))


def test_no_client_uses_fallback(sample_cv):
    record = _structure(sample_cv)
    assert record.extraction_source == "fallback"
    assert record.full_name == "Jane Doe"


def test_llm_reply_is_used(sample_cv):
    client = FakeLLMClient({"CV data extraction": json.dumps(LLM_CANDIDATE)})
    record = _structure(sample_cv, client=client)
    assert record.extraction_source == "llm"
    assert record.title == "Senior Backend Engineer"
    assert record.skills == ["Python", "AWS", "Docker"]
    assert record.section_order == ["experience", "skills", "education"]
    assert record.cultural_fit_rating == 4
    assert [q.synthetic for q in record.linkedin_questions] == [False] * 5

    call = client.calls[0]
    assert call["system_prompt"] == CV_STRUCTURING_SYSTEM_PROMPT
    assert call["temperature"] == STRUCTURING_TEMPERATURE == 0.2
    assert call["max_tokens"] == STRUCTURING_MAX_TOKENS == 3000
    assert sample_cv in call["user_prompt"]


def test_fenced_and_prose_wrapped_json_is_parsed(sample_cv):
    fenced = "```json\n" + json.dumps(LLM_CANDIDATE) + "\n```"
    assert _structure(sample_cv, fenced).extraction_source == "llm"
    prose = "Here is the data: " + json.dumps(LLM_CANDIDATE) + " Hope this helps {really}."
    assert _structure(sample_cv, prose).title == "Senior Backend Engineer"


def test_invalid_json_falls_back(sample_cv):
    record = _structure(sample_cv, "Sorry, I cannot help with {that request")
    assert record.extraction_source == "fallback"
    assert record.full_name == "Jane Doe"


def test_json_array_falls_back(sample_cv):
    assert _structure(sample_cv, "[1, 2, 3]").extraction_source == "fallback"


def test_degraded_client_falls_back(sample_cv, broken_llm_client):
    record = _structure(sample_cv, client=broken_llm_client)
    assert record.extraction_source == "fallback"
    assert len(broken_llm_client.calls) == 1


def test_unexpected_client_exception_falls_back(sample_cv):
    record = _structure(sample_cv, client=FakeLLMClient(error=RuntimeError("boom")))
    assert record.extraction_source == "fallback"


def test_missing_fields_use_contact_hints_then_placeholders():
    contact = ContactSignals(email="hint@example.com", name="Hint Name")
    record = merge_llm_candidate({"fullName": "", "email": None, "skills": ["Go", "", None]}, contact)
    assert record.full_name == "Hint Name"
    assert record.email == "hint@example.com"
    assert record.phone == "+1 (000) 000-0000"
    assert record.title == "Professional"
    assert record.skills == ["Go"]
    assert record.summary
    assert record.extraction_source == "llm"


def test_questions_padded_to_five_with_templates():
    parsed = {"linkedinQuestions": [{"question": "Why us?", "answer": "Because.", "category": "unknown"}]}
    questions = merge_llm_candidate(parsed, ContactSignals()).linkedin_questions
    assert len(questions) == 5
    assert questions[0].question == "Why us?"
    assert questions[0].category == "personal"
    assert questions[0].id == "1"
    assert not questions[0].synthetic
    assert all(q.synthetic for q in questions[1:])


def test_questions_truncated_to_five():
    parsed = {
        "linkedinQuestions": [
            {"id": str(i), "question": f"Q{i}", "answer": f"A{i}", "category": "linkedin"} for i in range(8)
        ]
    }
    questions = merge_llm_candidate(parsed, ContactSignals()).linkedin_questions
    assert [q.question for q in questions] == ["Q0", "Q1", "Q2", "Q3", "Q4"]


def test_rating_is_clamped_or_recomputed():
    assert merge_llm_candidate({"culturalFitRating": 9}, ContactSignals()).cultural_fit_rating == 5
    assert merge_llm_candidate({"culturalFitRating": "4.4"}, ContactSignals()).cultural_fit_rating == 4
    recomputed = merge_llm_candidate({"culturalFitRating": "high"}, ContactSignals()).cultural_fit_rating
    assert 1 <= recomputed <= 5


def test_malformed_entries_and_sections_are_dropped():
    parsed = {
        "experience": [{"company": "Acme", "details": "Shipped it"}, "not an entry", {"company": ["bad"]}],
        "sectionOrder": ["education", "hobbies", "education", "skills"],
    }
    record = merge_llm_candidate(parsed, ContactSignals())
    assert [e.company for e in record.experience] == ["Acme"]
    assert record.experience[0].details == ["Shipped it"]
    assert record.section_order == ["education", "skills"]


def test_prompt_carries_signals_and_contact_hints(sample_cv):
    prompt = build_structuring_prompt(
        sample_cv, detect_document_structure(sample_cv), ContactSignals(email="jane.doe@example.com")
    )
    assert "Document confidence: 100%" in prompt
    assert "Email: jane.doe@example.com" in prompt
    assert "Phone: Not found" in prompt
    assert '"culturalFitRating"' in prompt
    assert prompt.rstrip().endswith("Return the extracted data as a valid JSON object:")


def test_non_list_details_drop_only_that_entry(sample_cv):
    reply = json.dumps({"experience": [{"company": "Acme", "details": 5}, {"company": "Globex", "details": ["Led"]}]})
    record = _structure(sample_cv, reply)
    assert record.extraction_source == "llm"
    assert [e.company for e in record.experience] == ["Globex"]


def test_infinite_rating_is_recomputed():
    record = merge_llm_candidate(parse_llm_json('{"culturalFitRating": 1e999}'), ContactSignals())
    assert 1 <= record.cultural_fit_rating <= 5


def test_non_numeric_rating_objects_are_recomputed():
    record = merge_llm_candidate({"culturalFitRating": {"score": 4}}, ContactSignals())
    assert 1 <= record.cultural_fit_rating <= 5
