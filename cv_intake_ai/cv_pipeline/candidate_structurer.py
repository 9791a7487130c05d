"""LLM-based structuring of cleaned CV text into a CandidateRecord, with regex fallback."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from cv_intake_ai.cv_pipeline.fallback_extractor import (
    DEFAULT_TITLE,
    PLACEHOLDER_EMAIL,
    PLACEHOLDER_LOCATION,
    PLACEHOLDER_PHONE,
    UNKNOWN_NAME,
    calculate_cultural_fit,
    determine_section_order,
    extract_cv_data_fallback,
    generate_default_summary,
    generate_linkedin_questions,
)
from cv_intake_ai.schemas.candidate import (
    CV_SECTIONS,
    QUESTION_CATEGORIES,
    QUESTION_COUNT,
    CandidateRecord,
    EducationEntry,
    ExperienceEntry,
    ReflectiveQuestion,
    clamp_rating,
)
from cv_intake_ai.schemas.signals import ContactSignals, StructureSignals
from cv_intake_ai.services.llm_client import LLMClient, complete_or_degrade
from cv_intake_ai.utils.errors import ExternalServiceDegraded
from cv_intake_ai.utils.helpers import parse_llm_json
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)

STRUCTURING_TEMPERATURE = 0.2
STRUCTURING_MAX_TOKENS = 3000

CV_STRUCTURING_SYSTEM_PROMPT = (
    "You are a professional CV data extraction assistant with expertise in parsing resumes and "
    "extracting structured information. Always return valid JSON without any additional text or explanations."
)

CV_TARGET_SHAPE = """{
  "fullName": "string (extract from document or use provided name)",
  "title": "string (current or most recent job title/position)",
  "email": "string (extract email address)",
  "phone": "string (extract phone number)",
  "location": "string (city, state/province, country)",
  "website": "string (personal website/portfolio if available)",
  "profilePic": "string (leave empty, will be handled separately)",
  "summary": "string (professional summary/objective, generate if not present)",
  "sectionOrder": ["skills", "experience", "education"],
  "skills": ["array", "of", "technical", "and", "soft", "skills"],
  "education": [
    {"school": "string (institution name)", "degree": "string (degree type and field)", "period": "string (e.g. 2018-2022)"}
  ],
  "experience": [
    {"company": "string", "role": "string (job title)", "period": "string (e.g. 2020-Present)", "details": ["key responsibilities and achievements"]}
  ],
  "culturalFitRating": 4,
  "linkedinQuestions": [
    {"id": "1", "question": "What motivates you to work in a global environment?", "answer": "answer based on the candidate's background", "category": "personal"},
    {"id": "2", "question": "How has your background shaped your approach to building professional relationships?", "answer": "answer based on the candidate's experience and skills", "category": "personal"},
    {"id": "3", "question": "What's a personal story you'd share on LinkedIn to showcase your professional journey?", "answer": "answer based on the candidate's achievements", "category": "linkedin"},
    {"id": "4", "question": "How do you define success in your personal and professional life?", "answer": "answer based on the candidate's values and experience", "category": "linkedin"},
    {"id": "5", "question": "What personal qualities do you bring to a team, and how have you developed them?", "answer": "answer based on the candidate's skills and experience", "category": "linkedin"}
  ]
}"""

CV_EXTRACTION_RULES = """EXTRACTION RULES:
1. Extract ALL available information from the CV text
2. For missing information, use reasonable defaults or empty strings
3. Generate a professional summary if not present, based on experience and skills
4. Identify technical skills, soft skills, and tools/technologies
5. Parse work experience with company names, roles, dates, and key achievements
6. Extract education details including institutions, degrees, and graduation periods
7. Generate exactly 5 LinkedIn-style questions with contextual answers based on the candidate's background
8. Set culturalFitRating to an integer from 1 to 5 based on experience level, skills diversity, and achievements
9. Ensure all dates are in a consistent format (YYYY-YYYY or YYYY-Present)
10. Return ONLY valid JSON, no additional text or explanations"""


def _or_not_found(value: Optional[str]) -> str:
    return value or "Not found"


def build_structuring_prompt(cv_text: str, structure: StructureSignals, contact: ContactSignals) -> str:
    """User prompt: document signals, regex contact hints, target JSON shape, rules, then the CV text."""
    return f"""You are an advanced CV/Resume data extraction system.

DOCUMENT ANALYSIS:
- Document confidence: {structure.confidence}%
- Has contact info: {structure.has_contact_info}
- Has experience: {structure.has_experience}
- Has education: {structure.has_education}
- Has skills: {structure.has_skills}

EXTRACTED CONTACT INFO:
- Email: {_or_not_found(contact.email)}
- Phone: {_or_not_found(contact.phone)}
- Name: {_or_not_found(contact.name)}
- Location: {_or_not_found(contact.location)}

TASK: Extract comprehensive information from this CV/Resume and return it as a JSON object matching this exact structure:

{CV_TARGET_SHAPE}

{CV_EXTRACTION_RULES}

CV TEXT TO ANALYZE:
{cv_text}

Return the extracted data as a valid JSON object:"""


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _valid_entries(items: Any, model: type) -> List[BaseModel]:
    """Validate list items one by one; malformed entries are dropped, not fatal."""
    if not isinstance(items, list):
        return []
    entries = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            entries.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Dropping malformed %s from LLM output: %s", model.__name__, e)
    return entries


def _skills(items: Any) -> List[str]:
    if not isinstance(items, list):
        return []
    return [s for s in (_text(i) for i in items) if s]


def _section_order(items: Any) -> List[str]:
    if not isinstance(items, list):
        return []
    return list(dict.fromkeys(s for s in (_text(i).lower() for i in items) if s in CV_SECTIONS))


def _rating(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        rating = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return None
    return clamp_rating(rating) if rating > 0 else None


def _questions(items: Any) -> List[ReflectiveQuestion]:
    """Exactly five questions: model-provided first, padded with synthetic templates."""
    raw = []
    for i, q in enumerate(items if isinstance(items, list) else [], 1):
        if not isinstance(q, dict):
            continue
        category = _text(q.get("category")).lower()
        raw.append(
            dict(
                q,
                id=q.get("id") or i,
                category=category if category in QUESTION_CATEGORIES else "personal",
                synthetic=False,
            )
        )
    questions = _valid_entries(raw, ReflectiveQuestion)[:QUESTION_COUNT]
    questions.extend(generate_linkedin_questions()[len(questions):])
    return questions


def merge_llm_candidate(parsed: Dict[str, Any], contact: ContactSignals) -> CandidateRecord:
    """Prefer non-empty parsed values; otherwise regex contact hints, then placeholders or generators."""
    skills = _skills(parsed.get("skills"))
    education = _valid_entries(parsed.get("education"), EducationEntry)
    experience = _valid_entries(parsed.get("experience"), ExperienceEntry)
    rating = _rating(parsed.get("culturalFitRating"))

    return CandidateRecord(
        full_name=_text(parsed.get("fullName")) or contact.name or UNKNOWN_NAME,
        title=_text(parsed.get("title")) or DEFAULT_TITLE,
        email=_text(parsed.get("email")) or contact.email or PLACEHOLDER_EMAIL,
        phone=_text(parsed.get("phone")) or contact.phone or PLACEHOLDER_PHONE,
        location=_text(parsed.get("location")) or contact.location or PLACEHOLDER_LOCATION,
        website=_text(parsed.get("website")),
        profile_pic=_text(parsed.get("profilePic")),
        summary=_text(parsed.get("summary")) or generate_default_summary(experience, skills),
        section_order=_section_order(parsed.get("sectionOrder"))
        or determine_section_order(skills, experience, education),
        skills=skills,
        education=education,
        experience=experience,
        cultural_fit_rating=rating or calculate_cultural_fit(experience, skills, education),
        linkedin_questions=_questions(parsed.get("linkedinQuestions")),
        extraction_source="llm",
    )


async def structure_candidate(
    cv_text: str,
    structure: StructureSignals,
    contact: ContactSignals,
    llm_client: Optional[LLMClient] = None,
) -> CandidateRecord:
    """
    Turn cleaned CV text into a CandidateRecord. Never raises: without a client, or when
    the LLM call or its JSON fails, the deterministic fallback extractor is used.
    """
    if llm_client is None:
        return extract_cv_data_fallback(cv_text, structure, contact)

    prompt = build_structuring_prompt(cv_text, structure, contact)
    try:
        reply = await complete_or_degrade(
            llm_client,
            CV_STRUCTURING_SYSTEM_PROMPT,
            prompt,
            temperature=STRUCTURING_TEMPERATURE,
            max_tokens=STRUCTURING_MAX_TOKENS,
        )
        return merge_llm_candidate(parse_llm_json(reply), contact)
    except ExternalServiceDegraded as e:
        logger.warning("LLM CV structuring degraded, using fallback: %s", e)
    except ValidationError as e:
        logger.warning("LLM CV output failed validation, using fallback: %s", e)
    return extract_cv_data_fallback(cv_text, structure, contact)
