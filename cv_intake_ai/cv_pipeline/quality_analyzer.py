"""CV quality assessment: LLM review with a structure-based heuristic fallback."""

from typing import Optional

from pydantic import ValidationError

from cv_intake_ai.cv_pipeline.document_signals import detect_document_structure
from cv_intake_ai.schemas.quality import QualityReport
from cv_intake_ai.schemas.signals import StructureSignals
from cv_intake_ai.services.llm_client import LLMClient, complete_or_degrade
from cv_intake_ai.utils.errors import ExternalServiceDegraded
from cv_intake_ai.utils.helpers import parse_llm_json
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)

QUALITY_TEMPERATURE = 0.3
QUALITY_MAX_TOKENS = 1000

QUALITY_SYSTEM_PROMPT = (
    "You are a professional CV reviewer. Analyze CVs and provide constructive feedback. Return only valid JSON."
)

QUALITY_USER_PROMPT = """Analyze this CV/Resume and provide a comprehensive quality assessment.

CV TEXT:
{cv_text}

Provide analysis in this JSON format:
{{
  "overallScore": 85,
  "strengths": ["Clear structure", "Quantified achievements"],
  "weaknesses": ["Missing summary", "Generic descriptions"],
  "suggestions": ["Add professional summary", "Include specific metrics"]
}}

Focus on:
- Content completeness
- Professional presentation
- Achievement quantification
- Skills relevance
- Experience descriptions
- Overall impact

Return only valid JSON:"""

BASE_SCORE = 70
HIGH_CONFIDENCE_THRESHOLD = 80

# (signal attribute, points, strength, weakness, suggestion)
_SECTION_CHECKS = (
    ("has_contact_info", 10, "Contact information present", "Missing contact information", "Add email and phone number"),
    ("has_experience", 10, "Work experience included", "No work experience found", "Include relevant work experience"),
    ("has_education", 5, "Education section present", "Education information missing", "Add educational background"),
    ("has_skills", 5, "Skills section identified", "Skills not clearly listed", "Add a dedicated skills section"),
)


def analyze_cv_quality_fallback(cv_text: str, structure: Optional[StructureSignals] = None) -> QualityReport:
    """Score 70 plus points per detected section; missing sections become weaknesses and suggestions."""
    structure = structure or detect_document_structure(cv_text)
    score = BASE_SCORE
    strengths, weaknesses, suggestions = [], [], []
    for attr, points, strength, weakness, suggestion in _SECTION_CHECKS:
        if getattr(structure, attr):
            score += points
            strengths.append(strength)
        else:
            weaknesses.append(weakness)
            suggestions.append(suggestion)
    if structure.confidence > HIGH_CONFIDENCE_THRESHOLD:
        strengths.append("High document structure confidence")
    return QualityReport(
        overall_score=min(score, 100),
        strengths=strengths,
        weaknesses=weaknesses,
        suggestions=suggestions,
    )


async def analyze_cv_quality(
    cv_text: str,
    llm_client: Optional[LLMClient] = None,
    structure: Optional[StructureSignals] = None,
) -> QualityReport:
    """Quality report for the CV text. Never raises; degrades to the heuristic report."""
    if llm_client is None:
        return analyze_cv_quality_fallback(cv_text, structure)
    try:
        reply = await complete_or_degrade(
            llm_client,
            QUALITY_SYSTEM_PROMPT,
            QUALITY_USER_PROMPT.format(cv_text=cv_text),
            temperature=QUALITY_TEMPERATURE,
            max_tokens=QUALITY_MAX_TOKENS,
        )
        return QualityReport.model_validate(parse_llm_json(reply))
    except ExternalServiceDegraded as e:
        logger.warning("LLM quality analysis degraded, using heuristic: %s", e)
    except ValidationError as e:
        logger.warning("LLM quality output failed validation, using heuristic: %s", e)
    return analyze_cv_quality_fallback(cv_text, structure)
