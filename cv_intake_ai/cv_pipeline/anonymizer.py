"""Remove personally identifying information from CV text (LLM first, regex fallback)."""

import re
from typing import List, Optional, Tuple

from cv_intake_ai.cv_pipeline.document_signals import EMAIL_RE, NAME_RE, PHONE_RE
from cv_intake_ai.services.llm_client import LLMClient, complete_or_degrade
from cv_intake_ai.utils.errors import ExternalServiceDegraded
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)

ANONYMIZER_TEMPERATURE = 0.1
ANONYMIZER_MAX_TOKENS = 2000

ANONYMIZER_SYSTEM_PROMPT = (
    "You are a privacy-focused assistant that removes personal information while preserving "
    "professional content. Return only the cleaned text without any explanations."
)

ANONYMIZER_USER_PROMPT = """Remove or replace all personal information from this CV text while keeping the professional content intact.

Personal information to remove/replace:
- Full names (replace with "[CANDIDATE NAME]")
- Email addresses (replace with "[EMAIL]")
- Phone numbers (replace with "[PHONE]")
- Home addresses (replace with "[ADDRESS]")
- Personal websites/portfolios (replace with "[WEBSITE]")
- LinkedIn profiles (replace with "[LINKEDIN]")
- Personal photo references
- Any other personally identifiable information

Keep all:
- Job titles and roles
- Company names
- Educational institutions
- Skills and technologies
- Work experience descriptions
- Achievements and accomplishments
- Professional certifications
- Industry-specific terms

Return the cleaned CV text:

{cv_text}"""

LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9_-]+/?", re.IGNORECASE)
URL_RE = re.compile(r"https?://[A-Za-z0-9.-]+\.[A-Za-z]{2,}(?:/[^\s]*)?")

# Order matters: email and phone go before the name pattern, LinkedIn before generic URLs
FALLBACK_SUBSTITUTIONS: List[Tuple[re.Pattern, str]] = [
    (EMAIL_RE, "[EMAIL]"),
    (PHONE_RE, "[PHONE]"),
    (NAME_RE, "[CANDIDATE NAME]"),
    (LINKEDIN_RE, "[LINKEDIN]"),
    (URL_RE, "[WEBSITE]"),
]


def remove_personal_info_fallback(cv_text: str) -> str:
    """
    Regex redaction. The name pattern is applied globally, so any run of two or three
    capitalized words (company or product names included) is redacted too.
    """
    text = cv_text or ""
    for pattern, token in FALLBACK_SUBSTITUTIONS:
        text = pattern.sub(token, text)
    return text


async def remove_personal_info(cv_text: str, llm_client: Optional[LLMClient] = None) -> str:
    """Return CV text with personal data replaced by bracketed tokens. Never raises."""
    if llm_client is None:
        return remove_personal_info_fallback(cv_text)
    try:
        reply = await complete_or_degrade(
            llm_client,
            ANONYMIZER_SYSTEM_PROMPT,
            ANONYMIZER_USER_PROMPT.format(cv_text=cv_text),
            temperature=ANONYMIZER_TEMPERATURE,
            max_tokens=ANONYMIZER_MAX_TOKENS,
        )
    except ExternalServiceDegraded as e:
        logger.warning("LLM anonymization degraded, using regex fallback: %s", e)
        return remove_personal_info_fallback(cv_text)
    if not reply.strip():
        logger.warning("LLM anonymization returned empty text, using regex fallback")
        return remove_personal_info_fallback(cv_text)
    return reply.strip()
