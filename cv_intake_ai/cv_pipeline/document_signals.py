"""Regex probes over cleaned CV text: section detection and best-effort contact fields."""

import re

from cv_intake_ai.schemas.signals import ContactSignals, StructureSignals
from cv_intake_ai.utils.helpers import EMAIL_PATTERN

CONTACT_MARKERS = re.compile(r"email|phone|mobile|address|@|\.com|\.org|\.net")
EXPERIENCE_MARKERS = re.compile(r"experience|work|employment|job|position|role|company|employer")
EDUCATION_MARKERS = re.compile(
    r"education|degree|university|college|school|bachelor|master|phd|diploma|certificate"
)
SKILLS_MARKERS = re.compile(r"skills|technologies|tools|programming|languages|frameworks|software")

EMAIL_RE = re.compile(EMAIL_PATTERN)
PHONE_RE = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
# Two or three capitalized words. Matches any proper-noun run; treat as a hint only.
NAME_RE = re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+(?: [A-Z][a-z]+)?\b")
LOCATION_RE = re.compile(r"\b[A-Z][a-z]+(?:[,\s]+[A-Z]{2})?\b")


def detect_document_structure(text: str) -> StructureSignals:
    """Flag contact, experience, education and skills sections; confidence is the detected share."""
    lower_text = (text or "").lower()
    flags = {
        "has_contact_info": bool(CONTACT_MARKERS.search(lower_text)),
        "has_experience": bool(EXPERIENCE_MARKERS.search(lower_text)),
        "has_education": bool(EDUCATION_MARKERS.search(lower_text)),
        "has_skills": bool(SKILLS_MARKERS.search(lower_text)),
    }
    confidence = sum(flags.values()) * 100 // len(flags)
    return StructureSignals(confidence=confidence, **flags)


def _first_match(pattern: re.Pattern, text: str):
    m = pattern.search(text)
    return m.group(0) if m else None


def extract_contact_info(text: str) -> ContactSignals:
    """First match per field; no disambiguation between candidates."""
    text = text or ""
    return ContactSignals(
        email=_first_match(EMAIL_RE, text),
        phone=_first_match(PHONE_RE, text),
        name=_first_match(NAME_RE, text),
        location=_first_match(LOCATION_RE, text),
    )
