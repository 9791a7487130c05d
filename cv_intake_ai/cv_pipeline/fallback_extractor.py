"""Deterministic CV extraction used when no LLM is configured or the LLM call fails."""

import re
from typing import List, Optional, Sequence

from cv_intake_ai.cv_pipeline.document_signals import EMAIL_RE, PHONE_RE
from cv_intake_ai.schemas.candidate import (
    CandidateRecord,
    EducationEntry,
    ExperienceEntry,
    ReflectiveQuestion,
    clamp_rating,
)
from cv_intake_ai.schemas.signals import ContactSignals, StructureSignals
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_NAME = "Unknown Candidate"
PLACEHOLDER_EMAIL = "email@example.com"
PLACEHOLDER_PHONE = "+1 (000) 000-0000"
PLACEHOLDER_LOCATION = "Location Not Specified"
DEFAULT_TITLE = "Professional"

MAX_FALLBACK_SKILLS = 10

# Skill categories, matched in this order; first occurrence wins
SKILL_PATTERNS: List[re.Pattern] = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"(?<!\w)(?:javascript|js|react|angular|vue|node\.js|python|java|c\+\+|c#|php|ruby|go|rust|swift|kotlin)(?!\w)",
        r"(?<!\w)(?:html|css|sass|less|bootstrap|tailwind|material-ui)(?!\w)",
        r"(?<!\w)(?:sql|mysql|postgresql|mongodb|redis|elasticsearch)(?!\w)",
        r"(?<!\w)(?:docker|kubernetes|aws|azure|gcp|heroku)(?!\w)",
        r"(?<!\w)(?:git|github|gitlab|bitbucket|jenkins|ci/cd)(?!\w)",
        r"(?<!\w)(?:agile|scrum|kanban|waterfall)(?!\w)",
        r"(?<!\w)(?:leadership|management|communication|teamwork)(?!\w)",
    )
]

NAME_LINE_RE = re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+(?: [A-Z][a-z]+)?$")
NAME_EXCLUDE_RE = re.compile(r"email|phone|address|experience|education|skills", re.IGNORECASE)
SECTION_HEADING_RE = re.compile(
    r"^(?:professional\s+)?(?:summary|profile|objective|contact(?:\s+info(?:rmation)?)?|"
    r"(?:work\s+)?experience|employment(?:\s+history)?|work\s+history|education|skills|"
    r"technical\s+skills|projects|certifications?|languages|interests|references)$",
    re.IGNORECASE,
)
# Every word capitalized (or "&"); e.g. "Acme Corp", "Smith & Sons"
COMPANY_LINE_RE = re.compile(r"^[A-Z][A-Za-z&]*(?:\s+(?:[A-Z][A-Za-z&]*|&))*$")
BULLET_RE = re.compile(r"^[•·▪▫\-*]\s")
INSTITUTION_RE = re.compile(r"university|college|institute|school", re.IGNORECASE)
DEGREE_RE = re.compile(r"bachelor|master|phd|diploma|certificate", re.IGNORECASE)

PLACEHOLDER_EXPERIENCE = ExperienceEntry(
    company="Example Company",
    role="Professional",
    period="2020-Present",
    details=[
        "Demonstrated expertise in various professional areas",
        "Contributed to team success and project delivery",
    ],
)
PLACEHOLDER_EDUCATION = EducationEntry(school="University", degree="Bachelor's Degree", period="2018-2022")

FALLBACK_QUESTIONS: tuple = (
    (
        "What motivates you to work in a global environment?",
        "My passion for innovation and cross-cultural collaboration drives me to work with global firms. "
        "I believe technology can bridge cultural gaps and create meaningful impact worldwide.",
        "personal",
    ),
    (
        "How has your upbringing or background shaped your approach to building professional relationships?",
        "Growing up in a diverse community taught me to value different perspectives and communicate "
        "effectively across cultural boundaries. This helps me build authentic professional relationships.",
        "personal",
    ),
    (
        "What's a personal story you'd share on LinkedIn to showcase your professional journey?",
        "I'd share about my first hackathon where I collaborated with developers from 5 different countries. "
        "Despite language barriers, we created an accessibility tool that won first place.",
        "linkedin",
    ),
    (
        "How do you define success in your personal and professional life?",
        "Success means creating technology that makes a positive impact while continuously learning and growing.",
        "linkedin",
    ),
    (
        "What personal qualities do you bring to a global team, and how have you developed them through your experiences?",
        "I bring adaptability, empathy, and a growth mindset. Working on open-source projects with international "
        "contributors taught me to appreciate different working styles and time zones.",
        "linkedin",
    ),
)


def _lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def _is_education_line(line: str) -> bool:
    return bool(INSTITUTION_RE.search(line) or DEGREE_RE.search(line))


def find_name_line(text: str) -> Optional[str]:
    """First line that looks like a 2-3 word name and is not an email, phone or section heading."""
    for line in _lines(text):
        if not NAME_LINE_RE.match(line):
            continue
        if NAME_EXCLUDE_RE.search(line) or EMAIL_RE.search(line) or PHONE_RE.search(line):
            continue
        return line
    return None


def extract_skills_from_text(text: str) -> List[str]:
    """Case-folded skill keywords in pattern order, de-duplicated, at most 10."""
    skills: dict = {}
    for pattern in SKILL_PATTERNS:
        for match in pattern.finditer(text or ""):
            skills.setdefault(match.group(0).lower(), None)
    return list(skills)[:MAX_FALLBACK_SKILLS]


def extract_experience_from_text(text: str, exclude: Sequence[str] = ()) -> List[ExperienceEntry]:
    """
    Line scan: a capitalized line opens an entry, bullet lines below it become details.
    Headings, education lines and lines in `exclude` (e.g. the name) never open an entry.
    """
    skip = set(exclude)
    entries: List[ExperienceEntry] = []
    current: Optional[ExperienceEntry] = None
    for line in _lines(text):
        if BULLET_RE.match(line):
            if current is not None:
                current.details.append(BULLET_RE.sub("", line, count=1).strip())
            continue
        if (
            3 < len(line) < 50
            and COMPANY_LINE_RE.match(line)
            and line not in skip
            and not SECTION_HEADING_RE.match(line)
            and not _is_education_line(line)
        ):
            if current is not None:
                entries.append(current)
            current = ExperienceEntry(company=line, role="Professional", period="2020-Present", details=[])
    if current is not None:
        entries.append(current)
    return entries or [PLACEHOLDER_EXPERIENCE.model_copy(deep=True)]


def extract_education_from_text(text: str) -> List[EducationEntry]:
    """Each line naming an institution or degree becomes one entry."""
    education = [
        EducationEntry(school=line, degree="Degree", period="2018-2022")
        for line in _lines(text)
        if _is_education_line(line)
    ]
    return education or [PLACEHOLDER_EDUCATION.model_copy(deep=True)]


def generate_default_summary(experience: Sequence, skills: Sequence) -> str:
    experience_count = len(experience or [])
    skills_count = len(skills or [])
    if experience_count > 0 and skills_count > 0:
        return (
            f"Experienced professional with {experience_count} documented roles and expertise in "
            f"{skills_count} key areas. Demonstrated track record of delivering results and "
            "contributing to organizational success."
        )
    if experience_count > 0:
        return (
            f"Professional with {experience_count} documented roles across various positions. "
            "Committed to continuous learning and professional development."
        )
    return "Motivated professional seeking opportunities to apply skills and contribute to organizational success."


def determine_section_order(skills: Sequence, experience: Sequence, education: Sequence) -> List[str]:
    has_skills = bool(skills)
    has_experience = bool(experience)
    has_education = bool(education)
    if has_skills and has_experience and has_education:
        return ["skills", "experience", "education"]
    if has_experience and has_education and not has_skills:
        return ["experience", "skills", "education"]
    if has_skills and has_education and not has_experience:
        return ["skills", "education", "experience"]
    return ["experience", "education", "skills"]


def calculate_cultural_fit(experience: Sequence, skills: Sequence, education: Sequence) -> int:
    """Base 3, bonuses for experience depth, skill breadth and education; always 1-5."""
    experience_count = len(experience or [])
    skills_count = len(skills or [])
    score = 3
    if experience_count > 2:
        score += 1
    if experience_count > 5:
        score += 1
    if skills_count > 5:
        score += 1
    if skills_count > 10:
        score += 1
    if education:
        score += 1
    return clamp_rating(score)


def generate_linkedin_questions() -> List[ReflectiveQuestion]:
    """The five templated questions; identical for every candidate and marked synthetic."""
    return [
        ReflectiveQuestion(id=str(i), question=q, answer=a, category=category, synthetic=True)
        for i, (q, a, category) in enumerate(FALLBACK_QUESTIONS, 1)
    ]


def extract_cv_data_fallback(
    cv_text: str,
    structure: StructureSignals,
    contact: ContactSignals,
) -> CandidateRecord:
    """Build a complete CandidateRecord from regexes and line heuristics alone."""
    logger.info(
        "Using fallback CV extraction (structure confidence=%s%%)", structure.confidence
    )
    name_line = find_name_line(cv_text)
    name = name_line or contact.name or UNKNOWN_NAME
    skills = extract_skills_from_text(cv_text)
    experience = extract_experience_from_text(cv_text, exclude=[name_line] if name_line else ())
    education = extract_education_from_text(cv_text)

    return CandidateRecord(
        full_name=name,
        title=DEFAULT_TITLE,
        email=contact.email or PLACEHOLDER_EMAIL,
        phone=contact.phone or PLACEHOLDER_PHONE,
        location=contact.location or PLACEHOLDER_LOCATION,
        website="",
        profile_pic="",
        summary=generate_default_summary(experience, skills),
        section_order=determine_section_order(skills, experience, education),
        skills=skills,
        education=education,
        experience=experience,
        cultural_fit_rating=calculate_cultural_fit(experience, skills, education),
        linkedin_questions=generate_linkedin_questions(),
        extraction_source="fallback",
    )
