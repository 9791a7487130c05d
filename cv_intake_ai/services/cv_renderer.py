"""Render candidate records as Markdown in the available CV designs (classic, modern, compact)."""

from typing import Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from cv_intake_ai.config import CV_DESIGNS
from cv_intake_ai.schemas.candidate import AnonymousCandidateRecord, CandidateRecord

Record = Union[CandidateRecord, AnonymousCandidateRecord]


class LetterHead(BaseModel):
    """Recruiting-company header printed above anonymous CVs."""

    company_name: str = Field(..., description="Company shown at the top of the CV")
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None


def _stars(rating: int) -> str:
    return "★" * rating + "☆" * (5 - rating)


def _letterhead(letterhead: Optional[LetterHead]) -> List[str]:
    if letterhead is None:
        return []
    contact = [v for v in (letterhead.phone, letterhead.email, letterhead.website, letterhead.address) if v]
    lines = [f"**{letterhead.company_name}**"]
    if contact:
        lines.append(" · ".join(contact))
    return lines + ["", "---", ""]


def _header(record: Record, design: str) -> List[str]:
    if isinstance(record, CandidateRecord):
        heading = record.full_name
        contact = [v for v in (record.email, record.phone, record.location, record.website) if v]
    else:
        heading = f"Candidate {record.id}"
        contact = []
    if design == "compact":
        line = f"**{heading}** · {record.title}"
        return [line, " · ".join(contact)] if contact else [line]
    lines = [f"# {heading}", f"### {record.title}"]
    if contact:
        lines.append(" | ".join(contact))
    return lines


def _skills(record: Record, design: str) -> List[str]:
    if not record.skills:
        return []
    if design == "modern":
        return ["## Skills", " ".join(f"`{s}`" for s in record.skills)]
    if design == "compact":
        return [f"**Skills:** {', '.join(record.skills)}"]
    return ["## Skills"] + [f"- {s}" for s in record.skills]


def _experience(record: Record, design: str) -> List[str]:
    if not record.experience:
        return []
    lines = ["**Experience**" if design == "compact" else "## Experience"]
    for exp in record.experience:
        if design == "compact":
            lines.append(f"- {exp.role}, {exp.company} ({exp.period})")
            continue
        if design == "modern":
            lines.append(f"### {exp.role} @ {exp.company}")
            lines.append(f"*{exp.period}*")
        else:
            lines.append(f"### {exp.company}")
            lines.append(f"**{exp.role}** · {exp.period}")
        lines.extend(f"- {d}" for d in exp.details)
    return lines


def _education(record: Record, design: str) -> List[str]:
    if not record.education:
        return []
    if design == "compact":
        return ["**Education**"] + [f"- {e.degree}, {e.school} ({e.period})" for e in record.education]
    lines = ["## Education"]
    for edu in record.education:
        lines.append(f"- **{edu.school}** · {edu.degree} · {edu.period}")
    return lines


_SECTION_RENDERERS: Dict[str, Callable[[Record, str], List[str]]] = {
    "skills": _skills,
    "experience": _experience,
    "education": _education,
}


def render_candidate(
    record: Record,
    design: str = "classic",
    letterhead: Optional[LetterHead] = None,
    include_questions: bool = True,
) -> str:
    """
    Markdown CV for one record. Sections follow record.section_order.
    Anonymous records never show personal fields; they are not on the model.
    """
    if design not in CV_DESIGNS:
        raise ValueError(f"Unknown design {design!r}; expected one of {', '.join(CV_DESIGNS)}")

    blocks: List[List[str]] = [_letterhead(letterhead) + _header(record, design)]
    if record.summary:
        blocks.append(
            [f"*{record.summary}*"] if design == "compact" else ["## Summary", record.summary]
        )
    for section in record.section_order:
        lines = _SECTION_RENDERERS[section](record, design)
        if lines:
            blocks.append(lines)
    blocks.append([f"**Cultural fit:** {_stars(record.cultural_fit_rating)} ({record.cultural_fit_rating}/5)"])
    if include_questions and record.linkedin_questions:
        qa = ["## Reflective Questions"]
        for q in record.linkedin_questions:
            qa.append("")
            qa.append(f"**{q.question}**" + (" _(template)_" if q.synthetic else "") + "  ")
            qa.append(q.answer)
        blocks.append(qa)

    separator = "\n\n" if design != "compact" else "\n"
    return separator.join("\n".join(block) for block in blocks).strip() + "\n"
