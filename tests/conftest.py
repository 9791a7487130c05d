"""Shared fixtures: sample CV text, fake LLM clients, in-memory documents."""

import io
import json
from typing import Dict, List, Optional

import pytest

from cv_intake_ai.utils.errors import ExternalServiceDegraded

SAMPLE_CV = """Jane Doe
jane.doe@example.com | 555-123-4567
Austin, TX

Experience
Acme Corp
- Built Python services on AWS
- Led Scrum ceremonies
Globex Industries
• Migrated MySQL to PostgreSQL

Education
State University
Bachelor of Science in Computer Science

Skills
Python, Docker, Git, React, Leadership
"""

LLM_CANDIDATE = {
    "fullName": "Jane Doe",
    "title": "Senior Backend Engineer",
    "email": "jane.doe@example.com",
    "phone": "555-123-4567",
    "location": "Austin, TX",
    "website": "https://janedoe.dev",
    "profilePic": "",
    "summary": "Backend engineer focused on Python services.",
    "sectionOrder": ["experience", "skills", "education"],
    "skills": ["Python", "AWS", "Docker"],
    "education": [{"school": "State University", "degree": "BSc Computer Science", "period": "2012-2016"}],
    "experience": [
        {
            "company": "Acme Corp",
            "role": "Backend Engineer",
            "period": "2016-Present",
            "details": ["Built Python services on AWS"],
        }
    ],
    "culturalFitRating": 4,
    "linkedinQuestions": [
        {"id": str(i), "question": f"Question {i}?", "answer": f"Answer {i}.", "category": "linkedin"}
        for i in range(1, 6)
    ],
}

LLM_QUALITY = {
    "overallScore": 88,
    "strengths": ["Clear structure"],
    "weaknesses": ["Few metrics"],
    "suggestions": ["Quantify achievements"],
}


class FakeLLMClient:
    """Returns canned replies keyed by a substring of the system prompt; records every call."""

    def __init__(self, replies: Optional[Dict[str, str]] = None, error: Optional[Exception] = None) -> None:
        self.replies = replies or {}
        self.error = error
        self.calls: List[dict] = []

    async def complete(self, system_prompt, user_prompt, temperature, max_tokens):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        for key, reply in self.replies.items():
            if key in system_prompt:
                return reply
        raise ExternalServiceDegraded("no canned reply")


@pytest.fixture
def sample_cv() -> str:
    return SAMPLE_CV


@pytest.fixture
def full_llm_client() -> FakeLLMClient:
    return FakeLLMClient(
        {
            "CV data extraction": json.dumps(LLM_CANDIDATE),
            "privacy-focused": "[CANDIDATE NAME]\n[EMAIL] | [PHONE]\nExperience\nAcme Corp",
            "CV reviewer": json.dumps(LLM_QUALITY),
        }
    )


@pytest.fixture
def broken_llm_client() -> FakeLLMClient:
    return FakeLLMClient(error=ExternalServiceDegraded("network down"))


def build_docx(paragraphs: List[str]) -> bytes:
    from docx import Document

    doc = Document()
    for p in paragraphs:
        doc.add_paragraph(p)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: List[str]) -> bytes:
    """Single-page PDF with one text line per entry, Helvetica, correct xref offsets."""
    content = "BT /F1 12 Tf 14 TL 72 720 Td " + " ".join(f"({_pdf_escape(line)}) Tj T*" for line in lines) + " ET"
    stream = content.encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(out)
