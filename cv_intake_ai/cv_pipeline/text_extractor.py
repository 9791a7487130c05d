"""Extract and clean text from uploaded CV files (PDF, DOC/DOCX, TXT). In-memory only."""

import re
import unicodedata
from io import BytesIO

from cv_intake_ai.config import MAX_TEXT_CHARS, OCR_CORRECTION_ENABLED, SUPPORTED_EXTENSIONS
from cv_intake_ai.schemas.raw_document import RawDocument
from cv_intake_ai.utils.errors import ExtractionFailed, UnsupportedFormat
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)

BULLET_CHARS = "•·▪▫"

# Characters kept by the cleaners; everything else is treated as extraction noise
_PDF_ALLOWED = r"\w\s\-.,;:!?@#$%&*()+=<>\[\]{}|\\/" + BULLET_CHARS
_WORD_ALLOWED = _PDF_ALLOWED + "'\"‘’“”"
_PDF_NOISE = re.compile(f"[^{_PDF_ALLOWED}]")
_WORD_NOISE = re.compile(f"[^{_WORD_ALLOWED}]")

# Confusable OCR glyphs, corrected only when wedged between letters (e.g. "Eng1ish", "He||o")
_OCR_CONFUSABLES = re.compile(r"(?<=[A-Za-z])[|01]+(?=[A-Za-z])")
_OCR_TRANSLATION = str.maketrans({"|": "I", "0": "O", "1": "l"})


def _normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC)."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def _normalize_whitespace(text: str) -> str:
    """Collapse spaces/tabs, trim around line breaks, at most one blank line in a row."""
    t = text.replace("\r\n", "\n").replace("\r", "\n")
    t = re.sub(r"[^\S\n]+", " ", t)
    t = re.sub(r" *\n *", "\n", t)
    t = re.sub(r"\n{3,}", "\n\n", t)
    return t.strip()


def _truncate(text: str, max_chars: int = MAX_TEXT_CHARS) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + "\n\n[Content truncated.]"
    return text


def correct_ocr_confusions(text: str) -> str:
    """Map |, 0, 1 to I, O, l inside words. Numbers, phone numbers and years are left alone."""
    return _OCR_CONFUSABLES.sub(lambda m: m.group(0).translate(_OCR_TRANSLATION), text)


def clean_pdf_text(text: str, ocr_correction: bool = OCR_CORRECTION_ENABLED) -> str:
    """Cleanup for PDF output: drop noise glyphs, normalize whitespace, optional OCR fixes."""
    if not text or not text.strip():
        return ""
    t = _PDF_NOISE.sub("", _normalize_unicode(text))
    t = _normalize_whitespace(t)
    if ocr_correction:
        t = correct_ocr_confusions(t)
    return _truncate(t)


def clean_word_text(text: str) -> str:
    """Cleanup for Word output: broader whitelist (quotes, apostrophes), same whitespace rules."""
    if not text or not text.strip():
        return ""
    t = _WORD_NOISE.sub("", _normalize_unicode(text))
    return _truncate(_normalize_whitespace(t))


def clean_plain_text(text: str) -> str:
    """Cleanup for .txt uploads: whitespace normalization only."""
    if not text or not text.strip():
        return ""
    return _truncate(_normalize_whitespace(_normalize_unicode(text)))


def _extract_pdf(bytes_io: BytesIO, filename: str) -> str:
    """Extract text from PDF using pdfplumber."""
    try:
        import pdfplumber
    except ImportError as e:
        raise ExtractionFailed(filename, "pdf", "pdfplumber not installed; pip install pdfplumber") from e
    try:
        with pdfplumber.open(bytes_io) as pdf:
            parts = []
            for page in pdf.pages:
                ptext = page.extract_text()
                if ptext:
                    parts.append(ptext)
            return "\n\n".join(parts)
    except Exception as e:
        logger.exception("PDF extraction failed for %s", filename)
        raise ExtractionFailed(filename, "pdf", str(e)) from e


def _extract_word(bytes_io: BytesIO, filename: str, file_format: str) -> str:
    """Extract text from DOCX using python-docx (paragraphs, then table cells)."""
    try:
        from docx import Document
    except ImportError as e:
        raise ExtractionFailed(filename, file_format, "python-docx not installed; pip install python-docx") from e
    try:
        doc = Document(bytes_io)
        parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [c.text.strip() for c in row.cells if c.text.strip()]
                if cells:
                    parts.append(" | ".join(dict.fromkeys(cells)))
        return "\n".join(parts)
    except Exception as e:
        logger.exception("Word extraction failed for %s", filename)
        raise ExtractionFailed(filename, file_format, str(e)) from e


def _extract_plain_text(file_bytes: bytes) -> str:
    """Decode as UTF-8; malformed bytes are replaced rather than rejected."""
    return file_bytes.decode("utf-8-sig", errors="replace")


def extract_text(document: RawDocument) -> str:
    """
    Extract and clean text from a raw upload.
    Raises UnsupportedFormat for unknown extensions and ExtractionFailed when the parser fails.
    An empty string is a valid result; the caller decides whether that is an error.
    """
    fmt = document.extension
    if fmt not in SUPPORTED_EXTENSIONS:
        logger.warning("Unsupported file type: %s", document.filename)
        raise UnsupportedFormat(document.filename, fmt)

    bio = BytesIO(document.content)
    if fmt == "pdf":
        cleaned = clean_pdf_text(_extract_pdf(bio, document.filename))
    elif fmt in ("doc", "docx"):
        cleaned = clean_word_text(_extract_word(bio, document.filename, fmt))
    else:
        cleaned = clean_plain_text(_extract_plain_text(document.content))

    logger.info("Extracted %s characters from %s (%s)", len(cleaned), document.filename, fmt)
    return cleaned


def extract_text_from_file(file_bytes: bytes, filename: str) -> str:
    """
    Extract and clean text from an uploaded CV file (PDF, DOC, DOCX, TXT).
    File is read from bytes in memory; no disk write.
    """
    return extract_text(RawDocument(content=file_bytes or b"", filename=filename or ""))
