import pytest

from conftest import build_docx, build_pdf
from cv_intake_ai.cv_pipeline.text_extractor import (
    clean_pdf_text,
    clean_plain_text,
    clean_word_text,
    correct_ocr_confusions,
    extract_text_from_file,
)
from cv_intake_ai.utils.errors import ExtractionFailed, UnsupportedFormat

MESSY = "  Jane   Doe\t\n\n\n\n Senior  Engineer \r\n• Built APIs\n\n\n2019 - 2023  "


def test_txt_extraction_normalizes_whitespace():
    text = extract_text_from_file(MESSY.encode("utf-8"), "cv.TXT")
    assert text == "Jane Doe\n\nSenior Engineer\n• Built APIs\n\n2019 - 2023"


def test_txt_with_bom_and_bad_bytes_is_best_effort():
    data = b"\xef\xbb\xbfJane Doe\n\xff\xfeEngineer"
    text = extract_text_from_file(data, "cv.txt")
    assert text.startswith("Jane Doe")
    assert "Engineer" in text


def test_docx_extraction():
    data = build_docx(["Jane Doe", "Experience", "Acme Corp", "- Built Python services"])
    text = extract_text_from_file(data, "resume.docx")
    assert "Jane Doe" in text
    assert "Acme Corp" in text
    assert "- Built Python services" in text.split("\n")


def test_doc_extension_uses_word_parser():
    data = build_docx(["Jane Doe", "Education", "State University"])
    assert "State University" in extract_text_from_file(data, "resume.doc")


def test_pdf_extraction():
    data = build_pdf(["Jane Doe", "Experience at Acme Corp", "Skills Python Docker"])
    text = extract_text_from_file(data, "resume.pdf")
    assert text
    assert "Jane Doe" in text
    assert "Acme Corp" in text


@pytest.mark.parametrize("filename", ["photo.png", "cv", "cv.pdf.exe", ""])
def test_unsupported_extension(filename):
    with pytest.raises(UnsupportedFormat):
        extract_text_from_file(b"data", filename)


@pytest.mark.parametrize("filename,fmt", [("broken.pdf", "pdf"), ("broken.docx", "docx")])
def test_parser_failure_raises_extraction_failed(filename, fmt):
    with pytest.raises(ExtractionFailed) as excinfo:
        extract_text_from_file(b"this is not a real document", filename)
    assert excinfo.value.filename == filename
    assert excinfo.value.file_format == fmt


def test_empty_txt_is_valid_empty_output():
    assert extract_text_from_file(b"   \n\n  ", "cv.txt") == ""


@pytest.mark.parametrize("cleaner", [clean_pdf_text, clean_word_text, clean_plain_text])
def test_cleanup_is_idempotent(cleaner):
    raw = "Jane  Doe ✉ jane@x.com\n\n\n\nEng1ish | Python  \t \n• He11o wor|d\nCall 555-123-4567 (2019)"
    once = cleaner(raw)
    assert cleaner(once) == once


def test_pdf_cleanup_strips_noise_glyphs():
    assert clean_pdf_text("Jane ✉ Doe ☎") == "Jane Doe"


def test_word_cleanup_keeps_apostrophes():
    assert clean_word_text("O'Brien’s  team") == "O'Brien’s team"


def test_ocr_correction_only_inside_words():
    assert correct_ocr_confusions("Eng1ish He||o Micr0soft") == "English HeIIo MicrOsoft"
    assert correct_ocr_confusions("555-123-4567 2010 Windows10 1st") == "555-123-4567 2010 Windows10 1st"
    assert correct_ocr_confusions("Python | Java") == "Python | Java"


def test_pdf_cleanup_preserves_numbers():
    cleaned = clean_pdf_text("Phone 555-100-1010\nAcme 2010 - 2021")
    assert "555-100-1010" in cleaned
    assert "2010 - 2021" in cleaned


def test_ocr_correction_can_be_disabled():
    assert clean_pdf_text("Eng1ish", ocr_correction=False) == "Eng1ish"
