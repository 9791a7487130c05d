"""CV upload pipeline: text extraction (PDF/DOC/DOCX/TXT), structuring, anonymization, quality."""

from cv_intake_ai.cv_pipeline.anonymizer import remove_personal_info
from cv_intake_ai.cv_pipeline.candidate_structurer import structure_candidate
from cv_intake_ai.cv_pipeline.document_signals import detect_document_structure, extract_contact_info
from cv_intake_ai.cv_pipeline.quality_analyzer import analyze_cv_quality
from cv_intake_ai.cv_pipeline.text_extractor import extract_text_from_file
from cv_intake_ai.cv_pipeline.upload_pipeline import process_upload, run_upload_pipeline

__all__ = [
    "extract_text_from_file",
    "detect_document_structure",
    "extract_contact_info",
    "structure_candidate",
    "remove_personal_info",
    "analyze_cv_quality",
    "process_upload",
    "run_upload_pipeline",
]
