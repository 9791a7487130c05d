"""Utility exports."""

from .errors import (
    CVIntakeError,
    EmptyExtraction,
    ExternalServiceDegraded,
    ExtractionFailed,
    LLMResponseError,
    PersistenceFailed,
    UnsupportedFormat,
    UploadTooLarge,
)
from .helpers import extract_emails, parse_llm_json
from .logger import get_logger

__all__ = [
    "get_logger",
    "extract_emails",
    "parse_llm_json",
    "CVIntakeError",
    "UnsupportedFormat",
    "ExtractionFailed",
    "EmptyExtraction",
    "UploadTooLarge",
    "ExternalServiceDegraded",
    "LLMResponseError",
    "PersistenceFailed",
]
