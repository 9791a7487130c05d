"""Error taxonomy for the CV intake pipeline.

Only ``UnsupportedFormat``, ``ExtractionFailed``, ``EmptyExtraction`` and
``UploadTooLarge`` are meant to reach the caller. ``ExternalServiceDegraded``
is always caught by the stage that made the LLM call, and ``PersistenceFailed``
is logged by the upload pipeline without failing the response.
"""

from typing import Optional


class CVIntakeError(Exception):
    """Base class for all pipeline errors."""


class UnsupportedFormat(CVIntakeError):
    """File extension is not one of pdf, doc, docx, txt."""

    def __init__(self, filename: str, extension: Optional[str] = None) -> None:
        self.filename = filename
        self.extension = extension or ""
        super().__init__(f"Unsupported file type: {self.extension or '(none)'} ({filename})")


class ExtractionFailed(CVIntakeError):
    """The document parser could not produce text."""

    def __init__(self, filename: str, file_format: str, reason: str = "") -> None:
        self.filename = filename
        self.file_format = file_format
        self.reason = reason
        message = f"Failed to extract text from {filename} (format={file_format})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EmptyExtraction(CVIntakeError):
    """Extraction succeeded but produced no usable text."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"Could not extract text from {filename}")


class UploadTooLarge(CVIntakeError):
    """Upload exceeds the configured size limit."""

    def __init__(self, filename: str, size: int, limit: int) -> None:
        self.filename = filename
        self.size = size
        self.limit = limit
        super().__init__(f"{filename} is {size} bytes; limit is {limit} bytes")


class ExternalServiceDegraded(CVIntakeError):
    """LLM call failed: missing credentials, network, rate limit, bad reply."""


class LLMResponseError(ExternalServiceDegraded):
    """LLM replied, but the content is empty or not the JSON we asked for."""


class PersistenceFailed(CVIntakeError):
    """Record store write or read failed."""
