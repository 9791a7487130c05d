"""CV upload pipeline: extract text, structure, anonymize, assess quality, persist."""

import asyncio
from typing import Optional

from cv_intake_ai.config import MAX_UPLOAD_BYTES
from cv_intake_ai.cv_pipeline.anonymizer import remove_personal_info
from cv_intake_ai.cv_pipeline.candidate_structurer import structure_candidate
from cv_intake_ai.cv_pipeline.document_signals import detect_document_structure, extract_contact_info
from cv_intake_ai.cv_pipeline.quality_analyzer import analyze_cv_quality
from cv_intake_ai.cv_pipeline.text_extractor import extract_text_from_file
from cv_intake_ai.schemas.candidate import create_anonymous_candidate
from cv_intake_ai.schemas.processed_upload import ProcessedUpload
from cv_intake_ai.services.llm_client import LLMClient
from cv_intake_ai.services.record_store import RecordStore
from cv_intake_ai.utils.errors import EmptyExtraction, PersistenceFailed, UploadTooLarge
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)


def _persist(upload: ProcessedUpload, record_store: RecordStore) -> ProcessedUpload:
    """Save both records; a failed save is logged and leaves only its own id unset."""
    try:
        record_id = record_store.save_candidate(upload)
    except PersistenceFailed:
        logger.exception("Saving %s failed; returning result without record ids", upload.original_file_name)
        return upload
    upload = upload.model_copy(update={"record_id": record_id})
    try:
        internal_id = record_store.save_anonymous(upload.anonymized, upload.original_file_name)
    except PersistenceFailed:
        logger.exception("Saving anonymous copy of %s failed (record=%s)", upload.original_file_name, record_id)
        return upload
    logger.info("CV saved: record=%s internal=%s", record_id, internal_id)
    return upload.model_copy(update={"internal_record_id": internal_id})


async def process_upload(
    file_bytes: bytes,
    filename: str,
    llm_client: Optional[LLMClient] = None,
    record_store: Optional[RecordStore] = None,
    max_bytes: Optional[int] = MAX_UPLOAD_BYTES,
) -> ProcessedUpload:
    """
    Run one upload through the pipeline.
    Raises UploadTooLarge, UnsupportedFormat, ExtractionFailed or EmptyExtraction; every stage
    after extraction degrades to its fallback instead of failing.
    """
    size = len(file_bytes or b"")
    if max_bytes is not None and size > max_bytes:
        raise UploadTooLarge(filename, size, max_bytes)

    logger.info("Processing upload %s (%s bytes)", filename, size)
    text = extract_text_from_file(file_bytes, filename)
    if not text:
        raise EmptyExtraction(filename)

    structure = detect_document_structure(text)
    contact = extract_contact_info(text)
    logger.info(
        "Structure confidence=%s%% contact(email=%s phone=%s)",
        structure.confidence,
        bool(contact.email),
        bool(contact.phone),
    )

    candidate, redacted_text, quality = await asyncio.gather(
        structure_candidate(text, structure, contact, llm_client),
        remove_personal_info(text, llm_client),
        analyze_cv_quality(text, llm_client, structure),
    )

    upload = ProcessedUpload(
        original_file_name=filename,
        original_content=text,
        candidate=candidate,
        anonymized=create_anonymous_candidate(candidate),
        redacted_text=redacted_text,
        quality=quality,
    )
    if record_store is not None:
        upload = _persist(upload, record_store)
    logger.info(
        "Upload %s processed: source=%s quality=%s",
        filename,
        candidate.extraction_source,
        quality.overall_score,
    )
    return upload


def run_upload_pipeline(
    file_bytes: bytes,
    filename: str,
    llm_client: Optional[LLMClient] = None,
    record_store: Optional[RecordStore] = None,
    max_bytes: Optional[int] = MAX_UPLOAD_BYTES,
) -> ProcessedUpload:
    """
    Synchronous entry point for process_upload.
    Uses a dedicated event loop; safe to call from sync context (e.g. Streamlit).
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(
            process_upload(file_bytes, filename, llm_client, record_store, max_bytes)
        )
    finally:
        loop.close()
