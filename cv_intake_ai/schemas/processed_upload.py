"""Result of one CV upload run through the pipeline."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cv_intake_ai.schemas.candidate import AnonymousCandidateRecord, CandidateRecord
from cv_intake_ai.schemas.quality import QualityReport


class ProcessedUpload(BaseModel):
    """Everything the pipeline produced for one upload; record ids are None if persistence failed or was skipped."""

    model_config = ConfigDict(populate_by_name=True)

    original_file_name: str = Field(..., alias="originalFileName")
    original_content: str = Field(..., alias="originalContent", description="Cleaned extracted text")
    candidate: CandidateRecord
    anonymized: AnonymousCandidateRecord
    redacted_text: str = Field(..., alias="redactedText")
    quality: QualityReport
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")
    record_id: Optional[str] = Field(default=None, alias="recordId")
    internal_record_id: Optional[str] = Field(default=None, alias="internalRecordId")
