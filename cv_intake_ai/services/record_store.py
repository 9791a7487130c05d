"""Persistence for processed CVs and their anonymous copies (SQLAlchemy, SQLite by default)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import JSON, DateTime, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from cv_intake_ai.config import DATABASE_URL
from cv_intake_ai.schemas.candidate import AnonymousCandidateRecord, CandidateRecord
from cv_intake_ai.schemas.processed_upload import ProcessedUpload
from cv_intake_ai.utils.errors import PersistenceFailed
from cv_intake_ai.utils.helpers import random_base36, timestamp_ms
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ProcessedCV(Base):
    __tablename__ = "processed_cvs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    original_file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    original_content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    extracted_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    personal_info_removed: Mapped[str] = mapped_column(Text, default="", nullable=False)
    quality: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


class InternalCV(Base):
    __tablename__ = "internal_cvs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    candidate_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    original_file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    anonymous_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


def _record_id(prefix: str) -> str:
    return f"{prefix}-{timestamp_ms()}-{random_base36(6)}"


class RecordStore:
    """Create/read access to processed and internal (anonymous) CV records."""

    def __init__(self, database_url: str = DATABASE_URL, echo: bool = False) -> None:
        try:
            self._engine = create_engine(database_url, echo=echo)
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise PersistenceFailed(f"Could not open record store: {e}") from e
        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)

    def _session(self) -> Session:
        return self._sessions()

    def save_candidate(self, upload: ProcessedUpload) -> str:
        """Persist the structured record with its source and redacted text. Returns the new id."""
        row = ProcessedCV(
            id=_record_id("cv"),
            original_file_name=upload.original_file_name,
            original_content=upload.original_content,
            extracted_data=upload.candidate.model_dump(mode="json", by_alias=True),
            personal_info_removed=upload.redacted_text,
            quality=upload.quality.model_dump(mode="json", by_alias=True),
            created_at=upload.created_at,
        )
        try:
            with self._session() as session, session.begin():
                session.add(row)
        except SQLAlchemyError as e:
            raise PersistenceFailed(f"Could not save processed CV: {e}") from e
        return row.id

    def save_anonymous(self, anonymous: AnonymousCandidateRecord, original_file_name: str) -> str:
        """Persist the anonymous record for internal use. Returns the new id."""
        row = InternalCV(
            id=_record_id("internal"),
            candidate_id=anonymous.id,
            original_file_name=original_file_name,
            anonymous_data=anonymous.model_dump(mode="json", by_alias=True),
        )
        try:
            with self._session() as session, session.begin():
                session.add(row)
        except SQLAlchemyError as e:
            raise PersistenceFailed(f"Could not save anonymous CV: {e}") from e
        return row.id

    def get_candidate(self, record_id: str) -> Optional[CandidateRecord]:
        try:
            with self._session() as session:
                row = session.get(ProcessedCV, record_id)
        except SQLAlchemyError as e:
            raise PersistenceFailed(f"Could not read processed CV {record_id}: {e}") from e
        return CandidateRecord.model_validate(row.extracted_data) if row else None

    def get_anonymous(self, record_id: str) -> Optional[AnonymousCandidateRecord]:
        try:
            with self._session() as session:
                row = session.get(InternalCV, record_id)
        except SQLAlchemyError as e:
            raise PersistenceFailed(f"Could not read internal CV {record_id}: {e}") from e
        return AnonymousCandidateRecord.model_validate(row.anonymous_data) if row else None

    def update_anonymous(self, record_id: str, anonymous: AnonymousCandidateRecord) -> bool:
        """Replace the stored anonymous data (editor save). Returns False if the id is unknown."""
        try:
            with self._session() as session, session.begin():
                row = session.get(InternalCV, record_id)
                if row is None:
                    return False
                row.anonymous_data = anonymous.model_dump(mode="json", by_alias=True)
                row.updated_at = _utcnow()
        except SQLAlchemyError as e:
            raise PersistenceFailed(f"Could not update internal CV {record_id}: {e}") from e
        return True

    def list_anonymous(self, limit: int = 50) -> List[tuple[str, str, AnonymousCandidateRecord]]:
        """Most recent internal records as (record id, original filename, record)."""
        stmt = select(InternalCV).order_by(InternalCV.created_at.desc()).limit(limit)
        try:
            with self._session() as session:
                rows = session.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise PersistenceFailed(f"Could not list internal CVs: {e}") from e
        return [
            (row.id, row.original_file_name, AnonymousCandidateRecord.model_validate(row.anonymous_data))
            for row in rows
        ]
