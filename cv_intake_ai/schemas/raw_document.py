"""Uploaded CV file as received, before text extraction."""

from pydantic import BaseModel, ConfigDict, Field


class RawDocument(BaseModel):
    """Raw upload: bytes plus the original filename. The format comes from the extension."""

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(..., description="File bytes, kept in memory only")
    filename: str = Field(..., description="Original filename as uploaded")

    @property
    def extension(self) -> str:
        name = (self.filename or "").strip().lower()
        if "." not in name:
            return ""
        return name.rsplit(".", 1)[-1]
