"""
Ingestion request/response schemas.

Request and result contracts for the text and PDF ingestion entry points.
Response bodies serialize with camelCase aliases (documentId) and omit
unset fields.

Dependencies: pydantic
System role: Ingestion API contracts
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TextIngestionRequest(BaseModel):
    """Request schema for raw text ingestion."""

    text: str | None = Field(default=None, description="Text to chunk and embed")
    id: str | None = Field(default=None, description="Caller-supplied document id")
    metadata: dict[str, Any] | None = Field(
        default_factory=dict,
        description="JSON metadata copied onto every chunk",
    )


class FileIngestionRequest(BaseModel):
    """Uploaded file plus the raw metadata form field."""

    file_bytes: bytes | None = Field(default=None, description="Raw upload content")
    file_name: str | None = Field(default=None, description="Original upload file name")
    metadata_json: str | None = Field(default=None, description="Metadata as a JSON object string")
    content_type: str | None = Field(default=None, description="Upload MIME type, for logging")

    @property
    def size(self) -> int:
        return len(self.file_bytes) if self.file_bytes else 0


class MetadataParseResult(BaseModel):
    """Outcome of parsing caller metadata; error is set when it fell back to {}."""

    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class IngestionResult(BaseModel):
    """Outcome of an ingestion entry point, with its HTTP-equivalent status."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(description="True only when every chunk was persisted")
    message: str | None = Field(default=None, description="Human-readable outcome")
    chunks: int | None = Field(default=None, description="Number of chunks persisted")
    document_id: str | None = Field(
        default=None,
        serialization_alias="documentId",
        description="Document id the chunks were grouped under",
    )
    error: str | None = Field(default=None, description="Failure reason")
    status_code: int = Field(default=200, exclude=True, description="HTTP-equivalent status")

    def to_response(self) -> dict[str, Any]:
        """Response body: camelCase aliases, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
