"""
Chunk domain models for the ingestion pipeline.

Represents the source document, the positional spans produced by the chunker
and the fully identified chunk that is written to both stores.

Dependencies: pydantic
System role: Data structures passed between chunker, coordinator and stores
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ContentType(str, Enum):
    """Source kind of an ingested document; first segment of every chunk id."""

    TEXT = "text"
    PDF = "pdf"


@dataclass(frozen=True)
class ChunkSpan:
    """Contiguous substring of the source text produced by the chunker."""

    index: int
    content: str
    start_index: int

    @property
    def end_index(self) -> int:
        return self.start_index + len(self.content)


class SourceDocument(BaseModel):
    """Caller-supplied document. Never persisted as its own row."""

    document_id: str = Field(min_length=1, description="Caller-supplied document identifier")
    source_text: str = Field(description="Full text to be chunked")
    base_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="JSON-serializable caller metadata copied onto every chunk",
    )


class Chunk(BaseModel):
    """Identified chunk with metadata and (once embedded) its vector."""

    id: str = Field(description="Chunk identifier shared by vector key, row key and embedding_id")
    index: int = Field(ge=0, description="0-based position within the document")
    total_chunks: int = Field(ge=1, description="Number of chunks the document was split into")
    content: str = Field(description="Chunk text content")
    content_type: ContentType = Field(description="Source kind of the document")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Merged chunk metadata")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
