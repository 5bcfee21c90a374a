"""
Result models for document ingestion.

Represents per-chunk write outcomes recorded by the dual-write coordinator and
the aggregate outcome returned by the pipeline.

Dependencies: pydantic
System role: Return types for DualWriteCoordinator.write_document() and DocumentPipeline.process()
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from .chunk import Chunk


class ChunkState(str, Enum):
    """Per-chunk progress through the dual write."""

    PENDING = "pending"
    EMBEDDED = "embedded"
    VECTOR_STORED = "vector_stored"
    PERSISTED = "persisted"
    FAILED = "failed"


@dataclass
class ChunkOutcome:
    """Mutable record of one chunk's progress, updated as each write completes."""

    index: int
    chunk_id: str | None = None
    state: ChunkState = ChunkState.PENDING
    error: str | None = None
    orphaned_vector: bool = False


@dataclass
class DocumentWriteResult:
    """Aggregate outcome of writing every chunk of one document."""

    document_id: str
    total_chunks: int
    outcomes: list[ChunkOutcome]
    chunks: list[Chunk] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None and all(o.state == ChunkState.PERSISTED for o in self.outcomes)

    @property
    def persisted(self) -> list[ChunkOutcome]:
        return [o for o in self.outcomes if o.state == ChunkState.PERSISTED]

    @property
    def orphaned_chunk_ids(self) -> list[str]:
        return [o.chunk_id for o in self.outcomes if o.orphaned_vector and o.chunk_id]


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document_id: str = Field(description="Caller-supplied document identifier")
    content_type: str = Field(description="Content type used for chunk ids")
    total_chunks: int = Field(description="Number of chunks generated by the chunker")
    chunks_persisted: int = Field(description="Chunks written to both stores")
    success: bool = Field(description="True only when every chunk was persisted")
    error: str | None = Field(default=None, description="Aggregated failure reason")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
    chunk_ids: list[str] = Field(default_factory=list, description="Ids of persisted chunks in index order")
    orphaned_chunk_ids: list[str] = Field(
        default_factory=list,
        description="Chunks whose vector was written without a relational row",
    )
