"""
Vector database schemas.

Pydantic models for vector operations (write records and key lookups).
Used for type-safe vector index interactions.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, Field


class VectorRecord(BaseModel):
    """
    One entry in the vector index.

    The key is the chunk id, so a record can be joined back to its
    relational row through document_chunks.embedding_id.
    """

    id: str = Field(min_length=1, description="Vector key (chunk id)")
    values: list[float] = Field(description="Embedding vector")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Chunk metadata including sourceId, chunkIndex, totalChunks, type and text",
    )

    @property
    def dimension(self) -> int:
        return len(self.values)
