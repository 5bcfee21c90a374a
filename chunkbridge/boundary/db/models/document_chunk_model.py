"""
Document chunk ORM model.

One row per ingested chunk. The primary key is the chunk id, which is also
the vector key in the vector index; embedding_id repeats it as the explicit
join pointer.

Dependencies: sqlalchemy, chunkbridge.boundary.db.base
System role: Relational half of the chunk dual write
"""

from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from chunkbridge.boundary.db.base import Base, TimestampMixin


class DocumentChunkModel(Base, TimestampMixin):
    """
    Document chunk ORM model.

    Attributes:
        id: Chunk id ({content_type}-{document_id}-chunk-{index}-{suffix})
        content: Chunk text (identical to metadata["text"] and the embedded text)
        content_type: Source kind (text, pdf)
        chunk_metadata: Merged chunk metadata, stored in the "metadata" column
        document_id: Caller-supplied document id (not unique over time)
        embedding_id: Vector key in the vector index (equals id)
        created_at: Row creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "document_chunks"

    id: Mapped[str] = mapped_column(
        String(512),
        primary_key=True,
        doc="Chunk id shared with the vector index",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Chunk text",
    )

    content_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        doc="Source kind of the document (text, pdf)",
    )

    # "metadata" is reserved on declarative classes; the column keeps the name
    chunk_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
        doc="sourceId, chunkIndex, totalChunks, type, text plus caller metadata",
    )

    document_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        doc="Caller-supplied document id",
    )

    embedding_id: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        index=True,
        doc="Vector key of this chunk's embedding",
    )

    def __repr__(self) -> str:
        return f"<DocumentChunkModel(id={self.id}, document_id={self.document_id})>"
