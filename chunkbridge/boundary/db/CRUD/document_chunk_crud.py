"""
Document chunk CRUD operations.

Provides read helpers over document_chunks used by verification and
reconciliation: rows per document, row by vector key, and row counts.

Dependencies: sqlalchemy, chunkbridge.boundary.db.models.document_chunk_model
System role: Chunk row persistence operations
"""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chunkbridge.boundary.db.CRUD.base_crud import BaseCRUD
from chunkbridge.boundary.db.models.document_chunk_model import DocumentChunkModel


class DocumentChunkCRUD(BaseCRUD[DocumentChunkModel]):
    """CRUD operations for DocumentChunkModel."""

    def __init__(self) -> None:
        """Initialize DocumentChunkCRUD with DocumentChunkModel."""
        super().__init__(DocumentChunkModel)

    async def get_by_document_id(
        self,
        session: AsyncSession,
        document_id: str,
    ) -> Sequence[DocumentChunkModel]:
        """
        Retrieve all chunk rows for a document, oldest first.

        Re-ingesting a document id adds a new set of rows, so the result can
        hold several generations of the same document.

        Args:
            session: Async database session
            document_id: Caller-supplied document id

        Returns:
            Sequence of chunk rows
        """
        stmt = (
            select(DocumentChunkModel)
            .where(DocumentChunkModel.document_id == document_id)
            .order_by(DocumentChunkModel.created_at, DocumentChunkModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_embedding_id(
        self,
        session: AsyncSession,
        embedding_id: str,
    ) -> DocumentChunkModel | None:
        """
        Retrieve the row joined to a vector key.

        Args:
            session: Async database session
            embedding_id: Vector key

        Returns:
            DocumentChunkModel if found, None otherwise
        """
        stmt = select(DocumentChunkModel).where(DocumentChunkModel.embedding_id == embedding_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_document_id(self, session: AsyncSession, document_id: str) -> int:
        """Count chunk rows stored for a document."""
        stmt = (
            select(func.count())
            .select_from(DocumentChunkModel)
            .where(DocumentChunkModel.document_id == document_id)
        )
        result = await session.execute(stmt)
        return result.scalar_one()


document_chunk_crud = DocumentChunkCRUD()
