"""
SQLAlchemy-backed chunk record store.

Adapts DocumentChunkCRUD to the pipeline's ChunkRecordStore port: maps the
pipeline's camelCase field names to model columns, commits once per chunk,
and classifies database failures as transient or permanent.

One AsyncSession cannot be used by two tasks at once, so writes through the
same store are serialized with an asyncio.Lock. A retried insert whose row
already landed (commit acknowledged late) is recognized by its embedding id
and returned instead of failing on the duplicate key.

Dependencies: sqlalchemy
System role: Relational half of the chunk dual write
"""

import asyncio
import logging
from typing import Any

from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import FlushError

from chunkbridge.boundary.db.CRUD.document_chunk_crud import DocumentChunkCRUD
from chunkbridge.boundary.db.models.document_chunk_model import DocumentChunkModel
from chunkbridge.core.document_processing.ports import ChunkRecordStore
from chunkbridge.core.exceptions import PermanentExternalError, TransientExternalError

logger = logging.getLogger(__name__)

SERVICE_NAME = "relational_store"

# Connection drops, server restarts and pool exhaustion
TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)

# Primary key already taken
DUPLICATE_KEY_ERRORS = (IntegrityError, FlushError)


def to_model_kwargs(fields: dict[str, Any]) -> dict[str, Any]:
    """Map pipeline record fields to DocumentChunkModel attributes."""
    return {
        "id": fields["id"],
        "content": fields["content"],
        "content_type": fields["contentType"],
        "chunk_metadata": fields.get("metadata") or {},
        "document_id": fields["documentId"],
        "embedding_id": fields["embeddingId"],
    }


class SqlChunkRecordStore(ChunkRecordStore):
    """Write chunk rows through an AsyncSession owned by the caller."""

    def __init__(self, session: AsyncSession, crud: DocumentChunkCRUD | None = None) -> None:
        """
        Initialize record store.

        Args:
            session: Request-scoped async session (opened and closed by the caller)
            crud: CRUD helper (defaults to a new DocumentChunkCRUD)
        """
        self._session = session
        self._crud = crud or DocumentChunkCRUD()
        self._lock = asyncio.Lock()

    async def create(self, fields: dict[str, Any]) -> DocumentChunkModel:
        """
        Insert and commit one chunk row.

        Args:
            fields: {id, content, contentType, metadata, documentId, embeddingId}

        Returns:
            DocumentChunkModel: Created row, or the identical row already stored

        Raises:
            TransientExternalError: Connection or pool failure
            PermanentExternalError: Constraint violation or any other database error
        """
        async with self._lock:
            try:
                row = await self._crud.create(self._session, **to_model_kwargs(fields))
                await self._session.commit()
            except asyncio.CancelledError:
                await self._session.rollback()
                raise
            except DUPLICATE_KEY_ERRORS as e:
                await self._session.rollback()
                existing = await self._find_same_row(fields)
                if existing is None:
                    raise self._classify(e, fields) from e
                logger.info(
                    f"{__name__}:create - Chunk row already present",
                    extra={"chunk_id": fields["id"], "document_id": fields.get("documentId")},
                )
                return existing
            except SQLAlchemyError as e:
                await self._session.rollback()
                raise self._classify(e, fields) from e

        return row

    async def _find_same_row(self, fields: dict[str, Any]) -> DocumentChunkModel | None:
        """Return the stored row for this id if it carries the same embedding id."""
        try:
            existing = await self._crud.get_by_id(self._session, fields["id"])
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.warning(f"{__name__}:_find_same_row - {type(e).__name__}: {e}")
            return None
        if existing is None or existing.embedding_id != fields["embeddingId"]:
            return None
        return existing

    def _classify(
        self,
        e: SQLAlchemyError,
        fields: dict[str, Any],
    ) -> TransientExternalError | PermanentExternalError:
        error_cls = TransientExternalError if isinstance(e, TRANSIENT_DB_ERRORS) else PermanentExternalError
        logger.error(
            f"{__name__}:create - {type(e).__name__}: {e}",
            extra={"chunk_id": fields.get("id"), "document_id": fields.get("documentId")},
        )
        return error_cls(
            message=f"Failed to insert chunk row: {e}",
            service=SERVICE_NAME,
            operation="create",
            details={"chunk_id": fields.get("id"), "error_type": type(e).__name__},
        )
