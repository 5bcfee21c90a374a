"""
Database boundary layer: ORM models, CRUD operations, record store and connection management.

Exports:
  - Base, TimestampMixin: Model building blocks
  - DocumentChunkModel: Chunk row entity
  - BaseCRUD, DocumentChunkCRUD, document_chunk_crud: CRUD operations
  - SqlChunkRecordStore: ChunkRecordStore over an AsyncSession

Connection helpers live in chunkbridge.boundary.db.connection and are not
imported here so that models can be used without loading settings.

Dependencies: sqlalchemy
System role: Database adapter for the relational half of the dual write
"""

from chunkbridge.boundary.db.base import Base, TimestampMixin
from chunkbridge.boundary.db.models.document_chunk_model import DocumentChunkModel
from chunkbridge.boundary.db.CRUD import BaseCRUD, DocumentChunkCRUD, document_chunk_crud
from chunkbridge.boundary.db.chunk_record_store import SqlChunkRecordStore

__all__ = [
    "Base",
    "TimestampMixin",
    "DocumentChunkModel",
    "BaseCRUD",
    "DocumentChunkCRUD",
    "document_chunk_crud",
    "SqlChunkRecordStore",
]
