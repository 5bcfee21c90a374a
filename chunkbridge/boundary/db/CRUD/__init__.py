"""
CRUD operations for database models.

Exports base CRUD class and the chunk CRUD implementation with a
pre-instantiated singleton for direct use.

Usage:
    from chunkbridge.boundary.db.CRUD import document_chunk_crud

    rows = await document_chunk_crud.get_by_document_id(db, "doc-1")
"""

from chunkbridge.boundary.db.CRUD.base_crud import BaseCRUD
from chunkbridge.boundary.db.CRUD.document_chunk_crud import DocumentChunkCRUD, document_chunk_crud

__all__ = [
    "BaseCRUD",
    "DocumentChunkCRUD",
    "document_chunk_crud",
]
