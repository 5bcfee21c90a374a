"""
Database models package.

Exports:
  - DocumentChunkModel: Chunk row ORM model (document_chunks)

Dependencies: sqlalchemy, chunkbridge.boundary.db.base
System role: Database model definitions for ingested chunks
"""

from chunkbridge.boundary.db.models.document_chunk_model import DocumentChunkModel

__all__ = ["DocumentChunkModel"]
