"""
Models for document processing pipeline.

Exports: Chunk, ChunkSpan, ContentType, SourceDocument, ChunkState, ChunkOutcome,
DocumentWriteResult, PipelineResult
"""

from .chunk import Chunk, ChunkSpan, ContentType, SourceDocument
from .pipeline_result import ChunkOutcome, ChunkState, DocumentWriteResult, PipelineResult

__all__ = [
    "Chunk",
    "ChunkSpan",
    "ContentType",
    "SourceDocument",
    "ChunkState",
    "ChunkOutcome",
    "DocumentWriteResult",
    "PipelineResult",
]
