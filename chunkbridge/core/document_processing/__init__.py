"""
Document processing pipeline for ingestion.

Chunking, chunk identity and the vector + relational dual write.

Dependencies: langchain_text_splitters, langchain_aws, tenacity, pydantic
System role: Document ingestion pipeline entrypoint
"""

from .configs import (
    IngestionPipelineSettings,
    get_pipeline_settings,
)
from .models import Chunk, ChunkSpan, ContentType, PipelineResult, SourceDocument

__all__ = [
    "IngestionPipelineSettings",
    "get_pipeline_settings",
    "Chunk",
    "ChunkSpan",
    "ContentType",
    "PipelineResult",
    "SourceDocument",
]
