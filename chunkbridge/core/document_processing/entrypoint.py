"""
Document pipeline orchestrator.

Coordinates chunking and the dual-write coordinator for one document.
Store handles are passed per call; the pipeline opens and closes nothing.

Dependencies: All task modules, configs
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time

from .configs import IngestionPipelineSettings, get_pipeline_settings
from .dual_write import DualWriteCoordinator
from .models import ChunkSpan, ContentType, PipelineResult, SourceDocument
from .ports import ChunkRecordStore, Embedder, VectorIndex
from .tasks import ChunkingTask

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Orchestrate document ingestion: chunk -> (id, embed, vector upsert, row insert) per chunk."""

    def __init__(
        self,
        embedder: Embedder,
        settings: IngestionPipelineSettings | None = None,
    ) -> None:
        """
        Initialize pipeline with configuration.

        Args:
            embedder: Embedding collaborator
            settings: Pipeline settings (uses defaults if None)
        """
        self._settings = settings or get_pipeline_settings()

        self._chunking_task = ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
        )
        self._coordinator = DualWriteCoordinator(
            embedder=embedder,
            max_attempts=self._settings.max_attempts,
            initial_backoff_s=self._settings.initial_backoff_s,
            max_backoff_s=self._settings.max_backoff_s,
            max_concurrency=self._settings.max_concurrency,
            document_timeout_s=self._settings.document_timeout_s,
        )

    @property
    def settings(self) -> IngestionPipelineSettings:
        return self._settings

    def chunk(self, text: str) -> list[ChunkSpan]:
        """Split text with the configured chunker."""
        return self._chunking_task.split(text)

    async def process(
        self,
        document: SourceDocument,
        content_type: ContentType | str,
        vector_index: VectorIndex,
        record_store: ChunkRecordStore,
        spans: list[ChunkSpan] | None = None,
    ) -> PipelineResult:
        """
        Process one document through chunking and the dual write.

        Args:
            document: Source document
            content_type: Source kind (text, pdf)
            vector_index: Vector index handle
            record_store: Relational store handle
            spans: Precomputed chunker output (chunked here if None)

        Returns:
            PipelineResult: Aggregate outcome with persisted chunk ids

        Raises:
            ValidationError: Document produced no chunks
        """
        start_time = time.perf_counter()
        content_type = ContentType(content_type)
        if spans is None:
            spans = self.chunk(document.source_text)

        write_result = await self._coordinator.write_document(
            document=document,
            spans=spans,
            content_type=content_type,
            vector_index=vector_index,
            record_store=record_store,
        )

        elapsed_ms = (time.perf_counter() - start_time) * 1000

        if not write_result.success:
            logger.error(
                f"{__name__}:process - Ingestion failed for document {document.document_id}",
                extra={"document_id": document.document_id, "error": write_result.error},
            )

        return PipelineResult(
            document_id=document.document_id,
            content_type=content_type.value,
            total_chunks=write_result.total_chunks,
            chunks_persisted=len(write_result.chunks),
            success=write_result.success,
            error=write_result.error,
            processing_time_ms=elapsed_ms,
            chunk_ids=[chunk.id for chunk in write_result.chunks],
            orphaned_chunk_ids=write_result.orphaned_chunk_ids,
        )
