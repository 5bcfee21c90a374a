"""
PDF processing service.

Saves an upload to a private temp directory, extracts its text, and runs the
text through the same chunk + dual-write pipeline as raw text with
content_type "pdf".

Dependencies: chunkbridge.core.document_processing, langchain_community (via ParsingTask)
System role: Document text extractor for PDF uploads
"""

import asyncio
import logging
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Any

from chunkbridge.core.document_processing.entrypoint import DocumentPipeline
from chunkbridge.core.document_processing.models import ContentType, SourceDocument
from chunkbridge.core.document_processing.ports import (
    ChunkRecordStore,
    DocumentTextExtractor,
    VectorIndex,
)
from chunkbridge.core.document_processing.tasks import ParsingTask
from chunkbridge.core.exceptions import IngestionException, ParsingError
from chunkbridge.models.ingestion import IngestionResult

logger = logging.getLogger(__name__)

TEMP_DIR_PREFIX = "chunkbridge_"


def cleanup_temp_file(file_path: str) -> None:
    """
    Remove a temp upload file and its private temp directory.

    Args:
        file_path: Path returned by PdfProcessingService.save_pdf_to_disk
    """
    path = Path(file_path)
    parent_dir = path.parent
    try:
        if path.exists():
            path.unlink()
            logger.debug("Cleaned up temp file", extra={"file_path": file_path})

        if parent_dir.exists() and parent_dir.name.startswith(TEMP_DIR_PREFIX):
            shutil.rmtree(parent_dir, ignore_errors=True)
            logger.debug("Cleaned up temp directory", extra={"temp_dir": str(parent_dir)})
    except OSError as e:
        logger.warning(
            "Failed to cleanup temp file",
            extra={"file_path": file_path, "error": str(e)},
        )


class PdfProcessingService(DocumentTextExtractor):
    """Extract text from PDFs and ingest it through the document pipeline."""

    def __init__(
        self,
        pipeline: DocumentPipeline,
        parsing_task: ParsingTask | None = None,
        upload_directory: str | None = None,
    ) -> None:
        """
        Initialize PDF service.

        Args:
            pipeline: Shared document pipeline
            parsing_task: PDF text extractor (defaults to PyPDFLoader-based ParsingTask)
            upload_directory: Parent directory for temp uploads (system temp if None)
        """
        self._pipeline = pipeline
        self._parsing_task = parsing_task or ParsingTask()
        self._upload_directory = upload_directory

    def save_pdf_to_disk(self, file_bytes: bytes, file_name: str) -> str:
        """
        Write upload bytes to a new private temp directory.

        Args:
            file_bytes: Upload content
            file_name: Original file name (directory components are dropped)

        Returns:
            str: Path of the written file
        """
        safe_name = Path(file_name).name or "upload.pdf"
        temp_dir = tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=self._upload_directory)
        temp_path = Path(temp_dir) / safe_name
        temp_path.write_bytes(file_bytes)

        logger.info(
            "File saved to temp location",
            extra={"temp_path": str(temp_path), "size": len(file_bytes)},
        )
        return str(temp_path)

    async def process(
        self,
        file_path: str,
        vector_index: VectorIndex,
        metadata: dict[str, Any],
        record_store: ChunkRecordStore,
    ) -> IngestionResult:
        """
        Extract, chunk and dual-write a PDF.

        The document id is taken from metadata["documentId"] when present,
        otherwise a new UUID is generated.

        Args:
            file_path: Saved PDF path
            vector_index: Vector index handle
            metadata: Caller metadata (already parsed)
            record_store: Relational store handle

        Returns:
            IngestionResult: 200 on success, 500 on extraction or pipeline failure
        """
        document_id = str(metadata.get("documentId") or uuid.uuid4())
        file_name = Path(file_path).name

        try:
            text, page_count = await asyncio.to_thread(self._parsing_task.extract_text, file_path)
        except ParsingError as e:
            logger.error(
                f"{__name__}:process - PDF extraction failed",
                extra={"document_id": document_id, "file_path": file_path, "error": str(e)},
            )
            return IngestionResult(
                success=False,
                message="Failed to extract text from PDF",
                error=e.message,
                document_id=document_id,
                status_code=500,
            )

        spans = self._pipeline.chunk(text)
        if not spans:
            return IngestionResult(
                success=False,
                message="PDF produced no chunks",
                error="No text content to ingest",
                document_id=document_id,
                status_code=500,
            )

        document = SourceDocument(
            document_id=document_id,
            source_text=text,
            base_metadata={**metadata, "fileName": file_name, "pageCount": page_count},
        )

        try:
            result = await self._pipeline.process(
                document=document,
                content_type=ContentType.PDF,
                vector_index=vector_index,
                record_store=record_store,
                spans=spans,
            )
        except IngestionException as e:
            logger.error(
                f"{__name__}:process - Pipeline rejected PDF",
                extra={"document_id": document_id, "error": str(e)},
            )
            return IngestionResult(
                success=False,
                message="Failed to process PDF",
                error=e.message,
                document_id=document_id,
                status_code=500,
            )

        if not result.success:
            return IngestionResult(
                success=False,
                message="Failed to process PDF",
                error=result.error,
                chunks=result.chunks_persisted,
                document_id=document_id,
                status_code=500,
            )

        logger.info(
            f"{__name__}:process - PDF ingested",
            extra={
                "document_id": document_id,
                "page_count": page_count,
                "chunk_count": result.total_chunks,
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return IngestionResult(
            success=True,
            message=f"PDF processed and split into {result.total_chunks} chunks",
            chunks=result.chunks_persisted,
            document_id=document_id,
            status_code=200,
        )
