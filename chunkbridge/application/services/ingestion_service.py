"""
Ingestion service orchestrator.

Entry points for raw text and PDF uploads. Validates input and store
readiness before any write, runs the document pipeline, and maps the
outcome onto an IngestionResult with an HTTP-equivalent status.

Dependencies: chunkbridge.core.document_processing, chunkbridge.application.services.pdf_service
System role: Ingestion orchestration
"""

import json
import logging
from pathlib import Path

from chunkbridge.application.services.pdf_service import (
    PdfProcessingService,
    cleanup_temp_file,
)
from chunkbridge.core.document_processing.configs import (
    IngestionPipelineSettings,
    get_pipeline_settings,
)
from chunkbridge.core.document_processing.entrypoint import DocumentPipeline
from chunkbridge.core.document_processing.models import ContentType, SourceDocument
from chunkbridge.core.document_processing.ports import ChunkRecordStore, VectorIndex
from chunkbridge.core.exceptions import (
    MetadataParseError,
    StoreNotInitializedError,
    ValidationError,
)
from chunkbridge.models.ingestion import (
    FileIngestionRequest,
    IngestionResult,
    MetadataParseResult,
    TextIngestionRequest,
)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf"}


def parse_metadata_json(raw: str | None) -> MetadataParseResult:
    """
    Parse the metadata form field.

    Malformed JSON or a non-object value falls back to empty metadata; the
    failure is reported on the result, never raised.

    Args:
        raw: JSON object string, or None/blank for no metadata

    Returns:
        MetadataParseResult: Parsed metadata, with error set on fallback
    """
    if raw is None or not raw.strip():
        return MetadataParseResult()

    try:
        value = json.loads(raw)
        if not isinstance(value, dict):
            raise MetadataParseError(
                f"Metadata must be a JSON object, got {type(value).__name__}", raw=raw
            )
    except json.JSONDecodeError as e:
        error = MetadataParseError(f"Invalid metadata JSON: {e.msg}", raw=raw)
        logger.warning(f"{__name__}:parse_metadata_json - {error}")
        return MetadataParseResult(error=error.message)
    except MetadataParseError as e:
        logger.warning(f"{__name__}:parse_metadata_json - {e}")
        return MetadataParseResult(error=e.message)

    return MetadataParseResult(metadata=value)


def _validation_failure(error: ValidationError, status_code: int = 400) -> IngestionResult:
    return IngestionResult(success=False, error=error.message, status_code=status_code)


class IngestionService:
    """
    Ingestion service orchestrator.

    Store handles are injected per request; the service opens and closes
    no connections.
    """

    def __init__(
        self,
        pipeline: DocumentPipeline,
        record_store: ChunkRecordStore,
        vector_index: VectorIndex | None,
        pdf_service: PdfProcessingService | None = None,
        settings: IngestionPipelineSettings | None = None,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            pipeline: Shared document pipeline
            record_store: Request-scoped relational store
            vector_index: Vector index handle (None until initialized)
            pdf_service: PDF extractor (built from pipeline if None)
            settings: Pipeline settings (upload limits)
        """
        self._pipeline = pipeline
        self._record_store = record_store
        self._vector_index = vector_index
        self._settings = settings or get_pipeline_settings()
        self._pdf_service = pdf_service or PdfProcessingService(
            pipeline=pipeline,
            upload_directory=self._settings.upload_directory,
        )

    def _require_vector_index(self) -> VectorIndex:
        if self._vector_index is None:
            raise StoreNotInitializedError("vector_index")
        return self._vector_index

    async def ingest_text(self, request: TextIngestionRequest) -> IngestionResult:
        """
        Chunk, embed and dual-write raw text.

        Validation runs before any write: text and id present, vector index
        initialized, at least one chunk.

        Args:
            request: Text, document id and optional metadata

        Returns:
            IngestionResult: 200 success, 400 invalid input, 503 store not ready, 500 failure
        """
        document_id = request.id
        try:
            if not request.text or not request.id or not request.id.strip():
                raise ValidationError("Text & ID required", field="text")

            try:
                vector_index = self._require_vector_index()
            except StoreNotInitializedError as e:
                return _validation_failure(e, status_code=503)

            spans = self._pipeline.chunk(request.text)
            if not spans:
                raise ValidationError("Text produced no chunks", field="text")
            logger.info(f"{__name__}:ingest_text - Split text into {len(spans)} chunks")

            document = SourceDocument(
                document_id=request.id,
                source_text=request.text,
                base_metadata=request.metadata or {},
            )
            result = await self._pipeline.process(
                document=document,
                content_type=ContentType.TEXT,
                vector_index=vector_index,
                record_store=self._record_store,
                spans=spans,
            )
        except ValidationError as e:
            return _validation_failure(e)
        except Exception as e:
            logger.exception(
                f"{__name__}:ingest_text - Error embedding text",
                extra={"document_id": document_id, "error": str(e)},
            )
            return IngestionResult(
                success=False,
                error=str(e),
                message="Internal Server Error",
                document_id=document_id,
                status_code=500,
            )

        if not result.success:
            return IngestionResult(
                success=False,
                error=result.error,
                message="Internal Server Error",
                chunks=result.chunks_persisted,
                document_id=document_id,
                status_code=500,
            )

        return IngestionResult(
            success=True,
            message=f"Text processed and split into {result.total_chunks} chunks",
            chunks=result.chunks_persisted,
            document_id=document_id,
            status_code=200,
        )

    def _validate_upload(self, request: FileIngestionRequest) -> None:
        if not request.file_bytes or not request.file_name:
            raise ValidationError("No PDF file uploaded", field="file")

        extension = Path(request.file_name).suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                f"File type '{extension}' not allowed. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
                field="file",
            )

        limit = self._settings.max_upload_bytes
        if request.size > limit:
            raise ValidationError(
                f"File too large. Maximum size: {limit // (1024 * 1024)}MB",
                field="file",
                details={"size": request.size},
            )

    async def ingest_file(self, request: FileIngestionRequest) -> IngestionResult:
        """
        Save, extract and ingest an uploaded PDF.

        Args:
            request: Upload bytes, file name and optional metadata JSON

        Returns:
            IngestionResult: Relayed PDF processing result, or 400/503/500
        """
        try:
            self._validate_upload(request)
            vector_index = self._require_vector_index()
        except StoreNotInitializedError as e:
            return _validation_failure(e, status_code=503)
        except ValidationError as e:
            logger.warning(
                f"{__name__}:ingest_file - Upload rejected: {e.message}",
                extra={"file_name": request.file_name},
            )
            return _validation_failure(e)

        parsed = parse_metadata_json(request.metadata_json)

        logger.info(
            f"{__name__}:ingest_file - Processing file",
            extra={
                "file_name": request.file_name,
                "mimetype": request.content_type,
                "size": request.size,
                "metadata_fallback": not parsed.ok,
            },
        )

        file_path: str | None = None
        try:
            file_path = self._pdf_service.save_pdf_to_disk(request.file_bytes, request.file_name)
            return await self._pdf_service.process(
                file_path=file_path,
                vector_index=vector_index,
                metadata=parsed.metadata,
                record_store=self._record_store,
            )
        except Exception as e:
            logger.exception(
                f"{__name__}:ingest_file - Error uploading PDF",
                extra={"file_name": request.file_name, "error": str(e)},
            )
            return IngestionResult(
                success=False,
                error=str(e),
                message="Failed to process PDF upload",
                status_code=500,
            )
        finally:
            if file_path is not None:
                cleanup_temp_file(file_path)
