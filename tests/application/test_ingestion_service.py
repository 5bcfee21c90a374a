"""
Unit tests for IngestionService.

Covers validation order, store readiness, metadata fallback and PDF temp
file cleanup. Uses the in-memory fakes from conftest.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from chunkbridge.application.services.ingestion_service import (
    IngestionService,
    parse_metadata_json,
)
from chunkbridge.application.services.pdf_service import PdfProcessingService
from chunkbridge.core.document_processing.entrypoint import DocumentPipeline
from chunkbridge.core.exceptions import PermanentExternalError
from chunkbridge.models.ingestion import FileIngestionRequest, TextIngestionRequest


@pytest.fixture
def pipeline(fake_embedder, pipeline_settings) -> DocumentPipeline:
    return DocumentPipeline(fake_embedder, settings=pipeline_settings)


@pytest.fixture
def parsing_task(sample_text: str) -> MagicMock:
    task = MagicMock()
    task.extract_text.return_value = (sample_text, 2)
    return task


@pytest.fixture
def service(pipeline, pipeline_settings, record_store, memory_index, parsing_task, tmp_path: Path) -> IngestionService:
    pdf_service = PdfProcessingService(pipeline, parsing_task=parsing_task, upload_directory=str(tmp_path))
    return IngestionService(
        pipeline=pipeline,
        record_store=record_store,
        vector_index=memory_index,
        pdf_service=pdf_service,
        settings=pipeline_settings,
    )


class TestParseMetadataJson:
    """Metadata form field parsing."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_is_empty(self, raw) -> None:
        result = parse_metadata_json(raw)
        assert result.metadata == {}
        assert result.ok

    def test_object_parsed(self) -> None:
        assert parse_metadata_json('{"course": "bio", "documentId": "d1"}').metadata == {
            "course": "bio",
            "documentId": "d1",
        }

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"'])
    def test_invalid_falls_back(self, raw: str) -> None:
        result = parse_metadata_json(raw)
        assert result.metadata == {}
        assert not result.ok


class TestIngestText:
    """Raw text entry point."""

    async def test_success(self, service, record_store, sample_text) -> None:
        result = await service.ingest_text(
            TextIngestionRequest(text=sample_text, id="doc-1", metadata={"course": "bio"})
        )

        assert result.status_code == 200
        assert result.success
        assert result.chunks == 3
        assert result.message == "Text processed and split into 3 chunks"
        assert result.to_response() == {
            "success": True,
            "message": "Text processed and split into 3 chunks",
            "chunks": 3,
            "documentId": "doc-1",
        }
        assert all(row["metadata"]["course"] == "bio" for row in record_store.rows.values())

    @pytest.mark.parametrize(
        "text, doc_id",
        [(None, "doc-1"), ("", "doc-1"), ("hello", None), ("hello", "  ")],
    )
    async def test_missing_text_or_id(self, service, record_store, text, doc_id) -> None:
        result = await service.ingest_text(TextIngestionRequest(text=text, id=doc_id))

        assert result.status_code == 400
        assert result.error == "Text & ID required"
        assert record_store.calls == 0

    async def test_validation_precedes_store_check(self, pipeline, record_store, pipeline_settings) -> None:
        service = IngestionService(pipeline, record_store, vector_index=None, settings=pipeline_settings)

        assert (await service.ingest_text(TextIngestionRequest(text=None, id="x"))).status_code == 400
        result = await service.ingest_text(TextIngestionRequest(text="hello", id="x"))
        assert result.status_code == 503
        assert result.error == "Database not yet initialized"

    async def test_whitespace_text_produces_no_chunks(self, service) -> None:
        result = await service.ingest_text(TextIngestionRequest(text="   \n  ", id="doc-1"))

        assert result.status_code == 400
        assert result.error == "Text produced no chunks"

    async def test_pipeline_failure_is_500(self, service, fake_embedder, sample_text) -> None:
        fake_embedder.fail_when(
            lambda text: True,
            PermanentExternalError("rejected", service="embedding", operation="embed"),
        )

        result = await service.ingest_text(TextIngestionRequest(text=sample_text, id="doc-1"))

        assert result.status_code == 500
        assert result.message == "Internal Server Error"
        assert result.error.startswith("Chunk 0 failed")
        assert result.chunks == 0


class TestIngestFile:
    """PDF upload entry point."""

    async def test_success_cleans_temp_dir(self, service, record_store, parsing_task, tmp_path) -> None:
        request = FileIngestionRequest(
            file_bytes=b"%PDF-1.4 fake",
            file_name="notes.pdf",
            metadata_json='{"documentId": "pdf-1", "course": "bio"}',
            content_type="application/pdf",
        )

        result = await service.ingest_file(request)

        assert result.status_code == 200
        assert result.document_id == "pdf-1"
        assert result.message == "PDF processed and split into 3 chunks"
        assert list(tmp_path.iterdir()) == []
        saved_path = parsing_task.extract_text.call_args.args[0]
        assert Path(saved_path).name == "notes.pdf"
        for row in record_store.rows.values():
            assert row["contentType"] == "pdf"
            assert row["id"].startswith("pdf-pdf-1-chunk-")
            assert row["metadata"]["fileName"] == "notes.pdf"
            assert row["metadata"]["pageCount"] == 2
            assert row["metadata"]["course"] == "bio"

    async def test_invalid_metadata_falls_back(self, service, record_store) -> None:
        request = FileIngestionRequest(file_bytes=b"%PDF", file_name="a.pdf", metadata_json="{oops")

        result = await service.ingest_file(request)

        assert result.status_code == 200
        assert result.document_id
        row = next(iter(record_store.rows.values()))
        assert "course" not in row["metadata"]

    async def test_no_file(self, service) -> None:
        result = await service.ingest_file(FileIngestionRequest())

        assert result.status_code == 400
        assert result.error == "No PDF file uploaded"

    async def test_wrong_extension(self, service) -> None:
        result = await service.ingest_file(FileIngestionRequest(file_bytes=b"x", file_name="a.docx"))

        assert result.status_code == 400
        assert "not allowed" in result.error

    async def test_too_large(self, pipeline, record_store, memory_index, pipeline_settings) -> None:
        settings = pipeline_settings.model_copy(update={"max_upload_bytes": 4})
        service = IngestionService(pipeline, record_store, memory_index, settings=settings)

        result = await service.ingest_file(FileIngestionRequest(file_bytes=b"12345", file_name="a.pdf"))

        assert result.status_code == 400
        assert result.error.startswith("File too large")

    async def test_store_not_ready(self, pipeline, record_store, pipeline_settings) -> None:
        service = IngestionService(pipeline, record_store, vector_index=None, settings=pipeline_settings)

        result = await service.ingest_file(FileIngestionRequest(file_bytes=b"%PDF", file_name="a.pdf"))

        assert result.status_code == 503

    async def test_unexpected_error_still_cleans_up(self, service, tmp_path) -> None:
        service._pdf_service.process = AsyncMock(side_effect=RuntimeError("disk on fire"))

        result = await service.ingest_file(FileIngestionRequest(file_bytes=b"%PDF", file_name="a.pdf"))

        assert result.status_code == 500
        assert result.message == "Failed to process PDF upload"
        assert list(tmp_path.iterdir()) == []
