"""
Document ingestion API endpoints.

Routes: POST /documents/text, POST /documents/pdf

Dependencies: chunkbridge.application.services, chunkbridge.models
System role: Ingestion HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from chunkbridge.api.deps import get_ingestion_service
from chunkbridge.application.services import IngestionService
from chunkbridge.models.ingestion import FileIngestionRequest, TextIngestionRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/text")
async def embed_text(
    request: TextIngestionRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> JSONResponse:
    """
    Split text into chunks and write each chunk to the vector index and chunk table.

    Args:
        request: JSON body {text, id, metadata?}
        service: Injected IngestionService

    Returns:
        JSONResponse: {success, message, chunks, documentId} or {success, error, ...}
        with status 200, 400, 503 or 500
    """
    logger.info("Text ingestion request received", extra={"document_id": request.id})
    result = await service.ingest_text(request)
    return JSONResponse(status_code=result.status_code, content=result.to_response())


@router.post("/pdf")
async def upload_pdf(
    file: UploadFile | None = File(None),
    metadata: str | None = Form(None),
    service: IngestionService = Depends(get_ingestion_service),
) -> JSONResponse:
    """
    Upload a PDF via multipart form and ingest its text.

    Args:
        file: Uploaded PDF (multipart field "file")
        metadata: Optional JSON object string (multipart field "metadata")
        service: Injected IngestionService

    Returns:
        JSONResponse: Relayed processing result with status 200, 400, 503 or 500
    """
    file_bytes = await file.read() if file is not None else None
    request = FileIngestionRequest(
        file_bytes=file_bytes,
        file_name=file.filename if file is not None else None,
        metadata_json=metadata,
        content_type=file.content_type if file is not None else None,
    )
    result = await service.ingest_file(request)
    return JSONResponse(status_code=result.status_code, content=result.to_response())
