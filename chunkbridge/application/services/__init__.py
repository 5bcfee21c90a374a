"""Service orchestrators."""

from .ingestion_service import IngestionService, parse_metadata_json
from .pdf_service import PdfProcessingService, cleanup_temp_file

__all__ = [
    "IngestionService",
    "PdfProcessingService",
    "cleanup_temp_file",
    "parse_metadata_json",
]
