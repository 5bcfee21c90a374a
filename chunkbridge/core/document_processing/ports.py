"""
Abstract collaborators consumed by the ingestion pipeline.

The coordinator only ever talks to these interfaces; concrete Bedrock,
S3 Vectors and SQLAlchemy implementations live in tasks/ and boundary/.
Adding a backend only requires subclassing and implementing the abstract
methods.

Dependencies: abc
System role: Ports between the dual-write core and external stores
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chunkbridge.boundary.vdb.vector_schemas import VectorRecord
    from chunkbridge.models.ingestion import IngestionResult


class Embedder(ABC):
    """Turns one chunk of text into a fixed-dimension vector."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of every vector returned by :meth:`embed`."""
        ...

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """
        Embed a single chunk.

        Raises:
            TransientExternalError: Throttling, quota or network failure
            PermanentExternalError: Rejected input or any other failure
        """
        ...


class VectorIndex(ABC):
    """Key/vector/metadata index keyed by chunk id."""

    @abstractmethod
    async def upsert(self, records: list[VectorRecord]) -> None:
        """Write records; returns only after the index acknowledged the batch."""
        ...

    @abstractmethod
    async def query_by_key(self, keys: list[str]) -> list[VectorRecord]:
        """Fetch records by key. Missing keys are omitted from the result."""
        ...


class ChunkRecordStore(ABC):
    """Relational store for one row per chunk."""

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> Any:
        """
        Insert one chunk row and commit it.

        Args:
            fields: {id, content, contentType, metadata, documentId, embeddingId}

        Returns:
            The created row
        """
        ...


class DocumentTextExtractor(ABC):
    """Extracts text from a saved upload and runs it through the pipeline."""

    @abstractmethod
    async def process(
        self,
        file_path: str,
        vector_index: VectorIndex,
        metadata: dict[str, Any],
        record_store: ChunkRecordStore,
    ) -> IngestionResult:
        """Ingest the file at file_path; failures are reported on the result."""
        ...
