"""
In-memory vector index for local development and tests.

Keeps records in a dict keyed by chunk id. Not persistent and not shared
between processes.

Dependencies: None
System role: Development vector index (VECTOR_STORE_TYPE=memory)
"""

import logging

from chunkbridge.boundary.vdb.vector_schemas import VectorRecord
from chunkbridge.core.document_processing.ports import VectorIndex

logger = logging.getLogger(__name__)


class InMemoryVectorIndex(VectorIndex):
    """Dict-backed vector index."""

    def __init__(self, index_name: str = "document-chunks") -> None:
        self.index_name = index_name
        self._records: dict[str, VectorRecord] = {}

    async def upsert(self, records: list[VectorRecord]) -> None:
        for record in records:
            self._records[record.id] = record.model_copy(deep=True)

    async def query_by_key(self, keys: list[str]) -> list[VectorRecord]:
        return [self._records[key].model_copy(deep=True) for key in keys if key in self._records]

    def keys(self) -> list[str]:
        """All stored keys in insertion order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)
