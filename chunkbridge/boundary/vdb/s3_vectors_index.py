"""
S3 Vectors index for production ingestion.

Writes chunk vectors with boto3's s3vectors client (put_vectors) and reads
them back by key (get_vectors). The boto3 client is synchronous, so calls
run in a worker thread to keep the event loop free.

Metadata Keys:
- Filterable: sourceId, chunkIndex, totalChunks, type
- Non-filterable: text

Dependencies: boto3, botocore
System role: Production vector index (S3 Vectors)
"""

import asyncio
import logging
from typing import Any

import boto3

from chunkbridge.boundary.aws.errors import classify_aws_error
from chunkbridge.boundary.vdb.vector_schemas import VectorRecord
from chunkbridge.core.document_processing.ports import VectorIndex

logger = logging.getLogger(__name__)

SERVICE_NAME = "vector_index"


class S3VectorsIndex(VectorIndex):
    """Vector index backed by an Amazon S3 Vectors bucket/index."""

    def __init__(
        self,
        vectors_bucket: str = "chunkbridge-dev-vectors",
        index_name: str = "document-chunks",
        region: str = "us-east-1",
        client: Any | None = None,
    ) -> None:
        """
        Initialize S3 Vectors index.

        Args:
            vectors_bucket: S3 Vectors bucket name
            index_name: Index name within the bucket
            region: AWS region for S3 Vectors
            client: Pre-built s3vectors client (tests inject a mock)

        Raises:
            ValueError: When vectors_bucket or index_name is empty
        """
        if not vectors_bucket:
            raise ValueError("vectors_bucket cannot be empty")
        if not index_name:
            raise ValueError("index_name cannot be empty")

        self._vectors_bucket = vectors_bucket
        self._index_name = index_name
        self._client = client or boto3.client("s3vectors", region_name=region)

        logger.info(
            f"{__name__}:__init__ - S3 Vectors index ready",
            extra={"bucket": vectors_bucket, "index": index_name, "region": region},
        )

    async def upsert(self, records: list[VectorRecord]) -> None:
        """
        Write vectors; returns after S3 Vectors acknowledged the request.

        Raises:
            TransientExternalError: Throttling or network failure
            PermanentExternalError: Rejected request
        """
        if not records:
            return

        vectors = [
            {
                "key": record.id,
                "data": {"float32": [float(v) for v in record.values]},
                "metadata": record.metadata,
            }
            for record in records
        ]

        try:
            await asyncio.to_thread(
                self._client.put_vectors,
                vectorBucketName=self._vectors_bucket,
                indexName=self._index_name,
                vectors=vectors,
            )
        except Exception as e:
            error = classify_aws_error(e, service=SERVICE_NAME, operation="put_vectors")
            logger.error(
                f"{__name__}:upsert - {type(e).__name__}: {e}",
                extra={"keys": [r.id for r in records], "transient": error.transient},
            )
            raise error from e

        logger.debug(
            f"{__name__}:upsert - Stored {len(records)} vectors",
            extra={"bucket": self._vectors_bucket, "index": self._index_name},
        )

    async def query_by_key(self, keys: list[str]) -> list[VectorRecord]:
        """
        Fetch vectors with data and metadata by key.

        Raises:
            TransientExternalError: Throttling or network failure
            PermanentExternalError: Rejected request
        """
        if not keys:
            return []

        try:
            response = await asyncio.to_thread(
                self._client.get_vectors,
                vectorBucketName=self._vectors_bucket,
                indexName=self._index_name,
                keys=list(keys),
                returnData=True,
                returnMetadata=True,
            )
        except Exception as e:
            error = classify_aws_error(e, service=SERVICE_NAME, operation="get_vectors")
            logger.error(f"{__name__}:query_by_key - {type(e).__name__}: {e}")
            raise error from e

        return [
            VectorRecord(
                id=item["key"],
                values=item.get("data", {}).get("float32", []),
                metadata=item.get("metadata") or {},
            )
            for item in response.get("vectors", [])
        ]
