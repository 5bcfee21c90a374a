"""
Embedding generation task using Amazon Bedrock Titan Embeddings.

Generates one vector per chunk (1536 dimensions for amazon.titan-embed-text-v1)
and maps Bedrock failures onto transient/permanent errors so the coordinator
can decide whether to retry.

Dependencies: langchain_aws, botocore
System role: Second stage of the chunk + dual-write pipeline
"""

import logging

from langchain_aws import BedrockEmbeddings

from chunkbridge.boundary.aws.errors import classify_aws_error
from chunkbridge.core.exceptions import ExternalServiceError, PermanentExternalError

from ..ports import Embedder

logger = logging.getLogger(__name__)

SERVICE_NAME = "embedding"


class EmbeddingTask(Embedder):
    """Generate embeddings using Amazon Titan Embeddings."""

    def __init__(
        self,
        model_id: str = "amazon.titan-embed-text-v1",
        region: str = "us-east-1",
        dimension: int = 1536,
        embeddings: BedrockEmbeddings | None = None,
    ) -> None:
        """
        Initialize embedding task with Bedrock model.

        Args:
            model_id: Bedrock model ID
            region: AWS region for Bedrock runtime
            dimension: Expected vector length
            embeddings: Pre-built embeddings client (tests inject a fake)

        Raises:
            ValueError: When model_id is empty or dimension is not positive
        """
        if not model_id:
            raise ValueError("model_id cannot be empty")
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")

        self.model_id = model_id
        self._dimension = dimension
        self._embeddings = embeddings or BedrockEmbeddings(
            model_id=model_id,
            region_name=region,
        )

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> list[float]:
        """
        Generate the embedding for a single chunk.

        Args:
            text: Chunk content

        Returns:
            list[float]: Embedding vector of the configured dimension

        Raises:
            TransientExternalError: Throttling, quota, availability or network failure
            PermanentExternalError: Rejected input, auth failure or dimension mismatch
        """
        try:
            vector = await self._embeddings.aembed_query(text)
        except ExternalServiceError:
            raise
        except Exception as e:
            error = classify_aws_error(e, service=SERVICE_NAME, operation="embed")
            logger.warning(
                f"{__name__}:embed - Bedrock call failed",
                extra={
                    "model_id": self.model_id,
                    "transient": error.transient,
                    "error": str(e),
                },
            )
            raise error from e

        if len(vector) != self._dimension:
            raise PermanentExternalError(
                message=f"Embedding dimension mismatch: expected {self._dimension}, got {len(vector)}",
                service=SERVICE_NAME,
                operation="embed",
                details={"model_id": self.model_id},
            )

        return list(vector)
