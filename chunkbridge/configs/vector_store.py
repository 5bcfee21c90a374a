"""
Vector store configuration settings.

Manages the vector index backend (in-memory for dev, S3 Vectors for prod)
and the Bedrock embedding model that produces the stored vectors.

Dependencies: pydantic, pydantic_settings
System role: Vector index and embedding configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Vector index configuration (in-memory for dev, S3 Vectors for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="s3",
        description="Vector index type: 'memory' for local dev, 's3' for production",
    )
    vectors_bucket: str = Field(
        default="chunkbridge-dev-vectors",
        description="S3 Vectors bucket name",
    )
    index_name: str = Field(default="document-chunks", description="S3 Vectors index name")
    aws_region: str = Field(default="us-east-1", description="AWS region for S3 Vectors")

    embedding_model: str = Field(
        default="amazon.titan-embed-text-v1",
        description="Bedrock embedding model ID",
    )
    embedding_region: str = Field(
        default="us-east-1",
        description="AWS region for Bedrock embeddings",
    )
    embedding_dimension: int = Field(
        default=1536,
        description="Embedding vector dimension (fixed by the embedding model)",
    )
