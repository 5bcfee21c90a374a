"""
Vector database boundary layer.

Provides vector index implementations for chunk writes and key lookups.
- S3VectorsIndex: Production S3 Vectors client (boto3 s3vectors)
- InMemoryVectorIndex: Local development and tests

Dependencies: boto3
System role: Vector index adapter for the dual write
"""

from chunkbridge.boundary.vdb.vector_schemas import VectorRecord

__all__ = [
    "VectorRecord",
]
