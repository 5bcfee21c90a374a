"""
chunkbridge: chunking and dual-write ingestion of documents.

Splits text into overlapping chunks, embeds each chunk and records it in a
vector index and a relational chunk table under one shared chunk id.
"""

__version__ = "0.1.0"
