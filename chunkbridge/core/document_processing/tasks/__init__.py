"""
Task modules for document processing pipeline.

Exports: ChunkingTask, reconstruct_text, EmbeddingTask, ParsingTask
"""

from .chunking_task import ChunkingTask, reconstruct_text
from .embedding_task import EmbeddingTask
from .parsing_task import ParsingTask

__all__ = [
    "ChunkingTask",
    "reconstruct_text",
    "EmbeddingTask",
    "ParsingTask",
]
