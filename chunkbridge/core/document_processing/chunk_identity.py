"""
Chunk identity generation.

Ids have the form ``{content_type}-{document_id}-chunk-{index}-{suffix}``
where suffix is 8 lowercase hex characters from 4 random bytes. The same
id is used as vector key, row primary key and row embedding_id.

Dependencies: secrets
System role: Per-chunk identifier for the dual write
"""

import secrets

from .models import ContentType

SUFFIX_BYTES = 4


def make_chunk_id(content_type: ContentType | str, document_id: str, index: int) -> str:
    """
    Generate a new chunk id.

    Every call returns a fresh random suffix, so re-ingesting a document
    produces a new, disjoint set of ids.

    Args:
        content_type: Source kind (text, pdf)
        document_id: Caller-supplied document id
        index: 0-based chunk position

    Returns:
        str: Chunk identifier
    """
    if index < 0:
        raise ValueError(f"Chunk index must be non-negative, got {index}")
    ct = content_type.value if isinstance(content_type, ContentType) else str(content_type)
    return f"{ct}-{document_id}-chunk-{index}-{secrets.token_hex(SUFFIX_BYTES)}"
