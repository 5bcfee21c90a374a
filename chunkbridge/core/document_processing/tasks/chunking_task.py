"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits text into overlapping spans that are exact substrings of the source,
preferring paragraph, then line, then sentence, then word boundaries before
falling back to a hard character cut.

Dependencies: langchain_text_splitters
System role: First stage of the chunk + dual-write pipeline
"""

from collections.abc import Iterator

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..models import ChunkSpan

SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


class ChunkingTask:
    """Split text into positional chunk spans."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Maximum overlap between consecutive chunks

        Raises:
            ValueError: When chunk_size <= 0 or overlap is negative or >= chunk_size
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, chunk_size), got {chunk_overlap} for size {chunk_size}"
            )

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        # Separators are kept at the end of each piece and whitespace is never
        # stripped, so every chunk is a verbatim slice of the input.
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=SEPARATORS,
            keep_separator="end",
            strip_whitespace=False,
            length_function=len,
        )

    def split(self, text: str) -> list[ChunkSpan]:
        """
        Split text into ordered spans.

        Args:
            text: Source text

        Returns:
            list[ChunkSpan]: Spans in document order; empty for blank input

        Raises:
            ValueError: When the splitter output cannot be placed contiguously
        """
        if not text or not text.strip():
            return []

        contents = self._splitter.split_text(text)
        if not contents:
            return []
        starts = self._place(text, contents)
        return [
            ChunkSpan(index=i, content=content, start_index=start)
            for i, (content, start) in enumerate(zip(contents, starts))
        ]

    def _place(self, text: str, contents: list[str]) -> list[int]:
        """
        Assign a start offset to every chunk.

        The splitter is lossless: the first chunk starts at 0, each later one
        starts at most chunk_overlap characters before the previous end and
        reaches past it, and the last one ends at len(text). Within those
        bounds the earliest match is tried first, since the splitter keeps as
        much overlap as fits. A choice that leaves a later chunk unplaceable
        is revised.
        """
        last = len(contents) - 1
        starts: list[int] = []
        options = [self._candidates(text, contents[0], None, last == 0)]
        while options:
            start = next(options[-1], None)
            if start is None:
                options.pop()
                if starts:
                    starts.pop()
                continue

            starts.append(start)
            k = len(starts)
            if k > last:
                return starts
            previous = (start, start + len(contents[k - 1]))
            options.append(self._candidates(text, contents[k], previous, k == last))

        raise ValueError("Chunk contents cannot be placed contiguously in source text")

    def _candidates(
        self,
        text: str,
        content: str,
        previous: tuple[int, int] | None,
        is_last: bool,
    ) -> Iterator[int]:
        if previous is None:
            lowest, highest = 0, 0
        else:
            prev_start, prev_end = previous
            lowest = max(prev_start + 1, prev_end - self.chunk_overlap, prev_end - len(content) + 1)
            highest = prev_end
        if is_last:
            anchored = len(text) - len(content)
            lowest, highest = max(lowest, anchored), min(highest, anchored)

        for start in range(lowest, highest + 1):
            if text.startswith(content, start):
                yield start


def reconstruct_text(spans: list[ChunkSpan]) -> str:
    """
    Rebuild the source text from ordered spans, dropping overlapping prefixes.

    Args:
        spans: Spans as returned by ChunkingTask.split

    Returns:
        str: Text covered by the spans

    Raises:
        ValueError: When a span starts past the end of the text rebuilt so far
    """
    out = ""
    for span in spans:
        if span.start_index > len(out):
            raise ValueError(
                f"Gap before chunk {span.index}: starts at {span.start_index}, covered up to {len(out)}"
            )
        out += span.content[len(out) - span.start_index:]
    return out
