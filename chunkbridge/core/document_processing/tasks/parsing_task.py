"""
Document parsing task using LangChain PyPDFLoader.

Extracts plain text from a PDF file on disk.

Dependencies: langchain_community.document_loaders, pypdf
System role: Text extraction ahead of chunking for uploaded PDFs
"""

from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader
from langchain_core.documents import Document

from chunkbridge.core.exceptions import ParsingError

PAGE_SEPARATOR = "\n\n"


class ParsingTask:
    """Parse PDF documents into LangChain Documents (one per page)."""

    def parse(self, file_path: str) -> list[Document]:
        """
        Parse PDF document into LangChain Documents.

        Args:
            file_path: Path to PDF document

        Returns:
            list[Document]: One document per page

        Raises:
            ParsingError: When the file is missing, not a PDF, or unreadable
        """
        path = Path(file_path)
        if not path.exists():
            raise ParsingError(f"File not found: {file_path}", file_path)

        if path.suffix.lower() != ".pdf":
            raise ParsingError(
                f"Unsupported file format: {path.suffix}. Only PDF files are supported.",
                file_path,
            )

        try:
            documents = PyPDFLoader(file_path).load()
        except Exception as e:
            raise ParsingError(f"Failed to parse PDF: {e}", file_path) from e

        if not documents:
            raise ParsingError("PDF document contains no pages", file_path)

        return documents

    def extract_text(self, file_path: str) -> tuple[str, int]:
        """
        Extract the full text of a PDF.

        Args:
            file_path: Path to PDF document

        Returns:
            tuple[str, int]: (text with pages joined by blank lines, page count)

        Raises:
            ParsingError: When parsing fails or no page carries text
        """
        documents = self.parse(file_path)
        text = PAGE_SEPARATOR.join(doc.page_content for doc in documents)
        if not text.strip():
            raise ParsingError("PDF document contains no extractable text", file_path)
        return text, len(documents)
