"""Tests for ParsingTask."""

from pathlib import Path
from unittest.mock import patch

import pytest
from langchain_core.documents import Document
from pypdf import PdfWriter

from chunkbridge.core.document_processing.tasks.parsing_task import ParsingTask
from chunkbridge.core.exceptions import ParsingError


@pytest.fixture
def blank_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "blank.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    with open(path, "wb") as f:
        writer.write(f)
    return path


class TestParsingTask:
    """PDF text extraction."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParsingError, match="File not found"):
            ParsingTask().parse(str(tmp_path / "missing.pdf"))

    def test_non_pdf_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(ParsingError, match="Unsupported file format"):
            ParsingTask().parse(str(path))

    def test_corrupt_pdf(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"not really a pdf")

        with pytest.raises(ParsingError):
            ParsingTask().parse(str(path))

    def test_blank_pdf_has_no_text(self, blank_pdf: Path) -> None:
        with pytest.raises(ParsingError):
            ParsingTask().extract_text(str(blank_pdf))

    def test_pages_joined_with_blank_line(self, blank_pdf: Path) -> None:
        pages = [Document(page_content="Page one."), Document(page_content="Page two.")]

        with patch.object(ParsingTask, "parse", return_value=pages):
            text, page_count = ParsingTask().extract_text(str(blank_pdf))

        assert text == "Page one.\n\nPage two."
        assert page_count == 2
