"""
Unit tests for PDF text extraction.
"""

from io import BytesIO
from unittest.mock import MagicMock

import pytest
from pypdf import PdfWriter
from pypdf.errors import PdfReadError

from strengths_coach.services.pdf_text_extractor import (
    PDFReadError,
    extract_text_from_path,
    extract_text_from_pdf,
)


def _page(text=None, error=None):
    page = MagicMock()
    if error is not None:
        page.extract_text.side_effect = error
    else:
        page.extract_text.return_value = text
    return page


class TestExtractTextFromPdf:
    """Test cases for extract_text_from_pdf."""

    def test_joins_pages_with_newlines(self, mocker):
        """Test that page texts are concatenated in order."""
        # Arrange
        reader = mocker.patch("strengths_coach.services.pdf_text_extractor.PdfReader")
        reader.return_value.pages = [_page("AMYN PORBANDERWALA"), _page("1. Strategic")]

        # Act
        text = extract_text_from_pdf(b"%PDF-1.7")

        # Assert
        assert text == "AMYN PORBANDERWALA\n1. Strategic"

    def test_failing_page_contributes_empty_text(self, mocker):
        """Test that one bad page does not abort extraction."""
        # Arrange
        reader = mocker.patch("strengths_coach.services.pdf_text_extractor.PdfReader")
        reader.return_value.pages = [
            _page("Page one"),
            _page(error=KeyError("/Contents")),
            _page(None),
            _page("Page four"),
        ]

        # Act
        text = extract_text_from_pdf(b"%PDF-1.7")

        # Assert
        assert text == "Page one\n\n\nPage four"

    def test_unreadable_bytes_raise(self, mocker):
        """Test that reader errors are wrapped in PDFReadError."""
        # Arrange
        mocker.patch(
            "strengths_coach.services.pdf_text_extractor.PdfReader",
            side_effect=PdfReadError("EOF marker not found"),
        )

        # Act & Assert
        with pytest.raises(PDFReadError, match="EOF marker not found"):
            extract_text_from_pdf(b"garbage")

    def test_blank_pdf_has_no_text(self):
        """Test a real single blank page PDF extracts to empty text."""
        # Arrange
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        buffer = BytesIO()
        writer.write(buffer)

        # Act
        text = extract_text_from_pdf(buffer.getvalue())

        # Assert
        assert text.strip() == ""

    def test_extract_from_path(self, tmp_path, mocker):
        """Test reading the PDF from disk."""
        # Arrange
        pdf_path = tmp_path / "report.pdf"
        pdf_path.write_bytes(b"%PDF-1.7 data")
        extract = mocker.patch(
            "strengths_coach.services.pdf_text_extractor.extract_text_from_pdf",
            return_value="text",
        )

        # Act
        result = extract_text_from_path(str(pdf_path))

        # Assert
        assert result == "text"
        extract.assert_called_once_with(b"%PDF-1.7 data")
