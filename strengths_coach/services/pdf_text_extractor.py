"""PDF to text conversion using pypdf."""

from io import BytesIO
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from strengths_coach.utils.logger import get_logger

logger = get_logger(
    correlation_id="pdf-text-extractor",
    phase="pdf_parse",
    component="pdf_text_extractor",
)


class PDFReadError(Exception):
    """Raised when bytes cannot be read as a PDF."""

    pass


def extract_text_from_pdf(pdf_bytes: bytes) -> str:
    """
    Extract the text of every page, joined with newlines.

    A page whose text cannot be extracted contributes an empty string.

    Args:
        pdf_bytes: Raw PDF file bytes

    Returns:
        Concatenated page text (may be empty for image-only PDFs)

    Raises:
        PDFReadError: If the bytes are not a readable PDF
    """
    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        pages = list(reader.pages)
    except (PdfReadError, ValueError, OSError) as e:
        logger.error("Unreadable PDF", error=str(e), byte_count=len(pdf_bytes))  # type: ignore[attr-defined]
        raise PDFReadError(f"Failed to read PDF: {e}") from e

    texts = []
    for page_number, page in enumerate(pages, start=1):
        try:
            texts.append(page.extract_text() or "")
        except Exception as e:
            logger.warning(  # type: ignore[attr-defined]
                "Page text extraction failed", page=page_number, error=str(e)
            )
            texts.append("")

    text = "\n".join(texts)
    logger.debug("PDF text extracted", page_count=len(pages), text_length=len(text))  # type: ignore[attr-defined]
    return text


def extract_text_from_path(path: Path | str) -> str:
    """Read a PDF file from disk and extract its text."""
    return extract_text_from_pdf(Path(path).read_bytes())
