"""PDF text extraction utilities for itinerary import."""

import fitz  # PyMuPDF


class PDFParsingError(Exception):
    """Raised when PDF parsing fails."""

    pass


def extract_pages(content_bytes: bytes) -> list[str]:
    """Extract the native text layer of every page.

    Args:
        content_bytes: PDF file content as bytes

    Returns:
        One string per page, in page order (pages without text give "")

    Raises:
        PDFParsingError: If the document cannot be opened or read
        ValueError: If content_bytes is empty
    """
    if not content_bytes:
        raise ValueError("Empty PDF content provided")

    try:
        with fitz.open(stream=content_bytes, filetype="pdf") as pdf_document:
            return [page.get_text("text") for page in pdf_document]
    except fitz.FileDataError as e:
        raise PDFParsingError(f"Invalid or corrupted PDF file: {str(e)}") from e
    except RuntimeError as e:
        raise PDFParsingError(f"Failed to extract text from PDF: {str(e)}") from e

