"""Tests for PDF text extraction."""

import fitz
import pytest

from backend.app.utils.pdf_parser import PDFParsingError, extract_pages


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_extract_pages_in_order():
    pages = extract_pages(make_pdf("First page", "Second page"))
    assert [p.strip() for p in pages] == ["First page", "Second page"]


def test_blank_page_gives_empty_string():
    pages = extract_pages(make_pdf("Alpha", "", "Gamma"))
    assert [p.strip() for p in pages] == ["Alpha", "", "Gamma"]


def test_empty_content():
    with pytest.raises(ValueError, match="Empty PDF content"):
        extract_pages(b"")


def test_invalid_content():
    with pytest.raises(PDFParsingError):
        extract_pages(b"this is not a pdf document")
