"""Importer lookup by file extension."""

from __future__ import annotations

from pathlib import PurePath

from backend.app.importers.base import ImportParser, UnsupportedFormatError
from backend.app.importers.csv_import import CsvImportParser
from backend.app.importers.json_import import JsonImportParser
from backend.app.importers.pdf_import import PdfImportParser
from backend.app.importers.spreadsheet_import import SpreadsheetImportParser
from backend.app.importers.text_import import TextImportParser

PARSERS: tuple[ImportParser, ...] = (
    JsonImportParser(),
    TextImportParser(),
    CsvImportParser(),
    SpreadsheetImportParser(),
    PdfImportParser(),
)

SUPPORTED_EXTENSIONS = tuple(ext for parser in PARSERS for ext in parser.extensions)


def get_parser(filename: str | None) -> ImportParser:
    """Pick the importer for a file name (case-insensitive extension).

    Raises:
        UnsupportedFormatError: If no importer handles the extension.
    """
    suffix = PurePath(filename or "").suffix.lower()
    for parser in PARSERS:
        if suffix in parser.extensions:
            return parser
    raise UnsupportedFormatError(filename)
