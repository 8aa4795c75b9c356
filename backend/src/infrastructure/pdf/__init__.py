"""PDF text extraction."""

from .parser import PDFParseError, parse_pdf_pages

__all__ = ["PDFParseError", "parse_pdf_pages"]
