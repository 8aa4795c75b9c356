"""Per-page text extraction with pdfplumber."""

import asyncio
import io
import re
from typing import List

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import PdfminerException

_WHITESPACE = re.compile(r"\s+")


class PDFParseError(Exception):
    """Raised when the uploaded bytes are not a readable PDF."""

    pass


def _extract_pages(pdf_bytes: bytes) -> List[str]:
    try:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            return [_WHITESPACE.sub(" ", page.extract_text() or "").strip() for page in pdf.pages]
    except (PDFSyntaxError, PdfminerException) as e:
        raise PDFParseError(f"Could not parse PDF: {e}") from e


async def parse_pdf_pages(pdf_bytes: bytes) -> List[str]:
    """Extract the text of every page, in page order.

    Whitespace runs inside a page collapse to single spaces. Pages without a
    text layer yield empty strings so page numbers stay aligned.

    Raises:
        PDFParseError: If the bytes cannot be parsed as a PDF.
    """
    if not pdf_bytes:
        raise PDFParseError("Could not parse PDF: file is empty")
    return await asyncio.to_thread(_extract_pages, pdf_bytes)
