"""
PDF inspection helpers.

    page_count: Quick page count without full extraction.
    extract_text: Plain text of every page, in page order.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import pdfplumber
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

PdfSource = Union[Path, str, bytes]


def _open_source(pdf: PdfSource):
    """Path string or BytesIO for in-memory PDF content."""
    return BytesIO(pdf) if isinstance(pdf, bytes) else str(pdf)


def page_count(pdf: PdfSource) -> Optional[int]:
    """Get page count from a PDF file or PDF bytes, or None if unreadable."""
    try:
        reader = PdfReader(_open_source(pdf))
        return len(reader.pages)
    except (OSError, PdfReadError):
        return None


def extract_text(pdf: PdfSource) -> str:
    """
    Extract the text layer of a PDF.

    Args:
        pdf: Path to a PDF file, or PDF bytes

    Returns:
        Text of all pages joined by newlines
    """
    with pdfplumber.open(_open_source(pdf)) as document:
        return "\n".join(page.extract_text() or "" for page in document.pages)
