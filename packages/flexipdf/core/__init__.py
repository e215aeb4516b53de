"""PDF object model, parser and serializer."""

from __future__ import annotations

from .document import Document, Page
from .objects import IndirectObject, PDFName, PDFReference, PDFStream, PDFString
from .parser import PDFParser, parse
from .serializer import serialize

__all__ = [
    "Document",
    "Page",
    "IndirectObject",
    "PDFName",
    "PDFReference",
    "PDFStream",
    "PDFString",
    "PDFParser",
    "parse",
    "serialize",
]
