"""Format conversions built around the document model."""

from __future__ import annotations

from .images import images_to_pdf
from .office import pdf_to_excel, pdf_to_powerpoint, pdf_to_word, read_docx_text, word_to_pdf
from .raster import detect_backend, pdf_to_jpg
from .text import compare, extract_text, page_text, text_to_document

__all__ = [
    "compare",
    "detect_backend",
    "extract_text",
    "images_to_pdf",
    "page_text",
    "pdf_to_excel",
    "pdf_to_jpg",
    "pdf_to_powerpoint",
    "pdf_to_word",
    "read_docx_text",
    "text_to_document",
    "word_to_pdf",
]
