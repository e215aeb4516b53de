"""Office document importers and the unsupported PDF-to-Office exporters."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import docx
from docx.opc.exceptions import PackageNotFoundError

from ..core.document import Document
from ..core.objects import PDFString
from ..exceptions import MalformedDocumentError, OperationNotImplementedError
from .text import text_to_document

LOGGER = logging.getLogger("flexipdf.convert")


def read_docx_text(path: str | Path) -> tuple[list[str], dict[str, str]]:
    """Return the paragraph lines and core properties of a ``.docx`` file.

    Table rows follow the body paragraphs, cells separated by tabs.
    """

    try:
        source = docx.Document(str(path))
    except PackageNotFoundError as exc:
        raise MalformedDocumentError(f"Not a Word document: {path}") from exc

    lines = [paragraph.text for paragraph in source.paragraphs]
    for table in source.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))

    core = source.core_properties
    properties = {
        key: value
        for key, value in (
            ("Title", core.title),
            ("Author", core.author),
            ("Subject", core.subject),
            ("Keywords", core.keywords),
        )
        if value
    }
    return lines, properties


def word_to_pdf(path: str | Path) -> Document:
    """Lay out the text of a Word document as a PDF."""

    lines, properties = read_docx_text(path)
    document = text_to_document(lines)
    if properties:
        info = document.ensure_info()
        for key, value in properties.items():
            info[key] = PDFString.from_text(value)
    LOGGER.info("Converted %s to %d page(s)", Path(path).name, document.page_count)
    return document


def _not_implemented(target: str) -> OperationNotImplementedError:
    return OperationNotImplementedError(
        f"PDF to {target} conversion is not available; use text extraction instead"
    )


def pdf_to_word(document: Document) -> NoReturn:
    raise _not_implemented("Word")


def pdf_to_powerpoint(document: Document) -> NoReturn:
    raise _not_implemented("PowerPoint")


def pdf_to_excel(document: Document) -> NoReturn:
    raise _not_implemented("Excel")


__all__ = ["pdf_to_excel", "pdf_to_powerpoint", "pdf_to_word", "read_docx_text", "word_to_pdf"]
