"""Text extraction, text layout and text comparison."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..core.content import ContentBuilder, iter_operations
from ..core.document import Document
from ..core.model import ComparisonResult
from ..core.objects import PDFName, PDFStream, PDFString

LOGGER = logging.getLogger("flexipdf.convert")

LETTER = (612.0, 792.0)
# Negative TJ adjustments wider than this many thousandths of an em read as a space.
_TJ_SPACE_THRESHOLD = -200


def _decode(value: PDFString) -> str:
    if value.value.startswith(b"\xfe\xff"):
        return value.text()
    return value.value.decode("cp1252", "replace")


def _show_operands(operator: str, operands: list[Any]) -> str:
    if operator == "TJ":
        parts = []
        for item in operands[0] if operands and isinstance(operands[0], list) else []:
            if isinstance(item, PDFString):
                parts.append(_decode(item))
            elif isinstance(item, (int, float)) and item <= _TJ_SPACE_THRESHOLD:
                parts.append(" ")
        return "".join(parts)
    strings = [item for item in operands if isinstance(item, PDFString)]
    return _decode(strings[-1]) if strings else ""


def page_text(content: bytes) -> str:
    """Return the text shown by one decoded content stream, a line per text object."""

    lines: list[str] = []
    current: list[str] | None = None
    for operator, operands in iter_operations(content):
        if operator == "BT":
            current = []
        elif operator == "ET":
            if current is not None:
                lines.append("".join(current))
            current = None
        elif operator in ("Tj", "TJ", "'", '"'):
            text = _show_operands(operator, operands)
            if current is None:
                lines.append(text)
            else:
                current.append(text)
    if current:
        lines.append("".join(current))
    return "\n".join(lines)


def extract_text(document: Document) -> str:
    """Return the text of every page; pages are separated by a blank line."""

    document.ensure_unencrypted("extract text from")
    pages = [page_text(page.content_bytes()) for page in document.pages]
    LOGGER.debug("Extracted text from %d page(s)", len(pages))
    return "\n\n".join(pages)


def text_to_document(
    text: str | Iterable[str],
    *,
    font_size: float = 12,
    margin: float = 50,
    leading: float = 15,
    max_chars: int = 80,
    page_size: tuple[float, float] = LETTER,
) -> Document:
    """Lay ``text`` out as Helvetica lines on Letter pages.

    Lines longer than ``max_chars`` are truncated; a new page starts once
    the cursor falls below the bottom margin.
    """

    lines = text.split("\n") if isinstance(text, str) else [str(line) for line in text]
    width, height = page_size
    document = Document.new()
    font = document.add_object(
        {
            "Type": PDFName("Font"),
            "Subtype": PDFName("Type1"),
            "BaseFont": PDFName("Helvetica"),
            "Encoding": PDFName("WinAnsiEncoding"),
        }
    )
    resources = document.add_object({"Font": {"F1": font}})

    pages: list[ContentBuilder] = [ContentBuilder()]
    y = height - margin
    for line in lines:
        if y < margin:
            pages.append(ContentBuilder())
            y = height - margin
        line = line.rstrip("\r")[:max_chars]
        if line.strip():
            (
                pages[-1]
                .begin_text()
                .font("F1", font_size)
                .move_text(margin, y)
                .show_text(line)
                .end_text()
            )
        y -= leading

    for builder in pages:
        contents = document.add_object(PDFStream({}, builder.build()))
        document.append_page(
            {
                "MediaBox": [0, 0, width, height],
                "Resources": resources,
                "Contents": contents,
            }
        )
    LOGGER.debug("Laid out %d line(s) on %d page(s)", len(lines), len(pages))
    return document


def compare(first: Document, second: Document) -> ComparisonResult:
    """Compare the extracted text of two documents."""

    first_text = extract_text(first)
    second_text = extract_text(second)
    identical = first_text == second_text
    return ComparisonResult(
        identical=identical,
        first_length=len(first_text),
        second_length=len(second_text),
        summary="Files are identical" if identical else "Files have differences",
    )


__all__ = ["LETTER", "compare", "extract_text", "page_text", "text_to_document"]
