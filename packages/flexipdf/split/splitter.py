"""Page extraction and splitting on the document model."""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..core.document import Document
from ..core.objects import PDFReference
from .utils import PageRange, PageSpec, parse_page_ranges, parse_page_spec

LOGGER = logging.getLogger("flexipdf.split")


def _copy_info(source: Document, target: Document) -> None:
    info = source.info
    if info:
        target.ensure_info().update(target.import_value(source, dict(info), {}))


def _build(document: Document, page_numbers: Iterable[int]) -> Document:
    output = Document.new(version=document.version)
    pages = document.pages
    mapping: dict[tuple[int, int], PDFReference] = {}
    seen: set[int] = set()
    for number in page_numbers:
        if number in seen:
            # A repeated page gets its own copy of everything it references.
            output.import_page(pages[number - 1], {})
            continue
        seen.add(number)
        output.import_page(pages[number - 1], mapping)
    _copy_info(document, output)
    return output


def extract_pages(document: Document, spec: PageSpec) -> Document:
    """Return one document holding the pages selected by ``spec``.

    Pages appear in spec order; a page selected twice appears twice.
    """

    document.ensure_unencrypted("extract pages from")
    numbers = parse_page_spec(spec, document.page_count)
    LOGGER.debug("Extracting pages %s", numbers)
    output = _build(document, numbers)
    LOGGER.info("Extracted %d page(s)", len(numbers))
    return output


def split_pages(document: Document, spec: PageSpec | None = None) -> List[Document]:
    """Return one single-page document per selected page (all by default)."""

    document.ensure_unencrypted("split")
    page_count = document.page_count
    if spec is None:
        numbers = list(range(1, page_count + 1))
    else:
        numbers = parse_page_spec(spec, page_count)
    results = []
    for number in numbers:
        LOGGER.debug("Splitting out page %d", number)
        results.append(_build(document, [number]))
    LOGGER.info("Split %d page(s)", len(results))
    return results


def split_ranges(document: Document, spec: PageSpec) -> List[tuple[PageRange, Document]]:
    """Return one document per range of ``spec`` (``"1-3,4-6"`` gives two)."""

    document.ensure_unencrypted("split")
    ranges = parse_page_ranges(spec, total_pages=document.page_count)
    results = []
    for page_range in ranges:
        LOGGER.debug("Writing pages %s-%s", page_range.start, page_range.end)
        results.append((page_range, _build(document, page_range.pages())))
    return results


__all__ = ["extract_pages", "split_pages", "split_ranges"]
