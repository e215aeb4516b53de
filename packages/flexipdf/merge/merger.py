"""Merge functionality for the :mod:`flexipdf.merge` package."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ..core.document import Document
from ..core.objects import PDFName, PDFReference, PDFString
from ..exceptions import EmptyInputError

LOGGER = logging.getLogger("flexipdf.merge")

_METADATA_KEY_MAP = {
    "title": "Title",
    "author": "Author",
    "subject": "Subject",
    "keywords": "Keywords",
}


def _document_info(document: Document) -> dict[str, object]:
    info = document.info
    if not info:
        return {}
    return {key: document.resolve(value) for key, value in info.items()}


def _add_outline(output: Document, targets: list[tuple[str, PDFReference]]) -> None:
    outlines: dict[str, object] = {"Type": PDFName("Outlines"), "Count": len(targets)}
    outlines_ref = output.add_object(outlines)
    items: list[PDFReference] = []
    for title, page_ref in targets:
        items.append(
            output.add_object(
                {
                    "Title": PDFString.from_text(title),
                    "Parent": outlines_ref,
                    "Dest": [page_ref, PDFName("Fit")],
                }
            )
        )
    for index, ref in enumerate(items):
        item = output.resolve_dict(ref)
        assert item is not None
        if index > 0:
            item["Prev"] = items[index - 1]
        if index + 1 < len(items):
            item["Next"] = items[index + 1]
    outlines["First"] = items[0]
    outlines["Last"] = items[-1]
    output.catalog["Outlines"] = outlines_ref


def merge(
    documents: Sequence[Document],
    *,
    metadata: bool = True,
    document_info: Mapping[str, object] | None = None,
    bookmarks: Sequence[str | None] | None = None,
) -> Document:
    """Concatenate the pages of ``documents`` into a new document.

    Args:
        documents: At least two parsed documents, in output order.
        metadata: Copy the document information of the first input.
        document_info: Explicit information entries (``title``, ``author``,
            ...) used instead of the first input's.
        bookmarks: Optional outline titles, one per input, pointing at the
            first page each input contributed.

    Raises:
        EmptyInputError: Fewer than two documents were given.
        UnsupportedFeatureError: An input is encrypted.
    """

    documents = list(documents)
    if len(documents) < 2:
        raise EmptyInputError(f"Merging needs at least 2 documents, got {len(documents)}")
    for document in documents:
        document.ensure_unencrypted("merge")

    versions = [document.version for document in documents]
    output = Document.new(version=max(versions, key=lambda item: tuple(int(x) for x in item.split("."))))
    bookmark_targets: list[tuple[str, PDFReference]] = []

    for index, document in enumerate(documents):
        pages = document.pages
        LOGGER.debug("Adding %d page(s) from input %d", len(pages), index + 1)
        mapping: dict[tuple[int, int], PDFReference] = {}
        first_ref: PDFReference | None = None
        for page in pages:
            new_ref = output.import_page(page, mapping)
            if first_ref is None:
                first_ref = new_ref
        if bookmarks and first_ref is not None:
            title = bookmarks[index] if index < len(bookmarks) else None
            bookmark_targets.append((title or f"Document {index + 1}", first_ref))

    info_to_apply: dict[str, object] = {}
    if document_info:
        for key, value in document_info.items():
            if value is None or not str(value).strip():
                continue
            pdf_key = _METADATA_KEY_MAP.get(key.lower(), key.lstrip("/"))
            info_to_apply[pdf_key] = PDFString.from_text(str(value).strip())
    elif metadata:
        first_info = _document_info(documents[0])
        info_to_apply = output.import_value(documents[0], first_info, {})

    if info_to_apply:
        LOGGER.debug("Setting metadata on merged document: %s", sorted(info_to_apply))
        output.ensure_info().update(info_to_apply)

    if bookmark_targets:
        LOGGER.debug("Adding %d bookmark(s) to merged document", len(bookmark_targets))
        _add_outline(output, bookmark_targets)

    LOGGER.info("Merged %d documents into %d pages", len(documents), output.page_count)
    return output


__all__ = ["merge"]
