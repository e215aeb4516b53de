from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader

from flexipdf import extract_pages, merge, parse, serialize
from flexipdf.core.objects import PDFName, text_of
from flexipdf.exceptions import EmptyInputError, UnsupportedFeatureError


def test_merge_concatenates_pages_in_order(text_pdf_bytes: Callable[..., bytes]) -> None:
    first = parse(text_pdf_bytes("A1", "A2"))
    second = parse(text_pdf_bytes("B1"))

    merged = merge([first, second])

    assert merged.page_count == 3
    contents = [page.content_bytes() for page in merged.pages]
    assert [b"(A1)" in contents[0], b"(A2)" in contents[1], b"(B1)" in contents[2]] == [True] * 3


def test_merge_then_extract_recovers_inputs(text_pdf_bytes: Callable[..., bytes]) -> None:
    first = parse(text_pdf_bytes("A1", "A2"))
    second = parse(text_pdf_bytes("B1", "B2", "B3"))

    merged = merge([first, second])
    head = extract_pages(merged, "1-2")
    tail = extract_pages(merged, "3-5")

    assert [page.content_bytes() for page in head.pages] == [
        page.content_bytes() for page in first.pages
    ]
    assert [page.content_bytes() for page in tail.pages] == [
        page.content_bytes() for page in second.pages
    ]


def test_merge_output_is_readable_by_pypdf(sample_pdfs: list[Path]) -> None:
    documents = [parse(path.read_bytes()) for path in sample_pdfs]

    reader = PdfReader(io.BytesIO(serialize(merge(documents))))

    assert len(reader.pages) == 3
    assert reader.metadata.get("/Title") == "Document One"


def test_merge_requires_two_documents(text_pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(EmptyInputError):
        merge([])
    with pytest.raises(EmptyInputError):
        merge([parse(text_pdf_bytes("only"))])


def test_merge_refuses_encrypted_inputs(text_pdf_bytes: Callable[..., bytes]) -> None:
    locked = parse(text_pdf_bytes("A"))
    locked.trailer["Encrypt"] = {"Filter": PDFName("Standard")}

    with pytest.raises(UnsupportedFeatureError):
        merge([parse(text_pdf_bytes("B")), locked])


def test_merge_uses_highest_version(raw_pdf, page_bodies) -> None:
    old = parse(raw_pdf(page_bodies("a"), version=b"1.3"))
    new = parse(raw_pdf(page_bodies("b"), version=b"1.7"))

    assert merge([old, new]).version == "1.7"


def test_merge_same_document_twice(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("Twice"))

    merged = merge([document, document])

    first, second = merged.pages
    assert first.ref != second.ref
    assert first.dictionary["Contents"] != second.dictionary["Contents"]


def test_merge_document_info_overrides_first_input(sample_pdfs: list[Path]) -> None:
    documents = [parse(path.read_bytes()) for path in sample_pdfs]

    merged = merge(documents, document_info={"title": "Combined", "author": " ", "/Keywords": "k"})

    info = merged.info
    assert text_of(info["Title"]) == "Combined"
    assert "Author" not in info
    assert text_of(info["Keywords"]) == "k"


def test_merge_bookmarks_point_at_first_pages(text_pdf_bytes: Callable[..., bytes]) -> None:
    first = parse(text_pdf_bytes("A1", "A2"))
    second = parse(text_pdf_bytes("B1"))

    merged = merge([first, second], bookmarks=["Part A"])

    reader = PdfReader(io.BytesIO(serialize(merged)))
    titles = [item.title for item in reader.outline]
    assert titles == ["Part A", "Document 2"]
    assert [reader.get_destination_page_number(item) for item in reader.outline] == [0, 2]
