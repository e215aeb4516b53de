from __future__ import annotations

from typing import Callable

import pytest

from flexipdf.core.document import Document
from flexipdf.core.objects import PDFName, PDFStream, name_of
from flexipdf.core.parser import parse
from flexipdf.exceptions import MalformedDocumentError, UnsupportedFeatureError


def _tree(raw_pdf, pages_body: bytes, *extra: bytes) -> Document:
    return parse(raw_pdf([b"<< /Type /Catalog /Pages 2 0 R >>", pages_body, *extra]))


def test_new_document_has_empty_page_tree() -> None:
    document = Document.new()

    assert document.page_count == 0
    document.append_page({"MediaBox": [0, 0, 100, 100]})
    assert document.page_count == 1
    assert document.resolve_dict(document.pages_root_ref)["Count"] == 1


def test_page_tree_cycle_is_malformed(raw_pdf) -> None:
    document = _tree(
        raw_pdf,
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Pages /Kids [2 0 R] /Count 1 >>",
    )

    with pytest.raises(MalformedDocumentError):
        document.page_count


def test_page_tree_leaf_must_be_a_page(raw_pdf) -> None:
    document = _tree(
        raw_pdf,
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Font /Subtype /Type1 >>",
    )

    with pytest.raises(MalformedDocumentError):
        document.pages


def test_nested_page_tree_order(raw_pdf) -> None:
    document = _tree(
        raw_pdf,
        b"<< /Type /Pages /Kids [3 0 R 5 0 R] /Count 3 >>",
        b"<< /Type /Pages /Parent 2 0 R /Kids [4 0 R 6 0 R] /Count 2 >>",
        b"<< /Type /Page /Parent 3 0 R /Rotate 90 >>",
        b"<< /Type /Page /Parent 2 0 R /Rotate 270 >>",
        b"<< /Type /Page /Parent 3 0 R /Rotate 180 >>",
    )

    assert [page.rotate for page in document.pages] == [90, 180, 270]
    assert [page.number for page in document.pages] == [1, 2, 3]


def test_inherited_attributes(raw_pdf) -> None:
    document = _tree(
        raw_pdf,
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 /MediaBox [0 0 300 400] /Rotate 90"
        b" /Resources << /Font << /F1 4 0 R >> >> >>",
        b"<< /Type /Page /Parent 2 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    )

    page = document.pages[0]
    assert (page.width, page.height, page.rotate) == (300.0, 400.0, 90)
    materialized = page.materialized()
    assert materialized["MediaBox"] == [0, 0, 300, 400]
    assert "F1" in materialized["Resources"]["Font"]


def test_import_page_leaves_source_page_tree_behind(text_pdf_bytes: Callable[..., bytes]) -> None:
    source = parse(text_pdf_bytes("A", "B"))
    target = Document.new()

    target.import_page(source.pages[1])

    assert target.page_count == 1
    assert b"(B)" in target.pages[0].content_bytes()
    page_trees = [
        obj for obj in target.objects.values()
        if isinstance(obj.value, dict) and name_of(obj.value.get("Type")) == "Pages"
    ]
    assert len(page_trees) == 1
    assert len(target.objects) == 5


def test_shared_mapping_copies_shared_objects_once(raw_pdf) -> None:
    source = _tree(
        raw_pdf,
        b"<< /Type /Pages /Kids [3 0 R 4 0 R] /Count 2 /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Type /Page /Parent 2 0 R >>",
        b"<< /Type /Page /Parent 2 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    )
    target = Document.new()
    mapping: dict = {}

    for page in source.pages:
        target.import_page(page, mapping)

    fonts = [
        obj for obj in target.objects.values()
        if isinstance(obj.value, dict) and name_of(obj.value.get("Type")) == "Font"
    ]
    assert len(fonts) == 1


def test_append_content_brackets_existing_content_once(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))
    page = document.pages[0]

    page.append_content(b"BT (one) Tj ET")
    page.append_content(b"BT (two) Tj ET")

    contents = page.content_streams()
    assert [stream.data for stream in contents][:1] == [b"q\n"]
    assert len(contents) == 5
    content = page.content_bytes()
    assert content.index(b"(A)") < content.index(b"Q") < content.index(b"(one)")


def test_resources_are_made_page_local(raw_pdf) -> None:
    document = _tree(
        raw_pdf,
        b"<< /Type /Pages /Kids [3 0 R 4 0 R] /Count 2 >>",
        b"<< /Type /Page /Parent 2 0 R /Resources 5 0 R >>",
        b"<< /Type /Page /Parent 2 0 R /Resources 5 0 R >>",
        b"<< /Font << >> >>",
    )
    first, second = document.pages

    name = first.add_standard_font("Helvetica")

    assert name == "FxF1"
    assert first.add_standard_font("Helvetica") == name
    assert first.add_standard_font("Courier") == "FxF2"
    assert name in first.resources["Font"]
    assert name not in second.resources["Font"]


def test_opacity_state_and_image_names(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))
    page = document.pages[0]

    state = page.add_opacity_state(0.5)
    image = page.add_image(document.add_object(PDFStream({"Subtype": PDFName("Image")}, b"")))

    assert state == "FxGS1"
    assert document.resolve(page.resources["ExtGState"][state])["ca"] == 0.5
    assert image == "FxIm1"


def test_encrypted_documents_refuse_content_access(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))
    document.trailer["Encrypt"] = {"Filter": PDFName("Standard")}

    assert document.is_encrypted
    with pytest.raises(UnsupportedFeatureError):
        document.pages[0].content_bytes()
