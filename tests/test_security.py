from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader

from flexipdf import extract_text, is_encrypted, parse, protect, serialize, unprotect
from flexipdf.core.model import DocumentMetadata
from flexipdf.exceptions import InvalidPasswordError, UnsupportedFeatureError


def test_protect_encrypts_document(sample_pdf: Path) -> None:
    document = parse(sample_pdf.read_bytes())

    protected = protect(document, "secret")

    assert is_encrypted(protected)
    assert not is_encrypted(document)
    reader = PdfReader(io.BytesIO(serialize(protected)))
    assert reader.is_encrypted is True
    assert reader.decrypt("secret") != 0
    assert len(reader.pages) == 5


def test_unprotect_restores_content(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("Confidential"))

    protected = parse(serialize(protect(document, "secret", owner_password="owner")))
    unprotected = unprotect(protected, "secret")

    assert not is_encrypted(unprotected)
    assert "Confidential" in extract_text(unprotected)


def test_owner_password_also_opens(text_pdf_bytes: Callable[..., bytes]) -> None:
    protected = protect(parse(text_pdf_bytes("A")), "user", owner_password="owner")

    assert not is_encrypted(unprotect(protected, "owner"))


def test_unprotect_requires_correct_password(text_pdf_bytes: Callable[..., bytes]) -> None:
    protected = protect(parse(text_pdf_bytes("A")), "secret")

    with pytest.raises(InvalidPasswordError) as excinfo:
        unprotect(protected, "wrong")
    assert excinfo.value.status_code == 403


def test_protect_refuses_already_encrypted(text_pdf_bytes: Callable[..., bytes]) -> None:
    protected = protect(parse(text_pdf_bytes("A")), "secret")

    with pytest.raises(UnsupportedFeatureError):
        protect(protected, "again")


def test_unprotect_refuses_plain_documents(text_pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(UnsupportedFeatureError):
        unprotect(parse(text_pdf_bytes("A")), "secret")


@pytest.mark.parametrize(("password", "algorithm"), [("", "RC4-128"), ("x", "ROT13")])
def test_protect_argument_validation(text_pdf_bytes: Callable[..., bytes], password, algorithm) -> None:
    with pytest.raises(ValueError):
        protect(parse(text_pdf_bytes("A")), password, algorithm=algorithm)


def test_encrypted_metadata_is_hidden(sample_pdf: Path) -> None:
    protected = protect(parse(sample_pdf.read_bytes()), "secret")

    metadata = DocumentMetadata.from_document(protected)

    assert metadata.encrypted is True
    assert metadata.page_count == 5
    assert metadata.title is None
