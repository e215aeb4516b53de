"""Password protection for :class:`~flexipdf.core.document.Document` objects.

Encryption itself is delegated to pypdf's standard security handler: the
document is serialized, re-read by pypdf, encrypted or decrypted there and
parsed back.
"""

from __future__ import annotations

import io
import logging

from pypdf import PdfReader, PdfWriter
from pypdf.errors import DependencyError, PdfReadError

from ..core.document import Document
from ..core.parser import parse
from ..core.serializer import serialize
from ..exceptions import (
    InvalidPasswordError,
    MalformedDocumentError,
    OperationNotImplementedError,
    UnsupportedFeatureError,
)

LOGGER = logging.getLogger("flexipdf.security")

SUPPORTED_ALGORITHMS = ("RC4-40", "RC4-128", "AES-128", "AES-256-R5", "AES-256")


def _reader_for(document: Document) -> PdfReader:
    try:
        return PdfReader(io.BytesIO(serialize(document)))
    except PdfReadError as exc:
        raise MalformedDocumentError(f"Unable to hand the document to pypdf: {exc}") from exc


def _copy_reader_contents(reader: PdfReader) -> PdfWriter:
    writer = PdfWriter()
    writer.clone_reader_document_root(reader)

    metadata = reader.metadata
    if metadata:
        writer.add_metadata(
            {
                key: str(value)
                for key, value in metadata.items()
                if isinstance(key, str) and value is not None
            }
        )

    return writer


def _write(writer: PdfWriter) -> Document:
    buffer = io.BytesIO()
    writer.write(buffer)
    return parse(buffer.getvalue())


def is_encrypted(document: Document) -> bool:
    return document.is_encrypted


def protect(
    document: Document,
    password: str,
    *,
    owner_password: str | None = None,
    algorithm: str = "RC4-128",
) -> Document:
    """Return an encrypted copy of ``document`` opened by ``password``.

    Raises:
        ValueError: Empty password or unknown algorithm.
        UnsupportedFeatureError: The document is already encrypted.
        OperationNotImplementedError: pypdf lacks the crypto backend the
            algorithm needs.
    """

    if not password:
        raise ValueError("A non-empty password is required")
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(
            f"Unknown encryption algorithm {algorithm!r} "
            f"(expected one of {', '.join(SUPPORTED_ALGORITHMS)})"
        )
    if document.is_encrypted:
        raise UnsupportedFeatureError("Input document is already encrypted")

    writer = _copy_reader_contents(_reader_for(document))
    try:
        writer.encrypt(
            user_password=password,
            owner_password=owner_password or password,
            algorithm=algorithm,
        )
    except DependencyError as exc:
        raise OperationNotImplementedError(
            f"Encryption with {algorithm} needs a crypto backend that is not installed"
        ) from exc

    protected = _write(writer)
    LOGGER.info("Encrypted document with %s", algorithm)
    return protected


def unprotect(document: Document, password: str) -> Document:
    """Return a decrypted copy of ``document``.

    Raises:
        ValueError: Empty password.
        UnsupportedFeatureError: The document is not encrypted.
        InvalidPasswordError: ``password`` opens the document neither as
            user nor as owner.
    """

    if not password:
        raise ValueError("A non-empty password is required")
    if not document.is_encrypted:
        raise UnsupportedFeatureError("Input document is not encrypted")

    reader = _reader_for(document)
    try:
        status = reader.decrypt(password)
    except DependencyError as exc:
        raise OperationNotImplementedError(
            "Decryption needs a crypto backend that is not installed"
        ) from exc
    if status == 0:
        raise InvalidPasswordError("Incorrect password for encrypted document")

    unprotected = _write(_copy_reader_contents(reader))
    LOGGER.info("Decrypted document")
    return unprotected


__all__ = ["SUPPORTED_ALGORITHMS", "is_encrypted", "protect", "unprotect"]
