"""Shared result models used across FlexiPDF components."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .document import Document
from .objects import text_of


@dataclass(slots=True)
class DocumentMetadata:
    page_count: int = 0
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: str | None = None
    modified_date: str | None = None
    encrypted: bool = False

    @classmethod
    def from_document(cls, document: Document) -> "DocumentMetadata":
        # Strings of an encrypted document are still ciphertext.
        info = {} if document.is_encrypted else document.info or {}

        def field_text(key: str) -> str | None:
            return text_of(document.resolve(info.get(key)))

        return cls(
            page_count=document.page_count,
            title=field_text("Title"),
            author=field_text("Author"),
            subject=field_text("Subject"),
            creator=field_text("Creator"),
            producer=field_text("Producer"),
            creation_date=field_text("CreationDate"),
            modified_date=field_text("ModDate"),
            encrypted=document.is_encrypted,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ComparisonResult:
    identical: bool
    first_length: int
    second_length: int
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["DocumentMetadata", "ComparisonResult"]
