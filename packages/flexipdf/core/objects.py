"""PDF object primitives.

Direct values map onto plain Python types where one exists: ``None`` is
``null``, ``bool``/``int``/``float`` are booleans and numbers, ``list`` is an
array and ``dict`` (keyed by the name text without the slash) is a
dictionary.  Names, strings, references and streams get the small classes
below so that they survive a parse/serialize round trip unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_UTF16_BOM = b"\xfe\xff"


@dataclass(frozen=True)
class PDFName:
    """A PDF name object (``/Page``) stored without its leading slash."""

    value: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"/{self.value}"


@dataclass(frozen=True)
class PDFReference:
    """Indirect reference (``12 0 R``)."""

    obj_id: int
    generation: int = 0

    @property
    def key(self) -> tuple[int, int]:
        return (self.obj_id, self.generation)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.obj_id} {self.generation} R"


@dataclass(frozen=True)
class PDFString:
    """A string object holding raw bytes.

    ``hex`` remembers whether the source used ``<...>`` notation, which keeps
    binary strings (document IDs, encrypted values) in hex on output.
    """

    value: bytes
    hex: bool = False

    @classmethod
    def from_text(cls, text: str) -> "PDFString":
        try:
            return cls(text.encode("latin-1"))
        except UnicodeEncodeError:
            return cls(_UTF16_BOM + text.encode("utf-16-be"))

    def text(self) -> str:
        if self.value.startswith(_UTF16_BOM):
            return self.value[2:].decode("utf-16-be", "replace")
        return self.value.decode("latin-1")


@dataclass
class PDFStream:
    """A stream dictionary plus its raw (still encoded) payload."""

    dictionary: dict[str, Any]
    data: bytes

    def get(self, key: str, default: Any = None) -> Any:
        return self.dictionary.get(key, default)


@dataclass
class IndirectObject:
    """A numbered object owned by a :class:`~flexipdf.core.document.Document`."""

    obj_id: int
    generation: int
    value: Any

    @property
    def key(self) -> tuple[int, int]:
        return (self.obj_id, self.generation)

    @property
    def is_stream(self) -> bool:
        return isinstance(self.value, PDFStream)

    def reference(self) -> PDFReference:
        return PDFReference(self.obj_id, self.generation)


def name_of(value: Any) -> str | None:
    """Return the text of a name value, or ``None`` for anything else."""

    if isinstance(value, PDFName):
        return value.value
    return None


def text_of(value: Any) -> str | None:
    """Return a text string value as ``str`` (``None`` if not a string)."""

    if isinstance(value, PDFString):
        return value.text()
    if isinstance(value, str):
        return value
    return None


__all__ = [
    "PDFName",
    "PDFReference",
    "PDFString",
    "PDFStream",
    "IndirectObject",
    "name_of",
    "text_of",
]
