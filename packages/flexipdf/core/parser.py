"""Parse PDF bytes into a :class:`~flexipdf.core.document.Document`.

Classic cross-reference tables (including ``/Prev`` chains written by
incremental updates) are read first.  When the table is missing or any of
its offsets does not point at the object it claims to, the object table is
rebuilt by scanning the whole file for ``N G obj`` headers.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ..exceptions import MalformedDocumentError, UnsupportedFeatureError
from .document import Document
from .lexer import WHITESPACE, Lexer, Token
from .objects import IndirectObject, PDFName, PDFReference, PDFStream, name_of

_LOGGER = logging.getLogger("flexipdf.core.parser")

HEADER_SEARCH_WINDOW = 1024
_HEADER_RE = re.compile(rb"%PDF-(\d+\.\d+)")
_OBJECT_HEADER_RE = re.compile(rb"(?<![0-9.+-])(\d+)\s+(\d+)\s+obj\b")
_STARTXREF_RE = re.compile(rb"startxref\s+(\d+)")
_TRAILER_RE = re.compile(rb"\btrailer\b")
_END_MARKERS = (b"endobj", b"endstream", b"xref", b"trailer")


class _XrefUnavailable(Exception):
    """Internal signal that the object table has to be rebuilt."""


class PDFParser:
    """Single-use parser over an in-memory PDF file."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.version = "1.7"
        self.objects: dict[tuple[int, int], IndirectObject] = {}
        self._entries: dict[int, tuple[int, int, bool]] = {}
        self._rebuilding = False

    def parse(self) -> Document:
        self._read_header()
        try:
            trailer = self._read_xref_chain()
            self._validate_offsets()
            self._load_indexed_objects()
        except _XrefUnavailable as exc:
            _LOGGER.warning("Reconstructing cross-reference table: %s", exc)
            trailer = self._rebuild()
        for key in ("Prev", "XRefStm", "Size"):
            trailer.pop(key, None)
        trailer = self._ensure_root(trailer)
        document = Document(self.objects, trailer, version=self.version)
        _LOGGER.debug("Parsed %d objects", len(self.objects))
        return document

    # -- Header and cross-reference tables ---------------------------------

    def _read_header(self) -> None:
        match = _HEADER_RE.search(self.data, 0, HEADER_SEARCH_WINDOW + 16)
        if match is None or match.start() > HEADER_SEARCH_WINDOW:
            raise MalformedDocumentError("Missing %PDF- header")
        self.version = match.group(1).decode("ascii")

    def _read_xref_chain(self) -> dict[str, Any]:
        matches = list(_STARTXREF_RE.finditer(self.data))
        if not matches:
            raise _XrefUnavailable("no startxref keyword")
        offset: int | None = int(matches[-1].group(1))
        trailer: dict[str, Any] | None = None
        visited: set[int] = set()
        while offset is not None:
            if offset in visited:
                raise _XrefUnavailable(f"/Prev loop at offset {offset}")
            visited.add(offset)
            section_trailer = self._read_xref_section(offset)
            if "XRefStm" in section_trailer:
                raise UnsupportedFeatureError(
                    "Hybrid-reference files (/XRefStm) are not supported"
                )
            if trailer is None:
                trailer = section_trailer
            prev = section_trailer.get("Prev")
            offset = prev if isinstance(prev, int) and not isinstance(prev, bool) else None
        assert trailer is not None
        return dict(trailer)

    def _read_xref_section(self, offset: int) -> dict[str, Any]:
        if offset >= len(self.data):
            raise _XrefUnavailable(f"xref offset {offset} is past the end of file")
        lexer = Lexer(self.data, offset)
        try:
            keyword = lexer.next_token()
            if keyword != "xref":
                lexer.pos = offset
                if isinstance(keyword, int) and self._object_header_at(offset) is not None:
                    obj, _ = self._read_object_at(offset)
                    if isinstance(obj.value, PDFStream) and name_of(obj.value.get("Type")) == "XRef":
                        raise UnsupportedFeatureError(
                            "Cross-reference streams are not supported"
                        )
                raise _XrefUnavailable(f"no xref table at offset {offset}")
            section: dict[int, tuple[int, int, bool]] = {}
            while True:
                token = lexer.next_token()
                if token == "trailer":
                    break
                count = lexer.next_token()
                if not _is_int(token) or not _is_int(count):
                    raise _XrefUnavailable(f"bad xref subsection header at offset {lexer.pos}")
                for index in range(count):
                    entry_offset = lexer.next_token()
                    generation = lexer.next_token()
                    kind = lexer.next_token()
                    if not _is_int(entry_offset) or not _is_int(generation) or kind not in ("n", "f"):
                        raise _XrefUnavailable(f"bad xref entry for object {token + index}")
                    section[token + index] = (entry_offset, generation, kind == "n")
            trailer = self._read_value(lexer)
        except MalformedDocumentError as exc:
            raise _XrefUnavailable(str(exc)) from exc
        if not isinstance(trailer, dict):
            raise _XrefUnavailable("trailer is not a dictionary")
        # Sections are read newest first, so earlier entries win.
        for number, entry in section.items():
            self._entries.setdefault(number, entry)
        return trailer

    def _object_header_at(self, offset: int) -> tuple[int, int] | None:
        pos = offset
        while pos < len(self.data) and self.data[pos] in WHITESPACE:
            pos += 1
        match = _OBJECT_HEADER_RE.match(self.data, pos)
        if match is None:
            return None
        return int(match.group(1)), int(match.group(2))

    def _validate_offsets(self) -> None:
        for number, (offset, generation, in_use) in self._entries.items():
            if not in_use or offset == 0 or number == 0:
                continue
            if self._object_header_at(offset) != (number, generation):
                raise _XrefUnavailable(f"offset {offset} of object {number} is wrong")

    def _load_indexed_objects(self) -> None:
        for number, (offset, generation, in_use) in sorted(self._entries.items()):
            if not in_use or offset == 0 or number == 0:
                continue
            if (number, generation) in self.objects:
                continue
            try:
                obj, _ = self._read_object_at(offset)
            except MalformedDocumentError as exc:
                raise _XrefUnavailable(str(exc)) from exc
            self._check_supported(obj)
            self.objects[obj.key] = obj

    # -- Reconstruction ----------------------------------------------------

    def _rebuild(self) -> dict[str, Any]:
        self._rebuilding = True
        self.objects.clear()
        data = self.data
        pos = 0
        while True:
            match = _OBJECT_HEADER_RE.search(data, pos)
            if match is None:
                break
            try:
                obj, end = self._read_object_at(match.start())
            except MalformedDocumentError as exc:
                _LOGGER.warning("Skipping unreadable object at offset %d: %s", match.start(), exc)
                pos = match.end()
                continue
            self._check_supported(obj)
            # Later definitions replace earlier ones, as incremental updates do.
            self.objects[obj.key] = obj
            pos = max(end, match.end())
        if not self.objects:
            raise MalformedDocumentError("No indirect objects found")
        _LOGGER.debug("Recovered %d objects by scanning", len(self.objects))
        return self._recover_trailer()

    def _recover_trailer(self) -> dict[str, Any]:
        for match in reversed(list(_TRAILER_RE.finditer(self.data))):
            lexer = Lexer(self.data, match.end())
            try:
                trailer = self._read_value(lexer)
            except MalformedDocumentError:
                continue
            if isinstance(trailer, dict):
                return dict(trailer)
        _LOGGER.debug("No trailer dictionary found, synthesizing one")
        return {}

    def _ensure_root(self, trailer: dict[str, Any]) -> dict[str, Any]:
        root = trailer.get("Root")
        if isinstance(root, PDFReference) and root.key in self.objects:
            return trailer
        for obj in sorted(self.objects.values(), key=lambda item: item.key, reverse=True):
            if isinstance(obj.value, dict) and name_of(obj.value.get("Type")) == "Catalog":
                trailer["Root"] = obj.reference()
                return trailer
        raise MalformedDocumentError("Unable to locate the document catalog")

    def _check_supported(self, obj: IndirectObject) -> None:
        if isinstance(obj.value, PDFStream):
            kind = name_of(obj.value.get("Type"))
            if kind == "ObjStm":
                raise UnsupportedFeatureError("Object streams (/ObjStm) are not supported")
            if kind == "XRef":
                raise UnsupportedFeatureError("Cross-reference streams are not supported")

    # -- Objects -----------------------------------------------------------

    def _read_object_at(self, offset: int) -> tuple[IndirectObject, int]:
        lexer = Lexer(self.data, offset)
        number = lexer.next_token()
        generation = lexer.next_token()
        keyword = lexer.next_token()
        if not _is_int(number) or not _is_int(generation) or keyword != "obj":
            raise MalformedDocumentError(f"Unparseable object header at offset {offset}")
        if lexer.peek_token() == "endobj":
            value: Any = None
        else:
            value = self._read_value(lexer)
        after_value = lexer.pos
        token = lexer.next_token()
        if token == "stream":
            if not isinstance(value, dict):
                raise MalformedDocumentError(f"Stream without dictionary in object {number}")
            payload, lexer.pos = self._read_stream_data(lexer.pos, value)
            value = PDFStream(value, payload)
            after_value = lexer.pos
            token = lexer.next_token()
        if token != "endobj":
            # Missing endobj is tolerated.
            lexer.pos = after_value
        return IndirectObject(number, generation, value), lexer.pos

    def _read_stream_data(self, pos: int, dictionary: dict[str, Any]) -> tuple[bytes, int]:
        data = self.data
        if data[pos : pos + 2] == b"\r\n":
            pos += 2
        elif data[pos : pos + 1] in (b"\n", b"\r"):
            pos += 1
        length = self._stream_length(dictionary.get("Length"))
        if length is not None and 0 <= length <= len(data) - pos:
            end = pos + length
            probe = end
            while probe < len(data) and data[probe] in WHITESPACE:
                probe += 1
            if data.startswith(b"endstream", probe):
                return data[pos:end], probe + len(b"endstream")
        marker = data.find(b"endstream", pos)
        if marker == -1:
            raise MalformedDocumentError(f"Stream at offset {pos} has no endstream")
        payload = data[pos:marker]
        if payload.endswith(b"\r\n"):
            payload = payload[:-2]
        elif payload.endswith((b"\n", b"\r")):
            payload = payload[:-1]
        return payload, marker + len(b"endstream")

    def _stream_length(self, value: Any) -> int | None:
        if _is_int(value):
            return value
        if not isinstance(value, PDFReference):
            return None
        obj = self.objects.get(value.key)
        if obj is None and not self._rebuilding:
            entry = self._entries.get(value.obj_id)
            if entry is not None and entry[2] and entry[1] == value.generation:
                try:
                    obj, _ = self._read_object_at(entry[0])
                except MalformedDocumentError:
                    return None
        if obj is not None and _is_int(obj.value):
            return obj.value
        return None

    def _read_value(self, lexer: Lexer) -> Any:
        token = lexer.next_token()
        if token is None:
            raise MalformedDocumentError("Unexpected end of file")
        return self._parse_token(lexer, token)

    def _parse_token(self, lexer: Lexer, token: Token) -> Any:
        if _is_int(token):
            saved = lexer.pos
            generation = lexer.next_token()
            if _is_int(generation) and lexer.next_token() == "R":
                return PDFReference(token, generation)
            lexer.pos = saved
            return token
        if token == "<<":
            return self._parse_dictionary(lexer)
        if token == "[":
            items = []
            while True:
                item = lexer.next_token()
                if item == "]":
                    return items
                if item is None or item in _END_KEYWORDS:
                    raise MalformedDocumentError("Unterminated array")
                items.append(self._parse_token(lexer, item))
        if token == "true":
            return True
        if token == "false":
            return False
        if token == "null":
            return None
        if isinstance(token, str):
            raise MalformedDocumentError(f"Unexpected token {token!r} at offset {lexer.pos}")
        return token

    def _parse_dictionary(self, lexer: Lexer) -> dict[str, Any]:
        result: dict[str, Any] = {}
        while True:
            key = lexer.next_token()
            if key == ">>":
                return result
            if not isinstance(key, PDFName):
                raise MalformedDocumentError(f"Dictionary key expected at offset {lexer.pos}")
            token = lexer.next_token()
            if token == ">>":
                result[key.value] = None
                return result
            if token is None or token in _END_KEYWORDS:
                raise MalformedDocumentError("Unterminated dictionary")
            result[key.value] = self._parse_token(lexer, token)


_END_KEYWORDS = {marker.decode("ascii") for marker in _END_MARKERS} | {"obj", "stream"}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse(data: bytes) -> Document:
    """Parse ``data`` into a :class:`Document`."""

    return PDFParser(data).parse()


__all__ = ["PDFParser", "parse", "HEADER_SEARCH_WINDOW"]
