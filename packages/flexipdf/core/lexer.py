"""Position based tokenizer for PDF file syntax and content streams."""

from __future__ import annotations

import re
from typing import Iterator, Union

from ..exceptions import MalformedDocumentError
from .objects import PDFName, PDFString

WHITESPACE = b"\x00\t\n\x0c\r "
DELIMITERS = b"()<>[]{}/%"
_STOP = WHITESPACE + DELIMITERS

_NUMBER_RE = re.compile(rb"[+-]?(?:\d+\.?\d*|\.\d+)\Z")
_HEX_DIGITS = b"0123456789abcdefABCDEF"
_OCTAL_DIGITS = b"01234567"

_ESCAPES = {
    ord("n"): b"\n",
    ord("r"): b"\r",
    ord("t"): b"\t",
    ord("b"): b"\b",
    ord("f"): b"\f",
}

Token = Union[int, float, str, PDFName, PDFString]


class Lexer:
    """Reads PDF tokens from ``data`` starting at ``pos``.

    Keywords and structural delimiters (``<<``, ``]``, ``obj``, operators of
    content streams, ...) come back as ``str``; numbers as ``int``/``float``.
    ``pos`` is public so callers can reposition the lexer, which is how the
    parser reads objects at cross-reference offsets and skips stream data.
    """

    def __init__(self, data: bytes, pos: int = 0) -> None:
        self.data = data
        self.pos = pos

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def skip_whitespace(self) -> None:
        data = self.data
        length = len(data)
        pos = self.pos
        while pos < length:
            byte = data[pos]
            if byte in WHITESPACE:
                pos += 1
            elif byte == 0x25:  # '%' comment runs to end of line
                while pos < length and data[pos] not in b"\r\n":
                    pos += 1
            else:
                break
        self.pos = pos

    def peek_token(self) -> Token | None:
        saved = self.pos
        try:
            return self.next_token()
        finally:
            self.pos = saved

    def next_token(self) -> Token | None:
        self.skip_whitespace()
        data = self.data
        if self.pos >= len(data):
            return None
        byte = data[self.pos]
        if byte == 0x2F:  # '/'
            return self._read_name()
        if byte == 0x28:  # '('
            return self._read_literal_string()
        if byte == 0x3C:  # '<'
            if data[self.pos + 1 : self.pos + 2] == b"<":
                self.pos += 2
                return "<<"
            return self._read_hex_string()
        if byte == 0x3E:  # '>'
            if data[self.pos + 1 : self.pos + 2] == b">":
                self.pos += 2
                return ">>"
            self.pos += 1
            return self.next_token()
        if byte in b"[]{}":
            self.pos += 1
            return chr(byte)
        if byte == 0x29:  # stray ')'
            self.pos += 1
            return self.next_token()
        return self._read_regular()

    def _read_regular(self) -> Token:
        data = self.data
        start = self.pos
        pos = start
        while pos < len(data) and data[pos] not in _STOP:
            pos += 1
        self.pos = pos
        raw = data[start:pos]
        if _NUMBER_RE.match(raw):
            if b"." in raw:
                return float(raw)
            return int(raw)
        return raw.decode("latin-1")

    def _read_name(self) -> PDFName:
        data = self.data
        pos = self.pos + 1
        out = bytearray()
        while pos < len(data) and data[pos] not in _STOP:
            byte = data[pos]
            if (
                byte == 0x23
                and pos + 2 < len(data)
                and data[pos + 1] in _HEX_DIGITS
                and data[pos + 2] in _HEX_DIGITS
            ):
                out.append(int(data[pos + 1 : pos + 3], 16))
                pos += 3
                continue
            out.append(byte)
            pos += 1
        self.pos = pos
        return PDFName(out.decode("latin-1"))

    def _read_literal_string(self) -> PDFString:
        data = self.data
        length = len(data)
        pos = self.pos + 1
        depth = 1
        out = bytearray()
        while pos < length:
            byte = data[pos]
            if byte == 0x5C:  # backslash
                pos += 1
                if pos >= length:
                    raise MalformedDocumentError(f"Unterminated string starting at offset {self.pos}")
                escaped = data[pos]
                if escaped in _ESCAPES:
                    out += _ESCAPES[escaped]
                    pos += 1
                elif escaped in _OCTAL_DIGITS:
                    end = pos
                    while end < length and end - pos < 3 and data[end] in _OCTAL_DIGITS:
                        end += 1
                    out.append(int(data[pos:end], 8) & 0xFF)
                    pos = end
                elif escaped == 0x0D:  # line continuation
                    pos += 1
                    if data[pos : pos + 1] == b"\n":
                        pos += 1
                elif escaped == 0x0A:
                    pos += 1
                else:
                    out.append(escaped)
                    pos += 1
                continue
            if byte == 0x28:
                depth += 1
            elif byte == 0x29:
                depth -= 1
                if depth == 0:
                    pos += 1
                    break
            elif byte == 0x0D:
                # A bare end-of-line inside a string reads as a single LF.
                out.append(0x0A)
                pos += 1
                if data[pos : pos + 1] == b"\n":
                    pos += 1
                continue
            out.append(byte)
            pos += 1
        else:
            raise MalformedDocumentError(f"Unterminated string starting at offset {self.pos}")
        self.pos = pos
        return PDFString(bytes(out))

    def _read_hex_string(self) -> PDFString:
        data = self.data
        end = data.find(b">", self.pos + 1)
        if end == -1:
            raise MalformedDocumentError(f"Unterminated hex string at offset {self.pos}")
        digits = bytes(byte for byte in data[self.pos + 1 : end] if byte not in WHITESPACE)
        if any(byte not in _HEX_DIGITS for byte in digits):
            raise MalformedDocumentError(f"Invalid hex string at offset {self.pos}")
        if len(digits) % 2:
            digits += b"0"
        self.pos = end + 1
        return PDFString(bytes.fromhex(digits.decode("ascii")), hex=True)


def tokenize(data: bytes) -> list[Token]:
    """Return every token of ``data`` (used for content streams)."""

    return list(Lexer(data))


__all__ = ["Lexer", "Token", "tokenize", "WHITESPACE", "DELIMITERS"]
