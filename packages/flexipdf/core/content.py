"""Build and read page content streams."""

from __future__ import annotations

import math
import re
from typing import Any, Iterator

from .lexer import WHITESPACE, Lexer, Token
from .objects import PDFName, PDFString
from .serializer import format_number, serialize_value

_INLINE_IMAGE_END = re.compile(rb"[\x00\t\n\x0c\r ]EI(?=[\x00\t\n\x0c\r ()<>\[\]{}/%]|\Z)")


def encode_text(text: str) -> bytes:
    """Encode ``text`` for a standard font using ``WinAnsiEncoding``."""

    return text.encode("cp1252", "replace")


class ContentBuilder:
    """Accumulates content-stream operators.

    Each method appends one operator line and returns the builder so calls
    can be chained; :meth:`build` returns the bytes.
    """

    def __init__(self) -> None:
        self._lines: list[bytes] = []

    def _op(self, operator: str, *operands: Any) -> "ContentBuilder":
        parts = [serialize_value(item) for item in operands]
        parts.append(operator.encode("ascii"))
        self._lines.append(b" ".join(parts))
        return self

    def save_state(self) -> "ContentBuilder":
        return self._op("q")

    def restore_state(self) -> "ContentBuilder":
        return self._op("Q")

    def graphics_state(self, name: str) -> "ContentBuilder":
        return self._op("gs", PDFName(name))

    def fill_color(self, red: float, green: float, blue: float) -> "ContentBuilder":
        return self._op("rg", float(red), float(green), float(blue))

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> "ContentBuilder":
        return self._op("cm", *(float(item) for item in (a, b, c, d, e, f)))

    def begin_text(self) -> "ContentBuilder":
        return self._op("BT")

    def end_text(self) -> "ContentBuilder":
        return self._op("ET")

    def font(self, name: str, size: float) -> "ContentBuilder":
        return self._op("Tf", PDFName(name), float(size))

    def text_matrix(self, a: float, b: float, c: float, d: float, e: float, f: float) -> "ContentBuilder":
        return self._op("Tm", *(float(item) for item in (a, b, c, d, e, f)))

    def move_text(self, x: float, y: float) -> "ContentBuilder":
        return self._op("Td", float(x), float(y))

    def show_text(self, text: str) -> "ContentBuilder":
        return self._op("Tj", PDFString(encode_text(text)))

    def draw_xobject(self, name: str) -> "ContentBuilder":
        return self._op("Do", PDFName(name))

    def build(self) -> bytes:
        return b"\n".join(self._lines) + b"\n"


def text_at(
    font_name: str,
    font_size: float,
    text: str,
    x: float,
    y: float,
    *,
    color: tuple[float, float, float] = (0.0, 0.0, 0.0),
    angle: float = 0.0,
    state: str | None = None,
) -> bytes:
    """Return a ``q ... Q`` block drawing ``text`` with its origin at ``(x, y)``."""

    builder = ContentBuilder().save_state()
    if state is not None:
        builder.graphics_state(state)
    builder.fill_color(*color)
    radians = math.radians(angle)
    cos, sin = math.cos(radians), math.sin(radians)
    builder.begin_text().font(font_name, font_size)
    builder.text_matrix(round(cos, 6), round(sin, 6), round(-sin, 6), round(cos, 6), x, y)
    builder.show_text(text).end_text().restore_state()
    return builder.build()


def _read_operand(lexer: Lexer, token: Token) -> Any:
    if token == "[":
        items = []
        while True:
            item = lexer.next_token()
            if item is None or item == "]":
                return items
            items.append(_read_operand(lexer, item))
    if token == "<<":
        result: dict[str, Any] = {}
        while True:
            key = lexer.next_token()
            if key is None or key == ">>":
                return result
            value = lexer.next_token()
            if value is None or value == ">>":
                return result
            name = key.value if isinstance(key, PDFName) else str(key)
            result[name] = _read_operand(lexer, value)
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "null":
        return None
    return token


def _is_operator(token: Token) -> bool:
    return isinstance(token, str) and token not in ("[", "<<", "true", "false", "null")


def iter_operations(data: bytes) -> Iterator[tuple[str, list[Any]]]:
    """Yield ``(operator, operands)`` pairs from a decoded content stream.

    Inline images come back as a single ``"BI"`` operation whose operands are
    the image dictionary and the raw image bytes.
    """

    lexer = Lexer(data)
    operands: list[Any] = []
    while True:
        token = lexer.next_token()
        if token is None:
            return
        if not _is_operator(token):
            operands.append(_read_operand(lexer, token))
            continue
        if token == "BI":
            parameters: dict[str, Any] = {}
            while True:
                key = lexer.next_token()
                if key is None or key == "ID":
                    break
                value = lexer.next_token()
                if value is None:
                    break
                name = key.value if isinstance(key, PDFName) else str(key)
                parameters[name] = _read_operand(lexer, value)
            start = lexer.pos
            if start < len(data) and data[start] in WHITESPACE:
                start += 1
            match = _INLINE_IMAGE_END.search(data, start)
            end = match.start() if match else len(data)
            lexer.pos = match.end() if match else len(data)
            yield "BI", [parameters, data[start:end]]
            operands = []
            continue
        yield token, operands
        operands = []


__all__ = ["ContentBuilder", "encode_text", "iter_operations", "text_at", "format_number"]
