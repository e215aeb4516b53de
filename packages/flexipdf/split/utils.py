"""Utility helpers for the :mod:`flexipdf.split` package."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

from ..exceptions import InvalidPageSpecError

_TOKEN_RE = re.compile(r"\s*(\d+)\s*(?:-\s*(\d+)\s*)?\Z")

PageSpec = str | Sequence[object]


@dataclass(frozen=True)
class PageRange:
    """Represents an inclusive page range."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < 1:
            raise ValueError("Page numbers must be positive integers")
        if self.start > self.end:
            raise ValueError("Page range start must be less than or equal to end")

    def pages(self) -> range:
        return range(self.start, self.end + 1)

    def label(self) -> str:
        """Return a human-readable label for the range."""

        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"


def _range_tokens_from_iterable(spec: Iterable[object]) -> Iterator[str]:
    for item in spec:
        if isinstance(item, bool):
            raise InvalidPageSpecError(spec, f"unexpected value {item!r}")
        if isinstance(item, str):
            yield from item.split(",")
        elif isinstance(item, int):
            yield str(item)
        elif isinstance(item, Sequence) and len(item) == 2:
            yield f"{item[0]}-{item[1]}"
        else:
            raise InvalidPageSpecError(spec, f"unexpected value {item!r}")


def parse_page_ranges(spec: PageSpec | None, *, total_pages: int) -> List[PageRange]:
    """Parse ``spec`` into :class:`PageRange` objects in the order given.

    Args:
        spec: A comma-separated string such as ``"1-3, 5"``, or a sequence of
            page numbers, strings and ``(start, end)`` pairs.
        total_pages: Page count of the source document.

    Raises:
        InvalidPageSpecError: For empty specs or tokens, non-integers,
            numbers outside ``1..total_pages`` and reversed ranges.
    """

    if spec is None:
        raise InvalidPageSpecError(spec, "no pages selected")
    if isinstance(spec, str):
        tokens = spec.split(",")
    elif isinstance(spec, Sequence):
        tokens = list(_range_tokens_from_iterable(spec))
    else:
        raise InvalidPageSpecError(spec, "expected a string or a sequence")
    if not spec or not tokens:
        raise InvalidPageSpecError(spec, "no pages selected")

    parsed: List[PageRange] = []
    for token in tokens:
        match = _TOKEN_RE.match(token)
        if match is None:
            reason = "empty entry" if not token.strip() else f"cannot read {token.strip()!r}"
            raise InvalidPageSpecError(spec, reason)
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start
        if start < 1 or end > total_pages:
            raise InvalidPageSpecError(
                spec, f"{token.strip()} is outside 1-{total_pages}"
            )
        if start > end:
            raise InvalidPageSpecError(spec, f"{token.strip()} is a reversed range")
        parsed.append(PageRange(start, end))
    return parsed


def parse_page_spec(spec: PageSpec | None, page_count: int) -> List[int]:
    """Return the 1-based page numbers selected by ``spec``.

    Order follows the selection and duplicates are kept, so ``"3,1"`` yields
    ``[3, 1]`` and ``"1-3,2-4"`` yields ``[1, 2, 3, 2, 3, 4]``.
    """

    numbers: List[int] = []
    for page_range in parse_page_ranges(spec, total_pages=page_count):
        numbers.extend(page_range.pages())
    return numbers


def normalize_pages(spec: PageSpec | None, *, total_pages: int) -> List[int]:
    """Return the sorted, de-duplicated pages selected by ``spec``.

    ``None`` selects every page.
    """

    if spec is None:
        return list(range(1, total_pages + 1))
    return sorted(set(parse_page_spec(spec, total_pages)))


def build_output_filename(base_name: str, part: PageRange | int) -> str:
    """Construct the file name of one split output, e.g. ``page-3.pdf``."""

    safe_base = base_name.replace(" ", "_")
    suffix = part.label() if isinstance(part, PageRange) else str(part)
    return f"{safe_base}-{suffix}.pdf"


__all__ = [
    "PageRange",
    "PageSpec",
    "parse_page_ranges",
    "parse_page_spec",
    "normalize_pages",
    "build_output_filename",
]
