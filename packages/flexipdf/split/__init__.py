"""Split and page-extraction utilities for the :mod:`flexipdf` toolkit."""

from __future__ import annotations

from .splitter import extract_pages, split_pages, split_ranges
from .utils import PageRange, build_output_filename, normalize_pages, parse_page_ranges, parse_page_spec

__all__ = [
    "split_pages",
    "split_ranges",
    "extract_pages",
    "PageRange",
    "build_output_filename",
    "normalize_pages",
    "parse_page_ranges",
    "parse_page_spec",
]
