"""Validation helpers shared by FlexiPDF components."""

from __future__ import annotations

from pathlib import Path

from ..exceptions import PayloadTooLargeError
from .utils import resolve_path


def ensure_input_file(
    path: str | Path,
    *,
    max_bytes: int | None = None,
    suffixes: tuple[str, ...] | None = None,
) -> Path:
    """Resolve ``path`` and check it before anything reads it.

    Raises :class:`FileNotFoundError` for a missing file, :class:`ValueError`
    for an unexpected extension and :class:`PayloadTooLargeError` when the
    file is bigger than ``max_bytes``.
    """

    resolved = resolve_path(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"Input file not found: {resolved}")
    if suffixes and resolved.suffix.lower() not in suffixes:
        raise ValueError(f"Expected one of {', '.join(suffixes)}, got: {resolved}")
    if max_bytes is not None:
        size = resolved.stat().st_size
        if size > max_bytes:
            raise PayloadTooLargeError(resolved, size, max_bytes)
    return resolved



def ensure_output_parent(path: str | Path) -> Path:
    resolved = resolve_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved


def ensure_output_dir(path: str | Path) -> Path:
    resolved = resolve_path(path)
    resolved.mkdir(parents=True, exist_ok=True)
    return resolved


__all__ = ["ensure_input_file", "ensure_output_parent", "ensure_output_dir"]
