"""PDF to JPEG rasterization through an external backend."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

from ..core.utils import run_subprocess, which
from ..exceptions import InvalidGeometryError, MalformedDocumentError, OperationNotImplementedError

_LOGGER = logging.getLogger("flexipdf.convert")

_PAGE_NUMBER_RE = re.compile(r"(\d+)\.jpg$")


class BackendType(str, Enum):
    """Enumeration of supported rasterizer backends."""

    PDFTOPPM = "pdftoppm"
    GHOSTSCRIPT = "ghostscript"


@dataclass(frozen=True)
class Backend:
    """Represents a rasterizer backend and its executable."""

    type: BackendType
    executable: str


_BACKEND_CANDIDATES: list[tuple[BackendType, Sequence[str]]] = [
    (BackendType.PDFTOPPM, ("pdftoppm",)),
    (BackendType.GHOSTSCRIPT, ("gs", "gswin64c", "gswin32c")),
]


def detect_backend(preferred: Iterable[BackendType] | None = None) -> Backend | None:
    """Detect the first available backend from *preferred* order."""

    order = list(preferred) if preferred else [candidate for candidate, _ in _BACKEND_CANDIDATES]
    for backend_type in order:
        for candidate_type, executables in _BACKEND_CANDIDATES:
            if backend_type is not candidate_type:
                continue
            executable = which(executables)
            if executable:
                return Backend(candidate_type, executable)
    return None


def build_command(backend: Backend, source: Path, prefix: Path, dpi: int) -> list[str]:
    if backend.type is BackendType.PDFTOPPM:
        return [backend.executable, "-jpeg", "-r", str(dpi), str(source), str(prefix)]
    return [
        backend.executable,
        "-dSAFER",
        "-dBATCH",
        "-dNOPAUSE",
        "-sDEVICE=jpeg",
        "-dJPEGQ=90",
        f"-r{dpi}",
        f"-sOutputFile={prefix}-%d.jpg",
        str(source),
    ]


def _page_number(path: Path) -> int:
    match = _PAGE_NUMBER_RE.search(path.name)
    return int(match.group(1)) if match else 0


def pdf_to_jpg(
    source: str | Path,
    output_dir: str | Path,
    dpi: int = 150,
    *,
    backend: Backend | None = None,
) -> list[Path]:
    """Render every page of ``source`` to ``output_dir/page-<n>.jpg``.

    Raises :class:`OperationNotImplementedError` when neither ``pdftoppm``
    nor Ghostscript is installed.
    """

    if dpi <= 0:
        raise InvalidGeometryError(f"DPI must be positive, got {dpi}")
    backend = backend or detect_backend()
    if backend is None:
        raise OperationNotImplementedError(
            "PDF to JPG needs pdftoppm or Ghostscript on PATH"
        )
    source = Path(source)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    temp_dir = Path(tempfile.mkdtemp(prefix="flexipdf-raster-"))
    try:
        command = build_command(backend, source, temp_dir / "page", dpi)
        try:
            run_subprocess(command)
        except subprocess.CalledProcessError as exc:
            _LOGGER.warning("Backend %s failed: %s", backend.type.value, exc.stderr)
            raise MalformedDocumentError(f"Unable to render {source.name}") from exc
        rendered = sorted(temp_dir.glob("page*.jpg"), key=_page_number)
        results = []
        for index, image in enumerate(rendered, start=1):
            destination = output_dir / f"page-{index}.jpg"
            shutil.move(str(image), destination)
            results.append(destination.resolve())
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
    _LOGGER.info("Rendered %d page(s) with %s", len(results), backend.type.value)
    return results


__all__ = ["Backend", "BackendType", "build_command", "detect_backend", "pdf_to_jpg"]
