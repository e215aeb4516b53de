"""Utilities shared by FlexiPDF components."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, MutableMapping, Sequence

_LOGGER = logging.getLogger("flexipdf")


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_path(path: os.PathLike[str] | str | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    return Path(path).expanduser().resolve()


def update_dict(target: dict[str, Any], **updates: Any) -> dict[str, Any]:
    target.update({k: v for k, v in updates.items() if v is not None})
    return target


def which(executables: Sequence[str]) -> str | None:
    """Return the first executable from *executables* found on ``PATH``."""

    for candidate in executables:
        found = shutil.which(candidate)
        if found:
            _LOGGER.debug("Detected external tool: %s -> %s", candidate, found)
            return found
    return None


def run_subprocess(
    command: Sequence[str],
    *,
    env: MutableMapping[str, str] | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run *command* capturing output.

    Raises :class:`subprocess.CalledProcessError` on a non-zero exit status
    when ``check`` is true.
    """

    _LOGGER.debug("Executing command: %s", " ".join(command))
    completed = subprocess.run(
        command,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=check,
        text=True,
    )
    _LOGGER.debug(
        "Command finished with exit code %s\nstdout: %s\nstderr: %s",
        completed.returncode,
        completed.stdout,
        completed.stderr,
    )
    return completed


def sizeof_fmt(num_bytes: float) -> str:
    """Format *num_bytes* into a human-friendly string."""

    step_unit = 1024.0
    for unit in ("bytes", "KiB", "MiB", "GiB"):
        if abs(num_bytes) < step_unit:
            return f"{num_bytes:3.1f} {unit}"
        num_bytes /= step_unit
    return f"{num_bytes:.1f} TiB"


__all__ = ["get_logger", "resolve_path", "update_dict", "which", "run_subprocess", "sizeof_fmt"]
