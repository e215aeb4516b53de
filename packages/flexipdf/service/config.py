"""Runtime configuration for :class:`~flexipdf.service.facade.DocumentService`."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

DEFAULT_MAX_INPUT_BYTES = 10 * 1024 * 1024
DEFAULT_CLEANUP_DELAY = 600.0
DEFAULT_PRODUCER = "FlexiPDF"
DEFAULT_DPI = 150

_ENV_PREFIX = "FLEXIPDF_"


def _default_staging_dir() -> Path:
    return Path(tempfile.gettempdir()) / "flexipdf"


@dataclass(slots=True)
class ServiceConfig:
    """Settings shared by every operation of one service instance."""

    staging_dir: Path = field(default_factory=_default_staging_dir)
    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES
    cleanup_delay: float = DEFAULT_CLEANUP_DELAY
    producer: str = DEFAULT_PRODUCER
    default_dpi: int = DEFAULT_DPI

    def __post_init__(self) -> None:
        self.staging_dir = Path(self.staging_dir).expanduser()
        if self.max_input_bytes <= 0:
            raise ValueError("max_input_bytes must be positive")
        if self.cleanup_delay < 0:
            raise ValueError("cleanup_delay must not be negative")
        if self.default_dpi <= 0:
            raise ValueError("default_dpi must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServiceConfig":
        """Build a config from ``FLEXIPDF_*`` variables, defaulting the rest."""

        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        staging = env.get(f"{_ENV_PREFIX}STAGING_DIR")
        if staging:
            values["staging_dir"] = Path(staging)
        max_bytes = env.get(f"{_ENV_PREFIX}MAX_INPUT_BYTES")
        if max_bytes:
            values["max_input_bytes"] = _parse_number(int, "MAX_INPUT_BYTES", max_bytes)
        delay = env.get(f"{_ENV_PREFIX}CLEANUP_DELAY")
        if delay:
            values["cleanup_delay"] = _parse_number(float, "CLEANUP_DELAY", delay)
        producer = env.get(f"{_ENV_PREFIX}PRODUCER")
        if producer:
            values["producer"] = producer
        dpi = env.get(f"{_ENV_PREFIX}DEFAULT_DPI")
        if dpi:
            values["default_dpi"] = _parse_number(int, "DEFAULT_DPI", dpi)
        return cls(**values)  # type: ignore[arg-type]


def _parse_number(kind: type, name: str, raw: str) -> int | float:
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be a number, got {raw!r}") from exc


__all__ = [
    "DEFAULT_CLEANUP_DELAY",
    "DEFAULT_DPI",
    "DEFAULT_MAX_INPUT_BYTES",
    "DEFAULT_PRODUCER",
    "ServiceConfig",
]
