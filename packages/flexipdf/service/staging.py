"""Per-request file naming and delayed cleanup."""

from __future__ import annotations

import secrets
import shutil
import threading
import time
from pathlib import Path
from typing import Iterable

from ..core.utils import get_logger

LOGGER = get_logger("flexipdf.service.staging")


class StagingArea:
    """Hands out unique paths under ``root`` and removes them later."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser()
        self._timers: list[threading.Timer] = []
        self._lock = threading.Lock()

    @staticmethod
    def unique_stem(prefix: str) -> str:
        stamp = int(time.time() * 1000)
        token = secrets.randbelow(10**9)
        return f"{prefix}-{stamp}-{token}"

    def unique_name(self, prefix: str, extension: str) -> str:
        """Return ``<prefix>-<epoch ms>-<random>.<extension>``."""

        return f"{self.unique_stem(prefix)}.{extension.lstrip('.')}"

    def path_for(self, prefix: str, extension: str) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root / self.unique_name(prefix, extension)

    def directory_for(self, prefix: str) -> Path:
        path = self.root / self.unique_stem(prefix)
        path.mkdir(parents=True)
        return path

    def cleanup(self, paths: Iterable[str | Path]) -> int:
        """Delete ``paths`` now; missing files are ignored.  Return how many went."""

        removed = 0
        for raw in paths:
            path = Path(raw)
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                LOGGER.warning("Failed to remove %s: %s", path, exc)
                continue
            removed += 1
        if removed:
            LOGGER.debug("Cleaned up %d staged path(s)", removed)
        return removed

    def schedule_cleanup(self, paths: Iterable[str | Path], delay: float) -> threading.Timer:
        """Delete ``paths`` after ``delay`` seconds on a daemon timer."""

        targets = [Path(path) for path in paths]
        timer = threading.Timer(delay, self.cleanup, args=(targets,))
        timer.daemon = True
        with self._lock:
            self._timers = [item for item in self._timers if item.is_alive()]
            self._timers.append(timer)
        timer.start()
        LOGGER.debug("Scheduled cleanup of %d path(s) in %.0f s", len(targets), delay)
        return timer

    def cancel_pending(self) -> None:
        with self._lock:
            for timer in self._timers:
                timer.cancel()
            self._timers.clear()


__all__ = ["StagingArea"]
