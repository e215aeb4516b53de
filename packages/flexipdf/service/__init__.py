"""Filesystem-facing service layer."""

from __future__ import annotations

from .config import ServiceConfig
from .facade import DocumentService
from .staging import StagingArea

__all__ = ["DocumentService", "ServiceConfig", "StagingArea"]
