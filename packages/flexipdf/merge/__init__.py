"""Merge utilities for the :mod:`flexipdf` toolkit."""

from __future__ import annotations

from .merger import merge

__all__ = ["merge"]
