"""Utility helpers for linkframe."""

from .logging import configure_logging

__all__ = ["configure_logging"]
