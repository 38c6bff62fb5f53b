"""Custom exception hierarchy for the linkframe data link toolkit."""
from __future__ import annotations


class LinkFrameError(Exception):
    """Base class for all linkframe errors."""


class ConfigurationError(LinkFrameError):
    """Raised when user-supplied configuration is invalid."""


__all__ = [
    "ConfigurationError",
    "LinkFrameError",
]
