"""Exceptions that end a link-check run.

Per-link failures never surface as exceptions; they are recorded as
outcomes. Only the two failures below abort a run.
"""

from __future__ import annotations


class LinkCheckError(RuntimeError):
    """Base class for run-fatal link checker failures."""


class OriginLoadError(LinkCheckError):
    """Raised when the origin page cannot be loaded for harvesting."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to load origin page {url}: {reason}")
        self.url = url
        self.reason = reason


class ReportWriteError(LinkCheckError):
    """Raised when the final report cannot be written to disk."""
