"""Decide whether a harvested link needs a navigation probe."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

SKIPPED_PREFIXES: Tuple[str, ...] = ("mailto:", "tel:", "javascript:", "#")


class LinkKind(str, Enum):
    """Classification of a harvested href."""

    SKIP = "skip"
    PROBE = "probe"


def classify(href: str) -> LinkKind:
    """Classify an href without touching the network.

    Special schemes, fragment-only references and empty hrefs are never
    navigated to.
    """
    if href == "" or href.startswith(SKIPPED_PREFIXES):
        return LinkKind.SKIP
    return LinkKind.PROBE
