"""Run configuration for link checking."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, List, Mapping, Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_TARGET_URL = "https://example.com"
DEFAULT_REPORT_PATH = "./link-check-report.json"
DEFAULT_SCREENSHOT_DIR = "./broken-link-screenshots"

# Regions treated as site chrome; links nested under them are never harvested
EXCLUDED_SELECTORS: List[str] = [
    "header",
    "footer",
]

ID_ATTRIBUTE = "data-link-checker-id"
ID_PREFIX = "link-"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class CheckerConfig:
    """Options for a single link-check run.

    Timeouts and delays are in milliseconds, matching Playwright's API.
    """

    probe_timeout_ms: int = 15000
    origin_timeout_ms: int = 30000
    capture_timeout_ms: int = 10000
    render_delay_ms: int = 1000
    content_selector: str = "body"
    excluded_selectors: List[str] = field(
        default_factory=lambda: list(EXCLUDED_SELECTORS)
    )
    id_attribute: str = ID_ATTRIBUTE
    id_prefix: str = ID_PREFIX
    screenshot_dir: str = DEFAULT_SCREENSHOT_DIR
    report_path: str = DEFAULT_REPORT_PATH
    headless: bool = True
    dismiss_popups: bool = False
    capture_screenshots: bool = True
    viewport_width: int = 1280
    viewport_height: int = 900

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "CheckerConfig":
        """Build a config from ``LINKCHECK_*`` environment variables.

        Supported variables:
            LINKCHECK_PROBE_TIMEOUT_MS: Per-link navigation timeout.
            LINKCHECK_REPORT_PATH: Where the JSON report is written.
            LINKCHECK_SCREENSHOT_DIR: Directory for failure screenshots.
            LINKCHECK_HEADLESS: Run the browser headless (default: true).
            LINKCHECK_CONTENT_SELECTOR: Region whose links are harvested.
            LINKCHECK_EXCLUDE: Comma-separated excluded region selectors.
            LINKCHECK_DISMISS_POPUPS: Try to close popups after page loads.
        """
        env = os.environ if environ is None else environ
        config = cls()
        overrides: dict[str, Any] = {}

        timeout = _parse_int(
            env.get("LINKCHECK_PROBE_TIMEOUT_MS"), "LINKCHECK_PROBE_TIMEOUT_MS"
        )
        if timeout is not None:
            overrides["probe_timeout_ms"] = timeout
        if env.get("LINKCHECK_REPORT_PATH"):
            overrides["report_path"] = env["LINKCHECK_REPORT_PATH"]
        if env.get("LINKCHECK_SCREENSHOT_DIR"):
            overrides["screenshot_dir"] = env["LINKCHECK_SCREENSHOT_DIR"]
        if env.get("LINKCHECK_CONTENT_SELECTOR"):
            overrides["content_selector"] = env["LINKCHECK_CONTENT_SELECTOR"]
        if env.get("LINKCHECK_EXCLUDE"):
            overrides["excluded_selectors"] = split_selectors(env["LINKCHECK_EXCLUDE"])

        headless = _parse_bool(env.get("LINKCHECK_HEADLESS"), "LINKCHECK_HEADLESS")
        if headless is not None:
            overrides["headless"] = headless
        dismiss = _parse_bool(
            env.get("LINKCHECK_DISMISS_POPUPS"), "LINKCHECK_DISMISS_POPUPS"
        )
        if dismiss is not None:
            overrides["dismiss_popups"] = dismiss

        return replace(config, **overrides) if overrides else config


def split_selectors(value: str) -> List[str]:
    """Split a comma-separated selector list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_int(value: Optional[str], name: str) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        LOGGER.warning("Ignoring %s=%r; expected an integer.", name, value)
        return None
    if parsed <= 0:
        LOGGER.warning("Ignoring %s=%r; expected a positive value.", name, value)
        return None
    return parsed


def _parse_bool(value: Optional[str], name: str) -> Optional[bool]:
    if value is None or not value.strip():
        return None
    candidate = value.strip().lower()
    if candidate in _TRUE_VALUES:
        return True
    if candidate in _FALSE_VALUES:
        return False
    LOGGER.warning("Ignoring %s=%r; expected a boolean.", name, value)
    return None
