"""Global pytest hooks and an in-memory browser session for checker tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from linkchecker.evidence import (
    ANNOTATE_SCRIPT,
    MATCH_BY_HREF_SCRIPT,
    MATCH_BY_ID_SCRIPT,
    MATCH_BY_TEXT_SCRIPT,
    REMOVE_ANNOTATIONS_SCRIPT,
)
from linkchecker.harvest import MARK_ANCHORS_SCRIPT, SCAN_ANCHORS_SCRIPT
from linkchecker.popups import DISMISS_POPUPS_SCRIPT

ORIGIN = "https://site.test/"


@dataclass
class _TestAccounting:
    deselected: int = 0
    skipped: int = 0
    xfailed: int = 0
    xpassed: int = 0


_ACCOUNTING = _TestAccounting()


def pytest_deselected(items):  # pragma: no cover - pytest hook
    _ACCOUNTING.deselected += len(items)


def pytest_runtest_logreport(report):  # pragma: no cover - pytest hook
    if report.when not in {"setup", "call"}:
        return

    is_xfail = bool(getattr(report, "wasxfail", False))
    if is_xfail:
        if report.outcome == "skipped":
            _ACCOUNTING.xfailed += 1
        elif report.outcome == "passed":
            _ACCOUNTING.xpassed += 1
        return

    if report.outcome == "skipped":
        _ACCOUNTING.skipped += 1


def pytest_sessionfinish(session, exitstatus):  # pragma: no cover - pytest hook
    violations = []
    if _ACCOUNTING.deselected:
        violations.append(f"deselected={_ACCOUNTING.deselected}")
    if _ACCOUNTING.skipped:
        violations.append(f"skipped={_ACCOUNTING.skipped}")
    if _ACCOUNTING.xfailed:
        violations.append(f"xfailed={_ACCOUNTING.xfailed}")
    if _ACCOUNTING.xpassed:
        violations.append(f"xpassed={_ACCOUNTING.xpassed}")

    if not violations:
        return

    reporter = session.config.pluginmanager.get_plugin("terminalreporter")
    if reporter:
        reporter.write_sep(
            "=",
            "Strict guard failed: test accounting violations detected "
            f"({', '.join(violations)})",
        )
        reporter.write_line(
            "Hard guard requires zero skipped/deselected/xfail/xpass tests."
        )

    session.exitstatus = 1


def anchor(
    href: str,
    text: str = "",
    *,
    raw_href: Optional[str] = None,
    regions: Iterable[str] = (),
    aria_label: Optional[str] = None,
    title: Optional[str] = None,
) -> Dict[str, Any]:
    """Anchor dict shaped like the in-page scan result (position added later)."""
    return {
        "href": href,
        "rawHref": href if raw_href is None else raw_href,
        "text": text,
        "ariaLabel": aria_label,
        "title": title,
        "regions": list(regions),
    }


class FakeSession:
    """BrowserSession stand-in that answers the checker's in-page scripts.

    ``responses`` maps a URL to the status code the navigation yields, or to
    an exception instance that the navigation raises. Unknown URLs answer 200.
    """

    def __init__(
        self,
        anchors: Iterable[Dict[str, Any]] = (),
        responses: Optional[Dict[str, Any]] = None,
        *,
        matches: Optional[Dict[str, bool]] = None,
        failing_scripts: Iterable[str] = (),
        screenshot_error: Optional[Exception] = None,
    ) -> None:
        self.anchors = [
            dict(item, position=position) for position, item in enumerate(anchors)
        ]
        self.responses = dict(responses or {})
        self.matches = {"id": False, "href": True, "text": True}
        self.matches.update(matches or {})
        self.failing_scripts = set(failing_scripts)
        self.screenshot_error = screenshot_error
        self.url = ""
        self.loads: List[Tuple[str, str, Optional[int]]] = []
        self.evaluations: List[Tuple[str, Any]] = []
        self.screenshots: List[str] = []
        self.waits: List[int] = []
        self.annotated = False
        self.closed = False
        self._status: Optional[int] = None

    async def load(
        self, url: str, *, wait_until: str, timeout_ms: Optional[int] = None
    ) -> None:
        self.loads.append((url, wait_until, timeout_ms))
        self.annotated = False
        self._status = None
        response = self.responses.get(url, 200)
        if isinstance(response, BaseException):
            self.url = "chrome-error://chromewebdata/"
            raise response
        self.url = url
        self._status = response

    def current_status_code(self) -> Optional[int]:
        return self._status

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.evaluations.append((script, arg))
        if script in self.failing_scripts:
            raise RuntimeError("Execution context was destroyed")
        if script == SCAN_ANCHORS_SCRIPT:
            return [dict(item) for item in self.anchors]
        if script == MARK_ANCHORS_SCRIPT:
            return len(arg["marks"])
        if script == MATCH_BY_ID_SCRIPT:
            return self.matches["id"]
        if script == MATCH_BY_HREF_SCRIPT:
            return self.matches["href"]
        if script == MATCH_BY_TEXT_SCRIPT:
            return self.matches["text"]
        if script == ANNOTATE_SCRIPT:
            self.annotated = True
            return True
        if script == REMOVE_ANNOTATIONS_SCRIPT:
            self.annotated = False
            return True
        if script == DISMISS_POPUPS_SCRIPT:
            return 0
        raise AssertionError(f"Unexpected script: {script[:60]!r}")

    async def screenshot(self, path: str, *, full_page: bool = True) -> None:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        Path(path).write_bytes(b"\x89PNG fake")
        self.screenshots.append(path)

    async def wait_for_timeout(self, timeout_ms: int) -> None:
        self.waits.append(timeout_ms)

    async def close(self) -> None:
        self.closed = True

    def scripts(self) -> List[str]:
        return [script for script, _ in self.evaluations]

    def probed_urls(self) -> List[str]:
        return [url for url, wait, _ in self.loads if wait == "domcontentloaded"]


@pytest.fixture
def make_session():
    """Factory for :class:`FakeSession` instances."""
    return FakeSession
