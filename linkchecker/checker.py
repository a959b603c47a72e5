"""Sequential link verification over a single browser session.

The checker loads the origin page once, harvests its links, and then
walks them strictly in order: classify, probe, capture evidence on
failure, and return to the origin page before the next link. A failure
on one link is recorded and never stops the run.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from .classify import LinkKind, classify
from .config import CheckerConfig
from .errors import OriginLoadError
from .evidence import EvidenceResult, capture_evidence
from .harvest import harvest_links
from .popups import dismiss_popups
from .probe import probe
from .records import (
    CheckOutcome,
    CrawlReport,
    Errored,
    LinkRecord,
    LinkResult,
    Skipped,
)
from .report import build_report
from .session import BrowserSession, open_session

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, LinkResult], None]


class CheckState(str, Enum):
    """Phases of a link-check run."""

    IDLE = "idle"
    HARVESTING = "harvesting"
    CLASSIFYING = "classifying"
    PROBING = "probing"
    CAPTURING = "capturing"
    RESTORING = "restoring"
    REPORTING = "reporting"
    DONE = "done"


class LinkChecker:
    """Drives one link-check run against an origin page."""

    def __init__(
        self,
        origin_url: str,
        config: Optional[CheckerConfig] = None,
        *,
        on_result: Optional[ProgressCallback] = None,
    ) -> None:
        self.origin_url = origin_url
        self.config = config or CheckerConfig()
        self.on_result = on_result
        self.state = CheckState.IDLE
        self.links: List[LinkRecord] = []
        self.results: List[LinkResult] = []

    def _enter(self, state: CheckState) -> None:
        self.state = state
        LOGGER.debug("State -> %s", state.value)

    async def run(self, session: BrowserSession) -> CrawlReport:
        """Check every harvested link and return the final report.

        Raises:
            OriginLoadError: If the origin page cannot be loaded initially.
        """
        self._enter(CheckState.HARVESTING)
        try:
            await session.load(
                self.origin_url,
                wait_until="networkidle",
                timeout_ms=self.config.origin_timeout_ms,
            )
        except Exception as exc:
            raise OriginLoadError(self.origin_url, str(exc)) from exc

        if self.config.dismiss_popups:
            await dismiss_popups(session)

        self.links = await harvest_links(session, self.config)
        self.results = []
        LOGGER.info("Found %d links on %s", len(self.links), self.origin_url)

        for link in self.links:
            result = await self._check_link(session, link)
            self.results.append(result)
            if self.on_result is not None:
                self.on_result(link.position, len(self.links), result)

        self._enter(CheckState.REPORTING)
        report = build_report(self.results)
        self._enter(CheckState.DONE)
        return report

    async def _check_link(
        self, session: BrowserSession, link: LinkRecord
    ) -> LinkResult:
        outcome: Optional[CheckOutcome] = None
        evidence: Optional[EvidenceResult] = None
        try:
            self._enter(CheckState.CLASSIFYING)
            if classify(link.href) is LinkKind.SKIP:
                return LinkResult(link, Skipped())

            self._enter(CheckState.PROBING)
            outcome = await probe(session, link.href, self.config.probe_timeout_ms)
            if outcome.is_failure:
                evidence = await self._capture(session, link, outcome)
        except Exception as exc:
            LOGGER.warning("Unexpected failure while checking %s: %s", link.href, exc)
            if outcome is None:
                outcome = Errored(str(exc) or exc.__class__.__name__)
                evidence = await self._capture(session, link, outcome)

        if evidence is None or not evidence.restored:
            await self._restore(session)

        screenshot = evidence.screenshot if evidence is not None else None
        return LinkResult(link, outcome, screenshot)

    async def _capture(
        self, session: BrowserSession, link: LinkRecord, outcome: CheckOutcome
    ) -> Optional[EvidenceResult]:
        if not self.config.capture_screenshots:
            return None
        self._enter(CheckState.CAPTURING)
        try:
            evidence = await capture_evidence(
                session, self.origin_url, link, outcome, self.config
            )
        except Exception as exc:
            LOGGER.warning("Evidence capture for %s failed: %s", link.href, exc)
            return None
        if evidence.status == "captured":
            LOGGER.info("Screenshot saved: %s", evidence.screenshot)
        elif evidence.status == "failed":
            LOGGER.warning("Could not capture screenshot for %s", link.href)
        return evidence

    async def _restore(self, session: BrowserSession) -> bool:
        self._enter(CheckState.RESTORING)
        try:
            await session.load(
                self.origin_url,
                wait_until="networkidle",
                timeout_ms=self.config.origin_timeout_ms,
            )
        except Exception as exc:
            LOGGER.warning(
                "Could not navigate back to %s from %s: %s",
                self.origin_url,
                session.url or "about:blank",
                exc,
            )
            return False
        return True


async def check_links_async(
    url: str,
    *,
    config: Optional[CheckerConfig] = None,
    on_result: Optional[ProgressCallback] = None,
) -> CrawlReport:
    """
    Check every body link of a page in a fresh headless browser.

    Args:
        url: The origin page whose links are checked.
        config: Optional CheckerConfig for timeouts, regions and output paths.
        on_result: Optional callback invoked as ``(position, total, result)``
            after each link.

    Returns:
        CrawlReport with working and broken links.

    Raises:
        OriginLoadError: If the origin page cannot be loaded.
    """
    cfg = config or CheckerConfig()
    checker = LinkChecker(url, cfg, on_result=on_result)
    async with open_session(
        headless=cfg.headless,
        viewport_width=cfg.viewport_width,
        viewport_height=cfg.viewport_height,
    ) as session:
        return await checker.run(session)


def check_links(
    url: str,
    *,
    config: Optional[CheckerConfig] = None,
    on_result: Optional[ProgressCallback] = None,
) -> CrawlReport:
    """Synchronous wrapper for check_links_async."""
    return asyncio.run(check_links_async(url, config=config, on_result=on_result))
