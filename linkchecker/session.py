"""Browser session used by the link checker.

The checker only ever talks to the :class:`BrowserSession` protocol. The
Playwright-backed implementation owns exactly one browser, one context and
one page; every step of a run receives that same handle.

Example usage:

    from linkchecker.session import open_session

    async with open_session(headless=True) as session:
        await session.load("https://example.com", wait_until="networkidle")
        print(session.current_status_code())
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Literal, Optional, Protocol

LOGGER = logging.getLogger(__name__)

WaitPolicy = Literal["load", "domcontentloaded", "networkidle", "commit"]


class BrowserSession(Protocol):
    """Capabilities the link checker consumes from a browser."""

    @property
    def url(self) -> str: ...

    async def load(
        self, url: str, *, wait_until: WaitPolicy, timeout_ms: Optional[int] = None
    ) -> None: ...

    def current_status_code(self) -> Optional[int]: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    async def screenshot(self, path: str, *, full_page: bool = True) -> None: ...

    async def wait_for_timeout(self, timeout_ms: int) -> None: ...

    async def close(self) -> None: ...


class PlaywrightSession:
    """:class:`BrowserSession` backed by a single Playwright page."""

    def __init__(self, page: Any, browser: Any = None) -> None:
        self._page = page
        self._browser = browser
        self._status: Optional[int] = None

    @property
    def url(self) -> str:
        return self._page.url or ""

    async def load(
        self, url: str, *, wait_until: WaitPolicy, timeout_ms: Optional[int] = None
    ) -> None:
        """Navigate the page; navigation errors propagate to the caller."""
        self._status = None
        kwargs: dict[str, Any] = {"wait_until": wait_until}
        if timeout_ms is not None:
            kwargs["timeout"] = timeout_ms
        response = await self._page.goto(url, **kwargs)
        # goto() returns None for same-document navigations and about:blank
        if response is not None:
            self._status = response.status

    def current_status_code(self) -> Optional[int]:
        return self._status

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if arg is None:
            return await self._page.evaluate(script)
        return await self._page.evaluate(script, arg)

    async def screenshot(self, path: str, *, full_page: bool = True) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        await self._page.screenshot(path=path, full_page=full_page)

    async def wait_for_timeout(self, timeout_ms: int) -> None:
        await self._page.wait_for_timeout(timeout_ms)

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
            else:
                await self._page.close()
        except Exception as exc:
            LOGGER.debug("Ignoring error while closing browser: %s", exc)


@asynccontextmanager
async def open_session(
    *,
    headless: bool = True,
    viewport_width: int = 1280,
    viewport_height: int = 900,
) -> AsyncIterator[PlaywrightSession]:
    """Launch Chromium and yield a session bound to a fresh page.

    Raises:
        RuntimeError: If Playwright is not installed.
    """
    try:
        from playwright.async_api import async_playwright
    except ImportError as exc:
        raise RuntimeError(
            "Playwright is required for link checking. "
            "Install it with: pip install playwright && playwright install chromium"
        ) from exc

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        context = await browser.new_context(
            viewport={"width": viewport_width, "height": viewport_height},
        )
        page = await context.new_page()
        session = PlaywrightSession(page, browser)
        LOGGER.debug("Browser session opened (headless=%s)", headless)
        try:
            yield session
        finally:
            await session.close()
