"""Navigation probe for a single link."""

from __future__ import annotations

import logging
from typing import Optional

from .records import Broken, CheckOutcome, Errored, Working
from .session import BrowserSession

LOGGER = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_MS = 15000


def outcome_for_status(status_code: Optional[int]) -> CheckOutcome:
    """Map an HTTP status (or its absence) to Working/Broken."""
    if status_code is not None and 200 <= status_code < 400:
        return Working(status_code)
    return Broken(status_code)


async def probe(
    session: BrowserSession,
    href: str,
    timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS,
) -> CheckOutcome:
    """Navigate the shared session to *href* and classify the response.

    Waits for ``domcontentloaded`` only. Navigation failures (timeout, DNS,
    refused connection, invalid URL) come back as :class:`Errored`; nothing
    is raised. The session is left on the probed document, so the caller
    must restore the origin page.
    """
    try:
        await session.load(href, wait_until="domcontentloaded", timeout_ms=timeout_ms)
    except Exception as exc:
        LOGGER.debug("Navigation to %s failed: %s", href, exc)
        return Errored(str(exc) or exc.__class__.__name__)

    return outcome_for_status(session.current_status_code())
