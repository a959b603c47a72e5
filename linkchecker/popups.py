"""Best-effort dismissal of interstitial popups and modals."""

from __future__ import annotations

import logging
from typing import List

from .session import BrowserSession

LOGGER = logging.getLogger(__name__)

# Common close/dismiss controls of cookie banners, newsletters and modals
CLOSE_SELECTORS: List[str] = [
    '[aria-label*="close" i]',
    '[title*="close" i]',
    'button[class*="close" i]',
    'button[class*="dismiss" i]',
    ".modal-close",
    ".popup-close",
    '[role="button"][aria-label*="close" i]',
    'a[aria-label*="close" i]',
    'div[class*="close-btn"]',
]

DISMISS_POPUPS_SCRIPT = """
(selectors) => {
  let clicked = 0;
  for (const selector of selectors) {
    let elements = [];
    try {
      elements = document.querySelectorAll(selector);
    } catch (e) {
      continue;
    }
    for (const el of elements) {
      if (el.offsetParent !== null) {
        try {
          el.click();
          clicked += 1;
          break;
        } catch (e) {
          // next selector
        }
      }
    }
  }
  document.dispatchEvent(new KeyboardEvent('keydown', {
    key: 'Escape',
    code: 'Escape',
    keyCode: 27,
    which: 27,
    bubbles: true,
  }));
  return clicked;
}
"""


async def dismiss_popups(
    session: BrowserSession,
    *,
    settle_ms: int = 500,
    after_ms: int = 300,
) -> bool:
    """Click visible close controls and send Escape.

    Returns False when anything went wrong; never raises.
    """
    try:
        await session.wait_for_timeout(settle_ms)
        clicked = await session.evaluate(DISMISS_POPUPS_SCRIPT, list(CLOSE_SELECTORS))
        await session.wait_for_timeout(after_ms)
    except Exception as exc:
        LOGGER.debug("Popup dismissal failed: %s", exc)
        return False

    if clicked:
        LOGGER.debug("Closed %s popup control(s)", clicked)
    return True
