"""Screenshot evidence for failed links.

After a failed probe the origin page is reloaded, the failed anchor is
found again, highlighted together with a banner and a pointer, and a
full-page screenshot is taken. All injected markup is removed before
returning so the next link starts from a clean page.

Nothing in this module raises: every failure is reported through
:class:`EvidenceResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from .config import CheckerConfig
from .popups import dismiss_popups
from .records import Broken, CheckOutcome, Errored, LinkRecord
from .session import BrowserSession

LOGGER = logging.getLogger(__name__)

EvidenceStatus = Literal["captured", "not_found", "failed"]

BANNER_ID = "broken-link-banner"
POINTER_CLASS = "broken-link-arrow"
STYLE_ID = "broken-link-style"
SAVED_STYLE_ATTRIBUTE = "data-link-checker-style"


@dataclass(frozen=True)
class EvidenceResult:
    """Outcome of one evidence capture attempt."""

    status: EvidenceStatus
    screenshot: Optional[str] = None
    matched_by: Optional[str] = None
    restored: bool = False
    error: Optional[str] = None


# Candidate anchors: inside the content root and outside excluded regions
_CANDIDATES_JS = """
  const container = document.querySelector(args.root) || document.body;
  const candidates = Array.from(container ? container.querySelectorAll('a[href]') : [])
    .filter((a) => !args.excluded.some((selector) => {
      try {
        return a.closest(selector) !== null;
      } catch (e) {
        return false;
      }
    }));
"""

MATCH_BY_ID_SCRIPT = """
(args) => {
  const selector = `a[${args.attribute}="${CSS.escape(args.id)}"]`;
  return document.querySelector(selector) !== null;
}
"""

MATCH_BY_HREF_SCRIPT = (
    "(args) => {"
    + _CANDIDATES_JS
    + """
  const link = candidates.find((a) => a.href === args.href);
  if (!link) {
    return false;
  }
  link.setAttribute(args.attribute, args.id);
  return true;
}
"""
)

MATCH_BY_TEXT_SCRIPT = (
    "(args) => {"
    + _CANDIDATES_JS
    + """
  const link = candidates.find((a) => (a.innerText || '').trim() === args.text);
  if (!link) {
    return false;
  }
  link.setAttribute(args.attribute, args.id);
  return true;
}
"""
)

ANNOTATE_SCRIPT = """
(args) => {
  const link = document.querySelector(`a[${args.attribute}="${CSS.escape(args.id)}"]`);
  if (!link) {
    return false;
  }

  link.setAttribute(args.savedStyleAttribute, link.style.cssText);
  link.style.cssText += `
    border: 5px solid red !important;
    background-color: rgba(255, 0, 0, 0.2) !important;
    outline: 3px solid orange !important;
    outline-offset: 2px !important;
    position: relative !important;
    z-index: 9999 !important;
    box-shadow: 0 0 20px rgba(255, 0, 0, 0.8) !important;
  `;

  try {
    link.scrollIntoView({ behavior: 'auto', block: 'center' });
  } catch (e) {
    link.scrollIntoView();
  }

  const banner = document.createElement('div');
  banner.id = args.bannerId;
  banner.style.cssText = `
    position: fixed;
    top: 0;
    left: 0;
    right: 0;
    background-color: #dc3545;
    color: white;
    padding: 15px 20px;
    font-size: 16px;
    font-weight: bold;
    z-index: 999999;
    box-shadow: 0 4px 8px rgba(0,0,0,0.3);
    font-family: Arial, sans-serif;
    text-align: center;
  `;
  const lines = [
    [`❌ BROKEN LINK DETECTED - ${args.status}`, ''],
    [`Link Text: "${args.text || 'N/A'}"`, 'font-size: 14px; margin-top: 5px; font-weight: normal;'],
    [`URL: ${args.href}`, 'font-size: 12px; margin-top: 3px; font-weight: normal; word-break: break-all;'],
  ];
  for (const [content, style] of lines) {
    const line = document.createElement('div');
    line.textContent = content;
    if (style) {
      line.style.cssText = style;
    }
    banner.appendChild(line);
  }
  document.body.appendChild(banner);

  const pointer = document.createElement('div');
  pointer.className = args.pointerClass;
  pointer.style.cssText = `
    position: fixed;
    left: 20px;
    font-size: 48px;
    color: red;
    z-index: 999998;
    animation: broken-link-bounce 1s infinite;
    pointer-events: none;
  `;
  pointer.textContent = '\U0001f449';
  const rect = link.getBoundingClientRect();
  pointer.style.top = `${rect.top + rect.height / 2 - 24}px`;
  document.body.appendChild(pointer);

  const style = document.createElement('style');
  style.id = args.styleId;
  style.textContent = `
    @keyframes broken-link-bounce {
      0%, 100% { transform: translateX(0); }
      50% { transform: translateX(10px); }
    }
  `;
  (document.head || document.body).appendChild(style);
  return true;
}
"""

REMOVE_ANNOTATIONS_SCRIPT = """
(args) => {
  const banner = document.getElementById(args.bannerId);
  if (banner) banner.remove();
  document.querySelectorAll(`.${args.pointerClass}`).forEach((el) => el.remove());
  const style = document.getElementById(args.styleId);
  if (style) style.remove();
  document.querySelectorAll(`[${args.savedStyleAttribute}]`).forEach((el) => {
    el.style.cssText = el.getAttribute(args.savedStyleAttribute);
    el.removeAttribute(args.savedStyleAttribute);
  });
  return true;
}
"""


@dataclass(frozen=True)
class LinkMatcher:
    """One strategy for finding a harvested anchor in a reloaded page."""

    name: str
    script: str


# Tried in order; the first hit wins and (re)stamps the identity attribute
MATCHERS: List[LinkMatcher] = [
    LinkMatcher("id", MATCH_BY_ID_SCRIPT),
    LinkMatcher("href", MATCH_BY_HREF_SCRIPT),
    LinkMatcher("text", MATCH_BY_TEXT_SCRIPT),
]


def _match_args(link: LinkRecord, config: CheckerConfig) -> Dict[str, Any]:
    return {
        "attribute": config.id_attribute,
        "id": link.id,
        "href": link.href,
        "text": link.text,
        "root": config.content_selector,
        "excluded": list(config.excluded_selectors),
    }


def _annotation_args(config: CheckerConfig) -> Dict[str, Any]:
    return {
        "attribute": config.id_attribute,
        "bannerId": BANNER_ID,
        "pointerClass": POINTER_CLASS,
        "styleId": STYLE_ID,
        "savedStyleAttribute": SAVED_STYLE_ATTRIBUTE,
    }


def screenshot_name(link: LinkRecord, outcome: CheckOutcome) -> str:
    """Deterministic file name from the link's 1-based position and status."""
    if isinstance(outcome, Errored):
        return f"broken-link-{link.position}-error.png"
    code = getattr(outcome, "status_code", None)
    label = "none" if code is None else code
    return f"broken-link-{link.position}-status-{label}.png"


def banner_status(outcome: CheckOutcome) -> str:
    """Failure description shown in the injected banner."""
    if isinstance(outcome, Errored):
        return f"ERROR: {outcome.message}"
    if isinstance(outcome, Broken) and outcome.status_code is None:
        return "Status: no response"
    return f"Status: {outcome.status}"


def reload_timeout_ms(outcome: CheckOutcome, config: CheckerConfig) -> int:
    """Origin reload timeout before a capture: short after a navigation error."""
    if isinstance(outcome, Errored):
        return config.capture_timeout_ms
    return config.origin_timeout_ms


async def locate_link(
    session: BrowserSession,
    link: LinkRecord,
    config: CheckerConfig,
    matchers: Optional[List[LinkMatcher]] = None,
) -> Optional[str]:
    """Find *link* in the current DOM; returns the matching strategy name."""
    args = _match_args(link, config)
    for matcher in matchers or MATCHERS:
        if await session.evaluate(matcher.script, args):
            if matcher is not MATCHERS[0]:
                LOGGER.debug("Re-identified %s by %s", link.id, matcher.name)
            return matcher.name
    return None


async def remove_annotations(session: BrowserSession, config: CheckerConfig) -> bool:
    """Strip banner, pointer, injected style and highlight; never raises."""
    try:
        await session.evaluate(REMOVE_ANNOTATIONS_SCRIPT, _annotation_args(config))
    except Exception as exc:
        LOGGER.warning("Could not remove highlight annotations: %s", exc)
        return False
    return True


async def capture_evidence(
    session: BrowserSession,
    origin_url: str,
    link: LinkRecord,
    outcome: CheckOutcome,
    config: Optional[CheckerConfig] = None,
) -> EvidenceResult:
    """Reload the origin, highlight the failed link and screenshot it.

    Returns ``not_found`` without taking a screenshot when no strategy can
    find the anchor again, and ``failed`` when any browser step breaks.
    ``restored`` tells the caller whether the origin page is loaded and
    clean afterwards.
    """
    cfg = config or CheckerConfig()
    restored = False
    try:
        await session.load(
            origin_url,
            wait_until="networkidle",
            timeout_ms=reload_timeout_ms(outcome, cfg),
        )
        restored = True
        if cfg.dismiss_popups:
            await dismiss_popups(session)

        matched_by = await locate_link(session, link, cfg)
        if matched_by is None:
            LOGGER.info("Could not find %s on %s to highlight", link.href, origin_url)
            return EvidenceResult(status="not_found", restored=True)

        path = Path(cfg.screenshot_dir) / screenshot_name(link, outcome)
        try:
            args = _annotation_args(cfg)
            args.update(
                {
                    "id": link.id,
                    "href": link.href,
                    "text": link.text,
                    "status": banner_status(outcome),
                }
            )
            await session.evaluate(ANNOTATE_SCRIPT, args)
            await session.wait_for_timeout(cfg.render_delay_ms)
            path.parent.mkdir(parents=True, exist_ok=True)
            await session.screenshot(str(path), full_page=True)
        finally:
            restored = await remove_annotations(session, cfg)

        return EvidenceResult(
            status="captured",
            screenshot=str(path),
            matched_by=matched_by,
            restored=restored,
        )
    except Exception as exc:
        LOGGER.warning("Could not capture screenshot for %s: %s", link.href, exc)
        return EvidenceResult(status="failed", restored=restored, error=str(exc))
