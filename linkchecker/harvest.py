"""Link harvesting from the loaded origin page."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import CheckerConfig
from .records import NO_TEXT, LinkRecord
from .session import BrowserSession

LOGGER = logging.getLogger(__name__)

# Every a[href] under the content root, with the excluded regions it sits in
SCAN_ANCHORS_SCRIPT = """
({ root, excluded }) => {
  const container = document.querySelector(root) || document.body;
  if (!container) {
    return [];
  }
  return Array.from(container.querySelectorAll('a[href]')).map((a, position) => ({
    position,
    href: a.href,
    rawHref: a.getAttribute('href') || '',
    text: (a.innerText || '').trim(),
    ariaLabel: a.getAttribute('aria-label'),
    title: a.getAttribute('title'),
    regions: excluded.filter((selector) => {
      try {
        return a.closest(selector) !== null;
      } catch (e) {
        return false;
      }
    }),
  }));
}
"""

MARK_ANCHORS_SCRIPT = """
({ root, attribute, marks }) => {
  const container = document.querySelector(root) || document.body;
  if (!container) {
    return 0;
  }
  const anchors = container.querySelectorAll('a[href]');
  let marked = 0;
  for (const [position, id] of marks) {
    const anchor = anchors[position];
    if (anchor) {
      anchor.setAttribute(attribute, id);
      marked += 1;
    }
  }
  return marked;
}
"""


def link_label(anchor: Dict[str, Any]) -> str:
    """Visible text, else aria-label, else title, else the no-text marker."""
    for key in ("text", "ariaLabel", "title"):
        value = (anchor.get(key) or "").strip()
        if value:
            return value
    return NO_TEXT


def link_href(anchor: Dict[str, Any]) -> str:
    """Resolved href, keeping empty and fragment-only references as written."""
    raw = (anchor.get("rawHref") or "").strip()
    if raw == "" or raw.startswith("#"):
        return raw
    return anchor.get("href") or raw


def select_links(
    anchors: Iterable[Dict[str, Any]], *, id_prefix: str
) -> List[Tuple[int, LinkRecord]]:
    """Drop anchors inside excluded regions and assign identities.

    Returns ``(position, record)`` pairs where *position* is the anchor's
    index among all scanned anchors, needed to stamp the live element.
    """
    selected: List[Tuple[int, LinkRecord]] = []
    for anchor in anchors:
        if anchor.get("regions"):
            continue
        index = len(selected)
        record = LinkRecord(
            id=f"{id_prefix}{index}",
            href=link_href(anchor),
            text=link_label(anchor),
            index=index,
        )
        selected.append((int(anchor["position"]), record))
    return selected


async def harvest_links(
    session: BrowserSession, config: Optional[CheckerConfig] = None
) -> List[LinkRecord]:
    """Collect the checkable links of the currently loaded page.

    Must run before any navigation away from the origin page: the identity
    attribute is written onto the live elements so evidence capture can
    find them again.
    """
    cfg = config or CheckerConfig()
    anchors = await session.evaluate(
        SCAN_ANCHORS_SCRIPT,
        {"root": cfg.content_selector, "excluded": list(cfg.excluded_selectors)},
    )
    anchors = list(anchors or [])
    selected = select_links(anchors, id_prefix=cfg.id_prefix)

    excluded = len(anchors) - len(selected)
    if excluded:
        LOGGER.debug("Excluded %d link(s) inside %s", excluded, cfg.excluded_selectors)

    if selected:
        marked = await session.evaluate(
            MARK_ANCHORS_SCRIPT,
            {
                "root": cfg.content_selector,
                "attribute": cfg.id_attribute,
                "marks": [[position, record.id] for position, record in selected],
            },
        )
        if marked != len(selected):
            LOGGER.warning(
                "Marked %s of %d harvested links; page changed during harvest?",
                marked,
                len(selected),
            )

    return [record for _, record in selected]
