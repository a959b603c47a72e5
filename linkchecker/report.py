"""Aggregation and persistence of link check results."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

import tldextract

from .errors import ReportWriteError
from .records import CrawlReport, Errored, LinkResult, Skipped

LOGGER = logging.getLogger(__name__)

# Bundled public suffix snapshot only; report building never touches the network
_EXTRACTOR = tldextract.TLDExtract(suffix_list_urls=())


def build_report(results: Iterable[LinkResult]) -> CrawlReport:
    """Partition results into working and broken, preserving order.

    Skipped links count as working: they are not failures.
    """
    working: List[LinkResult] = []
    broken: List[LinkResult] = []
    for result in results:
        if result.outcome.is_failure:
            broken.append(result)
        else:
            working.append(result)
    return CrawlReport(
        working=tuple(working),
        broken=tuple(broken),
        total=len(working) + len(broken),
    )


def _normalize_host(host: Optional[str]) -> str:
    if not host:
        return ""
    return host.split(":")[0].lower()


@lru_cache(maxsize=256)
def _registrable_domain(host: str) -> Optional[str]:
    """Extract the registrable domain from a hostname."""
    if not host:
        return None
    extracted = _EXTRACTOR(host)
    if not extracted.domain or not extracted.suffix:
        return host
    return f"{extracted.domain}.{extracted.suffix}"


def link_scope(href: str, origin_url: str) -> Optional[str]:
    """``internal`` when *href* shares the origin's registrable domain.

    Returns None for links without a host (mailto:, fragments, ...).
    """
    target = _normalize_host(urlparse(href).netloc)
    if not target:
        return None
    origin = _normalize_host(urlparse(origin_url).netloc)
    if _registrable_domain(target) == _registrable_domain(origin):
        return "internal"
    return "external"


def result_to_dict(
    result: LinkResult, origin_url: Optional[str] = None
) -> Dict[str, Any]:
    """Convert one link result to a JSON-serializable dict with fixed key order."""
    record = result.record
    entry: Dict[str, Any] = {
        "href": record.href,
        "text": record.text,
        "location": record.location,
        "index": record.index,
        "id": record.id,
        "status": result.outcome.status,
    }
    if isinstance(result.outcome, Errored):
        entry["error"] = result.outcome.message
    if result.screenshot:
        entry["screenshot"] = result.screenshot
    if origin_url:
        scope = link_scope(record.href, origin_url)
        if scope:
            entry["scope"] = scope
    return entry


def report_to_dict(
    report: CrawlReport, origin_url: Optional[str] = None
) -> Dict[str, Any]:
    """Structural dump of a report: ``working``, ``broken``, ``total``."""
    return {
        "working": [result_to_dict(r, origin_url) for r in report.working],
        "broken": [result_to_dict(r, origin_url) for r in report.broken],
        "total": report.total,
    }


def summarize(report: CrawlReport) -> Dict[str, int]:
    """Aggregate counts used by the CLI summary and the MCP tool."""
    return {
        "total": report.total,
        "working": len(report.working),
        "broken": len(report.broken),
        "skipped": sum(1 for r in report.working if isinstance(r.outcome, Skipped)),
        "errored": sum(1 for r in report.broken if isinstance(r.outcome, Errored)),
        "screenshots": sum(1 for r in report.broken if r.screenshot),
    }


def write_report(
    report: CrawlReport, path: str, origin_url: Optional[str] = None
) -> Path:
    """Write the report as JSON, replacing any previous file.

    Raises:
        ReportWriteError: If the file cannot be written.
    """
    target = Path(path).expanduser()
    payload = json.dumps(
        report_to_dict(report, origin_url), indent=2, ensure_ascii=False
    )
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise ReportWriteError(f"Failed to write report to {target}: {exc}") from exc
    LOGGER.info("Wrote report to %s", target)
    return target
