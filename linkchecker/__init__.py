"""Browser-based checker for the links in a page's body content.

This package loads a page in Chromium, follows every link found in its
body (links inside header and footer are ignored), and reports which
links work and which are broken. Each broken link gets a full-page
screenshot with the link highlighted.

Example usage:

    from linkchecker import check_links_async, write_report

    report = await check_links_async("https://example.com")
    print(f"{len(report.broken)} of {report.total} links are broken")
    write_report(report, "link-check-report.json")

    # Synchronous
    from linkchecker import CheckerConfig, check_links

    config = CheckerConfig(excluded_selectors=["header", "footer", "nav"])
    report = check_links("https://example.com", config=config)
"""

from __future__ import annotations

from .checker import CheckState, LinkChecker, check_links, check_links_async
from .classify import LinkKind, classify
from .config import CheckerConfig
from .errors import LinkCheckError, OriginLoadError, ReportWriteError
from .evidence import EvidenceResult, capture_evidence
from .harvest import harvest_links
from .probe import probe
from .records import (
    Broken,
    CheckOutcome,
    CrawlReport,
    Errored,
    LinkRecord,
    LinkResult,
    Skipped,
    Working,
)
from .report import build_report, report_to_dict, write_report
from .session import BrowserSession, PlaywrightSession, open_session

__all__ = [
    # Records
    "LinkRecord",
    "LinkResult",
    "CrawlReport",
    "CheckOutcome",
    "Skipped",
    "Working",
    "Broken",
    "Errored",
    # Errors
    "LinkCheckError",
    "OriginLoadError",
    "ReportWriteError",
    # Components
    "harvest_links",
    "classify",
    "LinkKind",
    "probe",
    "capture_evidence",
    "EvidenceResult",
    "build_report",
    "report_to_dict",
    "write_report",
    # Session
    "BrowserSession",
    "PlaywrightSession",
    "open_session",
    # Orchestration
    "CheckerConfig",
    "CheckState",
    "LinkChecker",
    "check_links",
    "check_links_async",
    # MCP Server
    "mcp",
]


def get_mcp_server():
    """Get the MCP server instance (lazy import to avoid dependency if not needed)."""
    from .mcp_server import mcp

    return mcp


# Lazy import for mcp to avoid requiring fastmcp if not used
def __getattr__(name):
    if name == "mcp":
        from .mcp_server import mcp

        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
