"""MCP Server for the link checker.

Provides one tool, ``check_links``, that checks every body link of a page
and returns the JSON report with a summary.

Supports both STDIO and HTTP transports.

Usage:
    # STDIO (for desktop MCP clients)
    python -m linkchecker.mcp_server

    # HTTP (for remote access)
    python -m linkchecker.mcp_server --transport http --port 8000

    # Or via FastMCP CLI
    fastmcp run linkchecker/mcp_server.py:mcp --transport http --port 8000

Environment Variables:
    LINKCHECK_PROBE_TIMEOUT_MS: Default per-link navigation timeout
    LINKCHECK_SCREENSHOT_DIR: Where failure screenshots are written
    LINKCHECK_HEADLESS: Run the browser headless (default: true)
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from .config import CheckerConfig
from .errors import LinkCheckError
from .report import report_to_dict, summarize, write_report

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
LOGGER = logging.getLogger(__name__)

load_dotenv()

mcp = FastMCP(
    name="Link Checker",
    instructions="""
    A link checker that loads a page in a real browser, follows every link
    in its body content (header and footer links are ignored by default),
    and reports which links work and which are broken.

    Tool:
       - check_links: Check all body links of one page

    Broken links get an annotated full-page screenshot on the server's
    filesystem; the screenshot path is included in the report entry.
    """,
)


def _format_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


@mcp.tool
async def check_links(
    url: str,
    content_selector: Optional[str] = None,
    excluded_selectors: Optional[List[str]] = None,
    probe_timeout_ms: Optional[int] = None,
    capture_screenshots: bool = True,
    report_path: Optional[str] = None,
):
    """
    Check every link in a page's body content.

    Args:
        url: The page whose links are checked
        content_selector: CSS selector of the region to harvest links from (default: body)
        excluded_selectors: Links nested under these selectors are ignored
            (default: ["header", "footer"])
        probe_timeout_ms: Per-link navigation timeout in milliseconds (default: 15000)
        capture_screenshots: Save an annotated screenshot per broken link (default: true)
        report_path: Optional path to also write the JSON report to

    Returns:
        JSON string with:
        - checked_at: Timestamp of the run
        - url: The checked page
        - summary: Counts of total, working, broken, skipped, errored links
        - working / broken: Link entries with href, text, status, screenshot
        - total: Number of harvested links

    Examples:
        # Basic check
        check_links(url="https://example.com")

        # Only links inside <main>, ignore navigation too
        check_links(url="https://example.com", content_selector="main",
                    excluded_selectors=["header", "footer", "nav"])
    """
    from . import check_links_async

    config = CheckerConfig.from_env()
    overrides: Dict[str, Any] = {"capture_screenshots": capture_screenshots}
    if content_selector:
        overrides["content_selector"] = content_selector
    if excluded_selectors is not None:
        overrides["excluded_selectors"] = list(excluded_selectors)
    if probe_timeout_ms is not None and probe_timeout_ms > 0:
        overrides["probe_timeout_ms"] = probe_timeout_ms
    config = replace(config, **overrides)

    LOGGER.info("Checking links on %s", url)

    try:
        report = await check_links_async(url, config=config)
        if report_path:
            write_report(report, report_path, origin_url=url)
    except LinkCheckError as exc:
        LOGGER.error("Link check failed: %s", exc)
        return json.dumps({"error": str(exc), "url": url}, ensure_ascii=False)
    except Exception as exc:
        error_msg = f"Unexpected error: {exc}"
        LOGGER.error(error_msg)
        return json.dumps({"error": error_msg, "url": url}, ensure_ascii=False)

    summary = summarize(report)
    LOGGER.info(
        "Completed: %d links (%d working, %d broken)",
        summary["total"],
        summary["working"],
        summary["broken"],
    )

    result: Dict[str, Any] = {
        "checked_at": _format_timestamp(),
        "url": url,
        "summary": summary,
    }
    result.update(report_to_dict(report, origin_url=url))
    return json.dumps(result, indent=2, ensure_ascii=False)


# =============================================================================
# CLI ENTRY POINT
# =============================================================================


def main():
    """CLI entry point for running the MCP server."""
    parser = argparse.ArgumentParser(
        description="Run the link checker MCP server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # STDIO transport (default)
    python -m linkchecker.mcp_server

    # HTTP transport (for remote access)
    python -m linkchecker.mcp_server --transport http --port 8000

    # Custom host/port
    python -m linkchecker.mcp_server --transport http --host 0.0.0.0 --port 9000
""",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to for HTTP transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to for HTTP transport (default: 8000)",
    )

    args = parser.parse_args()

    if args.transport == "http":
        LOGGER.info("Starting MCP server on http://%s:%d/mcp", args.host, args.port)
        mcp.run(transport="http", host=args.host, port=args.port)
    else:
        LOGGER.info("Starting MCP server with STDIO transport")
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
