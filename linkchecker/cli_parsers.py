"""Argument parser construction for the linkcheck command."""

from __future__ import annotations

import argparse
from typing import List, Optional

EPILOG = """\
Examples:
  # Check all body links of a page
  linkcheck https://example.com

  # Custom report and screenshot locations
  linkcheck https://example.com --report out/report.json --screenshots out/shots

  # Also ignore links inside navigation and sidebars
  linkcheck https://example.com --exclude header --exclude footer --exclude nav --exclude aside

  # Only check links inside <main>, with a visible browser
  linkcheck https://example.com --content-selector main --headed

  # Print the JSON report to stdout
  linkcheck https://example.com --json

Environment Variables:
  LINKCHECK_URL               Default target URL when none is given
  LINKCHECK_PROBE_TIMEOUT_MS  Per-link navigation timeout (default: 15000)
  LINKCHECK_REPORT_PATH       Report file path
  LINKCHECK_SCREENSHOT_DIR    Screenshot directory
  LINKCHECK_EXCLUDE           Comma-separated excluded region selectors
  LINKCHECK_HEADLESS          true/false
"""


def build_check_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkcheck",
        description=(
            "Check every link in a page's body content and screenshot "
            "the broken ones."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="Page whose links are checked (default: $LINKCHECK_URL or https://example.com)",
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Report JSON path (default: ./link-check-report.json)",
    )
    parser.add_argument(
        "--screenshots",
        type=str,
        default=None,
        help="Directory for broken-link screenshots (default: ./broken-link-screenshots)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Per-link navigation timeout in milliseconds (default: 15000)",
    )

    region_group = parser.add_argument_group("Link regions")
    region_group.add_argument(
        "--content-selector",
        type=str,
        default=None,
        help="CSS selector of the region whose links are checked (default: body)",
    )
    region_group.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="SELECTOR",
        help="Exclude links nested under SELECTOR; repeatable "
             "(default: header, footer)",
    )

    browser_group = parser.add_argument_group("Browser")
    browser_group.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window while checking",
    )
    browser_group.add_argument(
        "--dismiss-popups",
        action="store_true",
        help="Try to close cookie banners and modals after each page load",
    )
    browser_group.add_argument(
        "--no-screenshots",
        action="store_true",
        help="Record failures without capturing screenshots",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the JSON report to stdout instead of the summary",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def parse_check_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_check_parser().parse_args(argv)
