"""Output and formatting helpers for the linkcheck command."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .records import Broken, CrawlReport, Errored, LinkResult, Skipped, Working


def format_progress(position: int, total: int, result: LinkResult) -> str:
    """Progress lines for one checked link, with a pass/fail marker."""
    lines = [f"[{position}/{total}] Checking: {result.record.href}"]
    outcome = result.outcome
    if isinstance(outcome, Skipped):
        lines.append("  ✓ Skipped (special protocol)")
    elif isinstance(outcome, Working):
        lines.append(f"  ✓ Working ({outcome.status_code})")
    elif isinstance(outcome, Broken):
        lines.append(f"  ✗ Broken ({outcome.status})")
    elif isinstance(outcome, Errored):
        lines.append(f"  ✗ Error: {outcome.message}")
    if result.screenshot:
        lines.append(f"  \U0001f4f8 Screenshot saved: {Path(result.screenshot).name}")
    return "\n".join(lines)


def print_progress(position: int, total: int, result: LinkResult) -> None:
    print(format_progress(position, total, result), flush=True)


def format_summary(report: CrawlReport) -> str:
    """Aggregate counts followed by an itemized list of broken links."""
    lines: List[str] = [
        "",
        "=" * 60,
        "SUMMARY REPORT",
        "=" * 60,
        f"Total Links: {report.total}",
        f"Working Links: {len(report.working)}",
        f"Broken Links: {len(report.broken)}",
    ]

    if report.broken:
        lines.extend(["", "-" * 60, "BROKEN LINKS DETAILS:", "-" * 60])
        for number, result in enumerate(report.broken, 1):
            record = result.record
            lines.append("")
            lines.append(f"{number}. {record.text}")
            lines.append(f"   URL: {record.href}")
            lines.append(f"   Location: {record.location}")
            lines.append(f"   Status: {result.outcome.status}")
            if isinstance(result.outcome, Errored):
                lines.append(f"   Error: {result.outcome.message}")
            if result.screenshot:
                lines.append(f"   Screenshot: {result.screenshot}")

    return "\n".join(lines)
