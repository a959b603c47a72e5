"""Tests for linkchecker.cli_output module."""

from __future__ import annotations

from linkchecker.cli_output import format_progress, format_summary
from linkchecker.records import (
    Broken,
    Errored,
    LinkRecord,
    LinkResult,
    Skipped,
    Working,
)
from linkchecker.report import build_report

RECORD = LinkRecord(id="link-0", href="https://site.test/a", text="Docs", index=0)


class TestFormatProgress:
    def test_working(self):
        text = format_progress(1, 3, LinkResult(RECORD, Working(200)))
        assert text == "[1/3] Checking: https://site.test/a\n  ✓ Working (200)"

    def test_skipped(self):
        text = format_progress(2, 3, LinkResult(RECORD, Skipped()))
        assert "✓ Skipped (special protocol)" in text

    def test_broken_with_screenshot(self):
        result = LinkResult(RECORD, Broken(404), "shots/broken-link-1-status-404.png")
        text = format_progress(1, 1, result)
        assert "✗ Broken (404)" in text
        assert "Screenshot saved: broken-link-1-status-404.png" in text

    def test_error(self):
        text = format_progress(1, 1, LinkResult(RECORD, Errored("Timeout 15000ms")))
        assert "✗ Error: Timeout 15000ms" in text


class TestFormatSummary:
    def test_lists_broken_links(self):
        report = build_report(
            [
                LinkResult(RECORD, Working(200)),
                LinkResult(
                    LinkRecord(id="link-1", href="https://x.test/", text="X", index=1),
                    Errored("net::ERR_CONNECTION_REFUSED"),
                ),
            ]
        )
        text = format_summary(report)
        assert "Total Links: 2" in text
        assert "Working Links: 1" in text
        assert "Broken Links: 1" in text
        assert "BROKEN LINKS DETAILS:" in text
        assert "1. X" in text
        assert "   Location: Body" in text
        assert "   Status: Error" in text
        assert "   Error: net::ERR_CONNECTION_REFUSED" in text

    def test_no_details_when_all_working(self):
        report = build_report([LinkResult(RECORD, Working(200))])
        assert "BROKEN LINKS DETAILS" not in format_summary(report)
