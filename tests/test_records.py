"""Tests for linkchecker.records module."""

from __future__ import annotations

import dataclasses

import pytest

from linkchecker.records import (
    BODY_LOCATION,
    Broken,
    CrawlReport,
    Errored,
    LinkRecord,
    LinkResult,
    Skipped,
    Working,
)


class TestLinkRecord:
    def test_defaults(self):
        record = LinkRecord(id="link-0", href="https://a.test/", text="A", index=0)
        assert record.location == BODY_LOCATION == "Body"
        assert record.position == 1

    def test_is_immutable(self):
        record = LinkRecord(id="link-0", href="https://a.test/", text="A", index=0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.href = "https://b.test/"


class TestOutcomes:
    def test_skipped(self):
        assert Skipped().status == "Skipped - Special Protocol"
        assert Skipped().is_failure is False

    def test_working(self):
        assert Working(301).status == 301
        assert Working(301).is_failure is False

    def test_broken_with_code(self):
        assert Broken(404).status == 404
        assert Broken(404).is_failure is True

    def test_broken_without_response(self):
        assert Broken().status_code is None
        assert Broken().status == "No Response"

    def test_errored(self):
        outcome = Errored("net::ERR_NAME_NOT_RESOLVED")
        assert outcome.status == "Error"
        assert outcome.is_failure is True


class TestLinkResult:
    def test_outcome_is_associated_not_written(self):
        record = LinkRecord(id="link-0", href="https://a.test/", text="A", index=0)
        result = LinkResult(record, Broken(500), "shots/broken-link-1-status-500.png")
        assert result.record is record
        assert not hasattr(record, "outcome")


class TestCrawlReport:
    def test_is_immutable(self):
        report = CrawlReport(working=(), broken=(), total=0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.total = 3
