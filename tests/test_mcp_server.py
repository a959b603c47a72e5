from __future__ import annotations

import json

import pytest

import linkchecker
from linkchecker import mcp_server
from linkchecker.errors import OriginLoadError
from linkchecker.records import Broken, LinkRecord, LinkResult, Skipped, Working
from linkchecker.report import build_report

ORIGIN = "https://www.site.com/"

_check_links = getattr(mcp_server.check_links, "fn", mcp_server.check_links)


def _report():
    return build_report(
        [
            LinkResult(
                LinkRecord(id="link-0", href="https://www.site.com/a", text="A", index=0),
                Working(200),
            ),
            LinkResult(
                LinkRecord(id="link-1", href="mailto:x@site.com", text="Mail", index=1),
                Skipped(),
            ),
            LinkResult(
                LinkRecord(id="link-2", href="https://other.org/", text="O", index=2),
                Broken(500),
                "shots/broken-link-3-status-500.png",
            ),
        ]
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LINKCHECK_PROBE_TIMEOUT_MS", "LINKCHECK_EXCLUDE", "LINKCHECK_CONTENT_SELECTOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.asyncio
async def test_mcp_check_links_forwards_overrides(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured: dict = {}

    async def fake_check_links_async(url, *, config=None, on_result=None):
        captured["url"] = url
        captured["config"] = config
        return _report()

    monkeypatch.setattr(linkchecker, "check_links_async", fake_check_links_async)

    payload = json.loads(
        await _check_links(
            url=ORIGIN,
            content_selector="main",
            excluded_selectors=["nav"],
            probe_timeout_ms=2500,
            capture_screenshots=False,
        )
    )

    config = captured["config"]
    assert captured["url"] == ORIGIN
    assert config.content_selector == "main"
    assert config.excluded_selectors == ["nav"]
    assert config.probe_timeout_ms == 2500
    assert config.capture_screenshots is False

    assert payload["url"] == ORIGIN
    assert payload["summary"] == {
        "total": 3,
        "working": 2,
        "broken": 1,
        "skipped": 1,
        "errored": 0,
        "screenshots": 1,
    }
    assert payload["total"] == 3
    assert payload["broken"][0]["status"] == 500
    assert payload["broken"][0]["scope"] == "external"
    assert payload["working"][1]["status"] == "Skipped - Special Protocol"


@pytest.mark.asyncio
async def test_mcp_check_links_writes_report(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> None:
    async def fake_check_links_async(url, *, config=None, on_result=None):
        return _report()

    monkeypatch.setattr(linkchecker, "check_links_async", fake_check_links_async)
    report_path = tmp_path / "out" / "report.json"

    await _check_links(url=ORIGIN, report_path=str(report_path))

    data = json.loads(report_path.read_text(encoding="utf-8"))
    assert list(data) == ["working", "broken", "total"]


@pytest.mark.asyncio
async def test_mcp_check_links_reports_origin_failure(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_check_links_async(url, *, config=None, on_result=None):
        raise OriginLoadError(url, "Timeout 30000ms exceeded")

    monkeypatch.setattr(linkchecker, "check_links_async", fake_check_links_async)

    payload = json.loads(await _check_links(url=ORIGIN))

    assert payload == {
        "error": f"Failed to load origin page {ORIGIN}: Timeout 30000ms exceeded",
        "url": ORIGIN,
    }


@pytest.mark.asyncio
async def test_mcp_check_links_reports_unexpected_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_check_links_async(url, *, config=None, on_result=None):
        raise ValueError("boom")

    monkeypatch.setattr(linkchecker, "check_links_async", fake_check_links_async)

    payload = json.loads(await _check_links(url=ORIGIN))
    assert payload["error"] == "Unexpected error: boom"
