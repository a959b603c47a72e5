"""Tests for linkchecker.popups module."""

from __future__ import annotations

import pytest

from linkchecker.popups import CLOSE_SELECTORS, DISMISS_POPUPS_SCRIPT, dismiss_popups


class TestDismissPopups:
    @pytest.mark.asyncio
    async def test_clicks_with_settle_waits(self, make_session):
        session = make_session()
        assert await dismiss_popups(session) is True
        assert session.waits == [500, 300]
        script, arg = session.evaluations[0]
        assert script == DISMISS_POPUPS_SCRIPT
        assert arg == CLOSE_SELECTORS

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, make_session):
        session = make_session(failing_scripts=[DISMISS_POPUPS_SCRIPT])
        assert await dismiss_popups(session) is False
