# tests/unit/contracts/test_results.py
"""Tests for result and diagnostic types."""

import pytest

from frontload.contracts import DepthExceeded, FlushOutcome, PushAction, PushDecision
from frontload.contracts.requests import LoadRequest
from frontload.core.config import NodeOptions


def _request() -> LoadRequest:
    return LoadRequest(execute=lambda: None, options=NodeOptions(), label="Article")


class TestPushDecision:
    def test_skip_carries_no_request(self) -> None:
        decision = PushDecision.skip("on_update is disabled")

        assert decision.action is PushAction.SKIP
        assert decision.request is None
        assert decision.reason == "on_update is disabled"

    def test_enqueue(self) -> None:
        request = _request()

        decision = PushDecision.enqueue(request, "queued for server flush")

        assert decision.action is PushAction.ENQUEUE
        assert decision.request is request

    def test_execute_now(self) -> None:
        request = _request()

        assert PushDecision.execute_now(request, "first client render done").action is PushAction.EXECUTE_NOW


class TestFlushOutcome:
    def test_defaults_to_zero(self) -> None:
        assert FlushOutcome() == FlushOutcome(executed=0, deferred=0, settled=0)

    def test_addition(self) -> None:
        total = FlushOutcome(executed=2, deferred=1, settled=2) + FlushOutcome(executed=3, settled=3)

        assert total == FlushOutcome(executed=5, deferred=1, settled=5)


class TestDepthExceeded:
    def test_message_names_budget_and_pending(self) -> None:
        diagnostic = DepthExceeded(max_passes=2, pending=1)

        assert diagnostic.message.startswith("max_passes (2) has been reached, yet there are still 1 frontload node(s)")
        assert "Increase max_passes" in diagnostic.message

    def test_frozen(self) -> None:
        diagnostic = DepthExceeded(max_passes=2, pending=1)

        with pytest.raises(AttributeError):
            diagnostic.pending = 0  # type: ignore[misc]
