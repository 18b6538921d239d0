# tests/property/engine/test_flush_properties.py
"""Property-based tests for the flush engine.

FLUSH INVARIANTS:
1. Every started fetch settles exactly once, whatever mix of outcomes
2. A flush never raises because a fetch failed
3. The flushed slot is empty afterwards, except for pushes made while
   the batch was in flight (those land in a fresh batch)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from hypothesis import given
from hypothesis import strategies as st

from frontload.contracts.requests import LoadRequest
from frontload.core.config import NodeOptions
from frontload.engine.flush import flush
from frontload.engine.registry import QueueRegistry

OUTCOMES = ("resolve", "reject", "raise_sync", "plain_value")


def _fetch(outcome: str, finished: list[str], label: str) -> Callable[[], Any]:
    async def resolve() -> str:
        await asyncio.sleep(0)
        finished.append(label)
        return label

    async def reject() -> None:
        await asyncio.sleep(0)
        finished.append(label)
        raise RuntimeError(label)

    def raise_sync() -> None:
        finished.append(label)
        raise ValueError(label)

    def plain_value() -> str:
        finished.append(label)
        return label

    return {"resolve": resolve, "reject": reject, "raise_sync": raise_sync, "plain_value": plain_value}[outcome]


@given(outcomes=st.lists(st.sampled_from(OUTCOMES), max_size=20))
def test_every_fetch_settles(outcomes: list[str]) -> None:
    registry = QueueRegistry()
    index = registry.allocate()
    finished: list[str] = []
    for position, outcome in enumerate(outcomes):
        label = f"{outcome}-{position}"
        registry.append(index, LoadRequest(execute=_fetch(outcome, finished, label), options=NodeOptions(), label=label))

    result = asyncio.run(flush(registry, index))

    assert result.executed == len(outcomes)
    assert result.settled == len(outcomes)
    assert sorted(finished) == sorted(f"{outcome}-{position}" for position, outcome in enumerate(outcomes))
    assert registry.size(index) == 0


@given(
    batch=st.integers(min_value=1, max_value=10),
    late_pushes=st.integers(min_value=0, max_value=10),
)
def test_pushes_during_flush_land_in_next_batch(batch: int, late_pushes: int) -> None:
    registry = QueueRegistry()
    index = registry.allocate()
    late = LoadRequest(execute=lambda: None, options=NodeOptions(), label="late")

    def pushing_fetch(should_push: bool) -> Callable[[], Any]:
        async def fetch() -> None:
            await asyncio.sleep(0)
            if should_push:
                registry.append(index, late)

        return fetch

    for position in range(batch):
        should_push = position < late_pushes
        registry.append(index, LoadRequest(execute=pushing_fetch(should_push), options=NodeOptions(), label="early"))

    result = asyncio.run(flush(registry, index))

    assert result.settled == batch
    assert registry.requests(index) == (late,) * min(batch, late_pushes)


@given(slot_sizes=st.lists(st.integers(min_value=0, max_value=5), min_size=1, max_size=6))
def test_flush_all_tears_down_registry(slot_sizes: list[int]) -> None:
    registry = QueueRegistry()
    for size in slot_sizes:
        index = registry.allocate()
        for _ in range(size):
            registry.append(index, LoadRequest(execute=lambda: None, options=NodeOptions(), label="node"))

    result = asyncio.run(flush(registry, None))

    assert result.executed == sum(slot_sizes)
    assert len(registry) == 0
    assert registry.allocate() == 0
