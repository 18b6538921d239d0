# src/frontload/engine/flush.py
"""Flush engine: run a slot's queued fetches and wait for all to settle.

Algorithm for one slot:
1. Snapshot the slot's requests.
2. Re-filter: on the first client render, a request runs only if
   no_server_render is set for the flush or for the request itself;
   everything else was already satisfied by the server render.
3. Start every surviving fetch, then reset the slot BEFORE awaiting
   anything. A push that arrives while this batch is in flight lands in a
   fresh batch instead of being absorbed into (or lost by) this one.
4. Join all started fetches with a settle adapter that turns exceptions
   into SettledFailure sentinels. The join completes once every fetch has
   settled, whatever the individual outcomes.

Failures are never surfaced or aggregated here. A fetch function owns its
own error handling (e.g. writing an error marker into the state the tree
reads from).
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from frontload.contracts.requests import LoadRequest
from frontload.contracts.results import FlushOutcome, SettledFailure
from frontload.engine.registry import QueueRegistry

slog = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FlushOptions:
    """Render-context flags for one flush.

    Attributes:
        first_client_render: True while flushing during the first client
            render, before the provider's latch has flipped
        no_server_render: Provider-level no_server_render flag
        with_logging: Log requests re-run on the first client render
        name: Provider name for log output
    """

    first_client_render: bool = False
    no_server_render: bool = False
    with_logging: bool = False
    name: str | None = None


@dataclass(frozen=True, slots=True)
class _LaunchedBatch:
    """Fetches started from one slot, not yet awaited."""

    started: tuple[tuple[Awaitable[Any], str], ...]
    deferred: int


async def _already_settled(value: Any) -> Any:
    return value


def _start(request: LoadRequest) -> Awaitable[Any]:
    """Start one fetch and return something awaitable for its settlement.

    A synchronous raise counts as a rejection and a plain return value as an
    immediate fulfilment, so every request contributes exactly one awaitable.
    """
    try:
        result = request.execute()
    except Exception as exc:
        slog.debug(
            "Frontload fetch raised before returning",
            node=request.label,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _already_settled(SettledFailure(exception=exc, label=request.label))
    if inspect.isawaitable(result):
        return result
    return _already_settled(result)


async def _settle(awaitable: Awaitable[Any], label: str) -> Any:
    try:
        return await awaitable
    except asyncio.CancelledError as exc:
        # Only a cancel aimed at this settle task (the flush being cancelled)
        # propagates; a fetch cancelled from inside still counts as settled.
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            raise
        slog.debug("Frontload fetch cancelled", node=label)
        return SettledFailure(exception=exc, label=label)
    except Exception as exc:
        slog.debug(
            "Frontload fetch rejected",
            node=label,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return SettledFailure(exception=exc, label=label)


def _should_run(request: LoadRequest, options: FlushOptions) -> bool:
    if not options.first_client_render:
        return True
    return options.no_server_render or request.options.no_server_render


def _launch(registry: QueueRegistry, index: int, options: FlushOptions) -> _LaunchedBatch:
    """Steps 1-3: snapshot, filter, start, reset. Runs synchronously."""
    requests = registry.requests(index)
    started: list[tuple[Awaitable[Any], str]] = []
    deferred = 0

    for request in requests:
        if not _should_run(request, options):
            deferred += 1
            continue
        if options.first_client_render and options.with_logging:
            scope = "globally" if options.no_server_render else "for this node"
            slog.info(
                "First client render: running frontload fn because no_server_render is set",
                provider=options.name,
                node=request.label,
                scope=scope,
            )
        started.append((_start(request), request.label))

    registry.reset(index)
    return _LaunchedBatch(started=tuple(started), deferred=deferred)


async def _join(batches: Iterable[_LaunchedBatch]) -> FlushOutcome:
    batches = tuple(batches)
    pending = [_settle(awaitable, label) for batch in batches for awaitable, label in batch.started]
    settled = await asyncio.gather(*pending)
    outcome = FlushOutcome(settled=len(settled))
    for batch in batches:
        outcome += FlushOutcome(executed=len(batch.started), deferred=batch.deferred)
    return outcome


async def flush(
    registry: QueueRegistry,
    index: int | None,
    options: FlushOptions | None = None,
) -> FlushOutcome:
    """Flush one slot, or every slot when index is None.

    Flushing every slot starts all of them concurrently, tears the registry
    down with reset_all(), and then waits for the combined batch.

    Args:
        registry: Registry holding the slot(s)
        index: Slot to flush, or None for all slots
        options: Render-context flags (defaults to a server flush)

    Returns:
        FlushOutcome with executed/deferred/settled counts. Never raises
        because of a failed fetch.
    """
    if options is None:
        options = FlushOptions()

    if index is None:
        batches = [_launch(registry, slot_index, options) for slot_index in registry.slot_indices()]
        registry.reset_all()
        return await _join(batches)

    return await _join([_launch(registry, index, options)])
