# src/frontload/engine/coordinator.py
"""Render-pass coordinator for server (non-interactive) renders.

A loader nested inside another loader's output only appears once the outer
loader's data has arrived, so one dry-run render is not enough to discover
every fetch. The coordinator alternates dry-run renders and flushes until a
pass discovers nothing new (the fixpoint), then performs the final render.
max_passes bounds the nesting depth it will resolve.

State machine:
    RENDERING  -> renderer(True); count slot 0; nothing new -> FINALIZING,
                  otherwise -> FLUSHING
    FLUSHING   -> await flush of the whole registry; budget left -> RENDERING,
                  budget exhausted -> final render, diagnostic if loads are
                  still pending -> DONE
    FINALIZING -> reset, renderer(False), reset -> DONE

The loop has exactly one suspension point per pass (the flush await) and
performs at most max_passes + 1 renderer calls.

Slot 0 is the slot of the provider created by the current render: the
registry is torn down between renders, and only one server render may be
in flight against a registry at a time.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import structlog

from frontload.contracts.enums import CoordinatorState
from frontload.contracts.events import DepthExceeded
from frontload.contracts.results import PassRecord
from frontload.core.config import RenderSettings
from frontload.engine.clock import DEFAULT_CLOCK, Clock
from frontload.engine.flush import FlushOptions, flush
from frontload.engine.registry import DEFAULT_REGISTRY, QueueRegistry

slog = structlog.get_logger(__name__)

T = TypeVar("T")

Renderer = Callable[[bool], T]

# Slot owned by the root provider of the render being coordinated
ROOT_SLOT = 0


class RenderPassCoordinator:
    """Drives dry-run renders and flushes to a fixpoint.

    Example:
        coordinator = RenderPassCoordinator(RenderSettings(max_passes=3), registry=registry)
        html = await coordinator.run(render)
        coordinator.passes  # [PassRecord(...), ...]
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        *,
        registry: QueueRegistry | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialise the coordinator.

        Args:
            settings: Pass budget, logging, diagnostic callback
            registry: Registry the renderer's providers allocate from
            clock: Clock used to time flushes. Inject MockClock in tests.
        """
        self._settings = settings if settings is not None else RenderSettings()
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._state = CoordinatorState.DONE
        self._passes: list[PassRecord] = []
        self._log = slog.bind(max_passes=self._settings.max_passes)

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def passes(self) -> tuple[PassRecord, ...]:
        """Per-pass records of the most recent run."""
        return tuple(self._passes)

    async def run(self, renderer: Renderer[T]) -> T:
        """Render to a fixpoint (or the pass budget) and return the final output.

        Raises:
            Exception: Anything the renderer raises propagates unchanged after
                the registry has been reset. Fetch failures never propagate.
        """
        self._passes = []
        try:
            return await self._run(renderer)
        except Exception:
            self._registry.reset_all()
            self._state = CoordinatorState.DONE
            raise

    async def _run(self, renderer: Renderer[T]) -> T:
        max_passes = self._settings.max_passes
        logging_enabled = self._settings.logging_enabled
        pass_number = 1
        previous_total = 0

        while True:
            self._state = CoordinatorState.RENDERING
            if logging_enabled:
                self._log.info("Running render pass", pass_number=pass_number)

            renderer(True)

            current_total = self._registry.size(ROOT_SLOT)
            new_this_pass = current_total - previous_total
            if logging_enabled:
                self._log.info(
                    "Render pass complete",
                    pass_number=pass_number,
                    total_frontloads=current_total,
                    new_frontloads=new_this_pass,
                )

            if new_this_pass == 0:
                self._passes.append(PassRecord(pass_number=pass_number, total=current_total, new=0))
                if logging_enabled:
                    self._log.info(
                        "No new frontload nodes remain, running final render",
                        passes_run=pass_number,
                    )
                return self._finalize(renderer)

            self._state = CoordinatorState.FLUSHING
            started_at = self._clock.monotonic()
            outcome = await flush(self._registry, None, FlushOptions())
            flush_seconds = self._clock.monotonic() - started_at
            self._passes.append(
                PassRecord(
                    pass_number=pass_number,
                    total=current_total,
                    new=new_this_pass,
                    flush_seconds=flush_seconds,
                )
            )
            if logging_enabled:
                self._log.info(
                    "Ran frontloads",
                    pass_number=pass_number,
                    executed=outcome.executed,
                    duration_ms=round(flush_seconds * 1000, 3),
                )

            if pass_number == max_passes:
                return self._finalize_exhausted(renderer, current_total)

            pass_number += 1
            previous_total = current_total

    def _finalize(self, renderer: Renderer[T]) -> T:
        self._state = CoordinatorState.FINALIZING
        self._registry.reset_all()
        output = renderer(False)
        # The final render refills the queue; it is never flushed.
        self._registry.reset_all()
        self._state = CoordinatorState.DONE
        if self._settings.logging_enabled:
            self._log.info("Final render succeeded")
        return output

    def _finalize_exhausted(self, renderer: Renderer[T], flushed_total: int) -> T:
        self._state = CoordinatorState.FINALIZING
        output = renderer(False)

        # Entries beyond the ones this pass already ran belong to nodes that
        # appeared only now and will render without their data.
        pending = self._registry.size(ROOT_SLOT) - flushed_total
        if pending > 0:
            self._report_depth_exceeded(pending)

        self._registry.reset_all()
        self._state = CoordinatorState.DONE
        return output

    def _report_depth_exceeded(self, pending: int) -> None:
        diagnostic = DepthExceeded(max_passes=self._settings.max_passes, pending=pending)
        if self._settings.logging_enabled:
            self._log.warning(diagnostic.message, pending=pending)
        if self._settings.on_diagnostic is not None:
            self._settings.on_diagnostic(diagnostic)


async def coordinate(
    renderer: Renderer[T],
    config: RenderSettings | Mapping[str, Any] | None = None,
    registry: QueueRegistry | None = None,
    *,
    clock: Clock | None = None,
) -> T:
    """Server-render with nested loaders resolved up to config.max_passes deep.

    Args:
        renderer: Synchronous render function; called with True for dry runs
            and False for the final render
        config: RenderSettings, or a mapping validated into one
        registry: Registry the renderer's providers allocate from
        clock: Clock used to time flushes

    Returns:
        The final render's output (partial if the pass budget ran out).

    Raises:
        ValidationError: If config is invalid (e.g. max_passes < 1); raised
            before the renderer is called.
    """
    if config is None:
        settings = RenderSettings()
    elif isinstance(config, RenderSettings):
        settings = config
    else:
        settings = RenderSettings.model_validate(dict(config))

    coordinator = RenderPassCoordinator(settings, registry=registry, clock=clock)
    return await coordinator.run(renderer)
