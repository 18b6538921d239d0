# src/frontload/engine/provider.py
"""Provider: one logical render root and the capability object it hands out.

A Provider owns one registry slot and a one-way "first client render done"
latch. Descendant nodes never see the Provider itself; the tree traversal
threads provider.context (a FrontloadContext) down to them, and connected
nodes call context.push_frontload() on mount and update.

Server:
    first_client_render_done starts True (there is only ever one render
    attempt per request) and every eligible push is queued in the slot for
    the render-pass coordinator.

Client:
    No queue and no coordinator. An eligible push starts the fetch at once as
    an asyncio task on the running loop; before the first client mount
    commits, pushes that the server render already satisfied are skipped.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

import structlog

from frontload.contracts.enums import Environment, LifecycleEvent, PushAction
from frontload.contracts.requests import FetchFn, FetchPhase, LoadRequest
from frontload.contracts.results import FlushOutcome
from frontload.core.config import NodeOptions, ProviderSettings
from frontload.core.environment import detect_is_server
from frontload.engine.flush import FlushOptions, flush
from frontload.engine.push import PushContext, decide, is_lifecycle_eligible
from frontload.engine.registry import DEFAULT_REGISTRY, QueueRegistry

slog = structlog.get_logger(__name__)


class FrontloadContext:
    """Capability object consumed by every connected descendant node.

    A thin view over the Provider: the flags are read live, so a context
    captured before the first client commit sees the latch flip.
    """

    __slots__ = ("_provider",)

    def __init__(self, provider: Provider) -> None:
        self._provider = provider

    @property
    def is_server(self) -> bool:
        return self._provider.is_server

    @property
    def first_client_render_done(self) -> bool:
        return self._provider.first_client_render_done

    def push_frontload(
        self,
        fetch_fn: FetchFn,
        options: NodeOptions | None,
        event: LifecycleEvent,
        node_data: Any,
        label: str | None = None,
    ) -> None:
        """Report one node appearance; see Provider.push()."""
        self._provider.push(fetch_fn, options, event, node_data, label=label)


class Provider:
    """Owns one slot, one latch, and the capability object for a render root.

    Example (server):
        registry = QueueRegistry()

        def render(is_dry_run: bool) -> str:
            provider = Provider(ProviderSettings(is_server=True), registry=registry)
            return render_tree(app, provider.context)

        html = await coordinate(render, RenderSettings(max_passes=3), registry=registry)

    Example (client):
        provider = Provider(ProviderSettings(is_server=False))
        render_tree(app, provider.context)   # mounts push, fetches are skipped
        provider.mark_first_render_done()    # from now on fetches run
    """

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        registry: QueueRegistry | None = None,
    ) -> None:
        """Allocate this provider's slot and initialise the latch.

        Args:
            settings: Provider settings (defaults: auto-detected environment)
            registry: Registry to allocate the slot in. Defaults to
                DEFAULT_REGISTRY; pass the same registry to coordinate().
        """
        self._settings = settings if settings is not None else ProviderSettings()
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._is_server = self._settings.is_server if self._settings.is_server is not None else detect_is_server()
        self._slot_index = self._registry.allocate()
        self._first_client_render_done = self._is_server
        self._tasks: set[asyncio.Future[Any]] = set()
        self._log = slog.bind(provider=self._settings.name)
        self._context = FrontloadContext(self)

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    @property
    def registry(self) -> QueueRegistry:
        return self._registry

    @property
    def is_server(self) -> bool:
        return self._is_server

    @property
    def environment(self) -> Environment:
        return Environment.SERVER if self._is_server else Environment.CLIENT

    @property
    def slot_index(self) -> int:
        return self._slot_index

    @property
    def first_client_render_done(self) -> bool:
        return self._first_client_render_done

    @property
    def context(self) -> FrontloadContext:
        return self._context

    @property
    def pending_fetches(self) -> int:
        """Client-side fetches started by this provider that have not settled."""
        return len(self._tasks)

    def mark_first_render_done(self) -> None:
        """Flip the latch after the first client mount commits.

        The latch is one-way: calling this again has no effect.
        """
        if self._first_client_render_done:
            return
        self._first_client_render_done = True
        if self._settings.with_logging and not self._settings.no_server_render:
            self._log.info("First client render done, from now on all frontloads will run")

    def push(
        self,
        fetch_fn: FetchFn,
        options: NodeOptions | None,
        event: LifecycleEvent,
        node_data: Any,
        label: str | None = None,
    ) -> None:
        """Apply the push protocol to one node appearance.

        Args:
            fetch_fn: The node's fetch function
            options: The node's options (None means defaults)
            event: MOUNT or UPDATE
            node_data: Passed to fetch_fn as its first argument
            label: Node name for log output

        Raises:
            RuntimeError: If a client-side fetch returns an awaitable and no
                event loop is running.
        """
        if options is None:
            options = NodeOptions()
        event = LifecycleEvent(event)
        phase = FetchPhase(
            is_mount=event is LifecycleEvent.MOUNT,
            is_update=event is LifecycleEvent.UPDATE,
        )
        request = LoadRequest(
            execute=lambda: fetch_fn(node_data, phase),
            options=options,
            label=label or "anonymous",
        )
        decision = decide(
            PushContext(
                environment=self.environment,
                event=event,
                node_options=options,
                provider_no_server_render=self._settings.no_server_render,
                first_client_render_done=self._first_client_render_done,
                request=request,
            )
        )

        if decision.action is PushAction.ENQUEUE:
            self._registry.append(self._slot_index, request)
            if self._settings.with_logging:
                self._log.info("Added frontload fn to queue", node=request.label, event=event.value)
        elif decision.action is PushAction.EXECUTE_NOW:
            self._execute_now(request)
            if self._settings.with_logging:
                self._log.info(
                    "Executed frontload fn",
                    node=request.label,
                    event=event.value,
                    reason=decision.reason,
                )
        elif (
            self._settings.with_logging
            and not self._is_server
            and not self._first_client_render_done
            and is_lifecycle_eligible(event, options)
        ):
            self._log.info(
                "Did not execute frontload fn on first client render",
                node=request.label,
                event=event.value,
                reason=decision.reason,
            )

    async def flush(self, first_client_render: bool | None = None) -> FlushOutcome:
        """Flush this provider's slot.

        Args:
            first_client_render: Apply the first-client-render filter. None
                means "while the latch has not flipped yet".
        """
        if first_client_render is None:
            first_client_render = not self._first_client_render_done
        options = FlushOptions(
            first_client_render=first_client_render,
            no_server_render=self._settings.no_server_render,
            with_logging=self._settings.with_logging,
            name=self._settings.name,
        )
        return await flush(self._registry, self._slot_index, options)

    async def wait_for_client_fetches(self) -> None:
        """Wait until every client-side fetch started so far has settled."""
        while self._tasks:
            await asyncio.wait(tuple(self._tasks))

    def _execute_now(self, request: LoadRequest) -> None:
        try:
            result = request.execute()
        except Exception as exc:
            self._log.debug(
                "Frontload fn raised on client",
                node=request.label,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return

        if not inspect.isawaitable(result):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(result):
                result.close()
            raise RuntimeError(
                f"Client-side frontload fn for node {request.label!r} returned an awaitable "
                f"but no event loop is running"
            ) from None

        task = asyncio.ensure_future(result, loop=loop)
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._on_fetch_settled(done, request.label))

    def _on_fetch_settled(self, task: asyncio.Future[Any], label: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.debug(
                "Frontload fn rejected on client",
                node=label,
                error=str(exc),
                error_type=type(exc).__name__,
            )
