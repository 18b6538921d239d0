# src/frontload/engine/push.py
"""Push protocol: decide what happens to one node appearance.

Every time the tree traversal reports a mount or update for a connected node,
the provider asks decide() whether to skip the fetch, enqueue it for the
render-pass coordinator (server), or execute it right away (client).

Decision sequence (first match wins):
1. effective no_server_render = provider-level OR node-level flag
2. MOUNT with on_mount=False, or UPDATE with on_update=False -> SKIP
3. Server: effective no_server_render -> SKIP, otherwise ENQUEUE
4. Client: effective no_server_render or first client render done
   -> EXECUTE_NOW, otherwise SKIP (the data came from the server render
   and must not be fetched twice before the first client commit)

decide() is pure; the Provider applies the side effects.
"""

from __future__ import annotations

from dataclasses import dataclass

from frontload.contracts.enums import Environment, LifecycleEvent
from frontload.contracts.requests import LoadRequest
from frontload.contracts.results import PushDecision
from frontload.core.config import NodeOptions


@dataclass(frozen=True, slots=True)
class PushContext:
    """Everything decide() looks at for one node appearance.

    Attributes:
        environment: SERVER or CLIENT
        event: MOUNT or UPDATE
        node_options: The connected node's options
        provider_no_server_render: Provider-level no_server_render flag
        first_client_render_done: The provider's latch
        request: The request to enqueue or execute if eligible
    """

    environment: Environment
    event: LifecycleEvent
    node_options: NodeOptions
    provider_no_server_render: bool
    first_client_render_done: bool
    request: LoadRequest


def effective_no_server_render(provider_no_server_render: bool, node_options: NodeOptions) -> bool:
    return provider_no_server_render or node_options.no_server_render


def is_lifecycle_eligible(event: LifecycleEvent, node_options: NodeOptions) -> bool:
    """Whether the node runs its fetch for this lifecycle event at all."""
    if event is LifecycleEvent.MOUNT:
        return node_options.on_mount
    return node_options.on_update


def decide(ctx: PushContext) -> PushDecision:
    """Map one node appearance to SKIP, ENQUEUE or EXECUTE_NOW."""
    no_server_render = effective_no_server_render(ctx.provider_no_server_render, ctx.node_options)

    if not is_lifecycle_eligible(ctx.event, ctx.node_options):
        return PushDecision.skip(f"on_{ctx.event.value} is disabled")

    if ctx.environment is Environment.SERVER:
        if no_server_render:
            return PushDecision.skip("no_server_render is set")
        return PushDecision.enqueue(ctx.request, "queued for server flush")

    if no_server_render:
        return PushDecision.execute_now(ctx.request, "no_server_render is set")
    if ctx.first_client_render_done:
        return PushDecision.execute_now(ctx.request, "first client render done")
    return PushDecision.skip("first client render, data was loaded by the server render")
