# tests/property/engine/test_push_properties.py
"""Property-based tests for the push decision table.

PUSH INVARIANTS:
1. The server never executes immediately; the client never enqueues
2. A lifecycle-ineligible appearance is always skipped
3. Anything marked no_server_render is never queued on the server
4. After the first client render, every eligible appearance executes
"""

from hypothesis import given
from hypothesis import strategies as st

from frontload.contracts.enums import Environment, LifecycleEvent, PushAction
from frontload.contracts.requests import LoadRequest
from frontload.core.config import NodeOptions
from frontload.engine.push import PushContext, decide, is_lifecycle_eligible

node_options = st.builds(
    NodeOptions,
    on_mount=st.booleans(),
    on_update=st.booleans(),
    no_server_render=st.booleans(),
)

push_contexts = st.builds(
    lambda environment, event, options, provider_flag, latch: PushContext(
        environment=environment,
        event=event,
        node_options=options,
        provider_no_server_render=provider_flag,
        first_client_render_done=latch,
        request=LoadRequest(execute=lambda: None, options=options),
    ),
    st.sampled_from(Environment),
    st.sampled_from(LifecycleEvent),
    node_options,
    st.booleans(),
    st.booleans(),
)


@given(ctx=push_contexts)
def test_action_matches_environment(ctx: PushContext) -> None:
    decision = decide(ctx)

    if ctx.environment is Environment.SERVER:
        assert decision.action is not PushAction.EXECUTE_NOW
    else:
        assert decision.action is not PushAction.ENQUEUE


@given(ctx=push_contexts)
def test_ineligible_is_skipped(ctx: PushContext) -> None:
    if not is_lifecycle_eligible(ctx.event, ctx.node_options):
        assert decide(ctx).action is PushAction.SKIP


@given(ctx=push_contexts)
def test_no_server_render_never_queued(ctx: PushContext) -> None:
    if ctx.provider_no_server_render or ctx.node_options.no_server_render:
        assert decide(ctx).action is not PushAction.ENQUEUE


@given(ctx=push_contexts)
def test_client_after_latch_executes_eligible(ctx: PushContext) -> None:
    if (
        ctx.environment is Environment.CLIENT
        and ctx.first_client_render_done
        and is_lifecycle_eligible(ctx.event, ctx.node_options)
    ):
        decision = decide(ctx)
        assert decision.action is PushAction.EXECUTE_NOW
        assert decision.request is ctx.request


@given(ctx=push_contexts)
def test_skip_never_carries_request(ctx: PushContext) -> None:
    decision = decide(ctx)

    assert (decision.request is None) == (decision.action is PushAction.SKIP)
