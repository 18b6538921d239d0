"""Modes, lifecycle events, and decision kinds shared across the engine."""

from enum import StrEnum


class Environment(StrEnum):
    """Where a render tree is being rendered.

    A server render is non-interactive: fetches are queued and flushed by the
    render-pass coordinator. A client render runs fetches directly.
    """

    SERVER = "server"
    CLIENT = "client"


class LifecycleEvent(StrEnum):
    """Node lifecycle event that triggered a push."""

    MOUNT = "mount"
    UPDATE = "update"


class PushAction(StrEnum):
    """Outcome of the push protocol for one node appearance."""

    SKIP = "skip"
    ENQUEUE = "enqueue"
    EXECUTE_NOW = "execute_now"


class CoordinatorState(StrEnum):
    """States of the render-pass coordinator loop."""

    RENDERING = "rendering"
    FLUSHING = "flushing"
    FINALIZING = "finalizing"
    DONE = "done"
