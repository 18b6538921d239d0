"""Load requests: deferred units of fetch work.

A LoadRequest is created by the push protocol when a node appearance is
eligible for deferred execution, and consumed exactly once by the flush
engine. It is never mutated.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from frontload.core.config import NodeOptions


@dataclass(frozen=True, slots=True)
class FetchPhase:
    """Second argument handed to every fetch function.

    Exactly one of the flags is True.
    """

    is_mount: bool
    is_update: bool


# A fetch function receives the node's data and the phase; its return value
# is ignored by the engine (a coroutine is awaited, anything else counts as
# already settled).
FetchFn = Callable[[Any, FetchPhase], Awaitable[Any] | Any]


@dataclass(frozen=True, slots=True)
class LoadRequest:
    """A deferred fetch tied to one node appearance.

    Attributes:
        execute: Zero-argument thunk that starts the fetch
        options: Options of the node that pushed this request
        label: Human-readable node name (for logs)
    """

    execute: Callable[[], Awaitable[Any] | Any]
    options: NodeOptions
    label: str = "anonymous"
