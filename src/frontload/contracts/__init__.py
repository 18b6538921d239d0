"""Shared contracts: enums, request and result types, diagnostics, errors."""

from frontload.contracts.enums import (
    CoordinatorState,
    Environment,
    LifecycleEvent,
    PushAction,
)
from frontload.contracts.errors import ConfigFileError, FrontloadError
from frontload.contracts.events import DepthExceeded
from frontload.contracts.requests import FetchFn, FetchPhase, LoadRequest
from frontload.contracts.results import (
    FlushOutcome,
    PassRecord,
    PushDecision,
    SettledFailure,
)

__all__ = [
    "ConfigFileError",
    "CoordinatorState",
    "DepthExceeded",
    "Environment",
    "FetchFn",
    "FetchPhase",
    "FlushOutcome",
    "FrontloadError",
    "LifecycleEvent",
    "LoadRequest",
    "PassRecord",
    "PushAction",
    "PushDecision",
    "SettledFailure",
]
