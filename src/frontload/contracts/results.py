"""Result types produced by the push protocol, flush engine, and coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from frontload.contracts.enums import PushAction

if TYPE_CHECKING:
    from frontload.contracts.requests import LoadRequest


@dataclass(frozen=True, slots=True)
class SettledFailure:
    """Sentinel a rejected fetch is converted into when its batch settles.

    Flushes never raise on fetch failure. The sentinel keeps the exception
    around only so the settle adapter can log it.
    """

    exception: BaseException
    label: str


@dataclass(frozen=True, slots=True)
class PushDecision:
    """What the push protocol decided for one node appearance.

    Attributes:
        action: SKIP, ENQUEUE or EXECUTE_NOW
        request: The request to enqueue or execute (None for SKIP)
        reason: Short explanation, used in log output
    """

    action: PushAction
    request: LoadRequest | None
    reason: str

    @classmethod
    def skip(cls, reason: str) -> PushDecision:
        return cls(action=PushAction.SKIP, request=None, reason=reason)

    @classmethod
    def enqueue(cls, request: LoadRequest, reason: str) -> PushDecision:
        return cls(action=PushAction.ENQUEUE, request=request, reason=reason)

    @classmethod
    def execute_now(cls, request: LoadRequest, reason: str) -> PushDecision:
        return cls(action=PushAction.EXECUTE_NOW, request=request, reason=reason)


@dataclass(frozen=True, slots=True)
class FlushOutcome:
    """Counts describing one flush.

    Deliberately carries no failure information: outcome handling belongs to
    the fetch functions themselves.

    Attributes:
        executed: Requests whose fetch was started
        deferred: Requests held back by the first-client-render filter
        settled: Requests that reached a final state (always == executed)
    """

    executed: int = 0
    deferred: int = 0
    settled: int = 0

    def __add__(self, other: FlushOutcome) -> FlushOutcome:
        return FlushOutcome(
            executed=self.executed + other.executed,
            deferred=self.deferred + other.deferred,
            settled=self.settled + other.settled,
        )


@dataclass(frozen=True, slots=True)
class PassRecord:
    """One iteration of the render-pass coordinator.

    Attributes:
        pass_number: 1-based pass index
        total: Requests found in slot 0 after the dry run
        new: total minus the previous pass's total
        flush_seconds: Time spent awaiting the flush (0.0 if none ran)
    """

    pass_number: int
    total: int
    new: int
    flush_seconds: float = 0.0
