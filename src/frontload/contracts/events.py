"""Diagnostic events emitted by the render-pass coordinator."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DepthExceeded:
    """The pass budget ran out while node appearances were still pending.

    Not an error: the coordinator still returns the (partial) final output.
    Nodes whose data never arrived will render their loading state.

    Attributes:
        max_passes: The configured budget
        pending: Requests discovered by the final render that were never run
    """

    max_passes: int
    pending: int

    @property
    def message(self) -> str:
        return (
            f"max_passes ({self.max_passes}) has been reached, yet there are still "
            f"{self.pending} frontload node(s) to load. The tree has more levels of "
            f"nested frontload nodes than the configuration allows, so the rendered "
            f"result is partial. Increase max_passes or reduce the nesting depth."
        )
