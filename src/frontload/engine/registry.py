# src/frontload/engine/registry.py
"""QueueRegistry: the table of per-provider queues ("slots").

Each Provider allocates one slot at construction and pushes deferred load
requests into it on the server. The flush engine drains slots, and the
render-pass coordinator tears the whole registry down between renders.

The registry is the only shared mutable state in frontload. Create one per
server render request and hand it to both the Provider and the coordinator;
DEFAULT_REGISTRY exists for callers that render strictly one request at a
time.

Order inside a slot carries no meaning. Consumers must treat a slot as an
unordered multiset.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from frontload.contracts.requests import LoadRequest


class QueueRegistry:
    """Mapping from slot index to the load requests pushed into that slot.

    All operations are synchronous and total: touching an index that was
    never allocated (or was dropped by reset_all) behaves like an empty slot.

    Example:
        registry = QueueRegistry()
        index = registry.allocate()     # 0
        registry.append(index, request)
        registry.size(index)            # 1
        registry.reset(index)
    """

    def __init__(self) -> None:
        self._slots: dict[int, list[LoadRequest]] = {}
        self._next_index = 0

    def allocate(self) -> int:
        """Append an empty slot and return its index.

        Indices increase monotonically and are not reused until reset_all()
        tears the registry down.
        """
        index = self._next_index
        self._next_index += 1
        self._slots[index] = []
        return index

    def append(self, index: int, request: LoadRequest) -> None:
        self._slots.setdefault(index, []).append(request)

    def requests(self, index: int) -> tuple[LoadRequest, ...]:
        """Snapshot of a slot's requests (empty for unknown indices)."""
        return tuple(self._slots.get(index, ()))

    def size(self, index: int) -> int:
        return len(self._slots.get(index, ()))

    def reset(self, index: int) -> None:
        """Empty one slot in place."""
        slot = self._slots.get(index)
        if slot is None:
            self._slots[index] = []
        else:
            slot.clear()

    def reset_all(self) -> None:
        """Drop every slot and restart index allocation at 0.

        The provider created by the next render therefore owns slot 0 again,
        which is what the render-pass coordinator inspects. A slot allocated
        by a concurrent render while this runs is dropped too; concurrent
        renders against one registry are unsupported.
        """
        self._slots = {}
        self._next_index = 0

    def slot_indices(self) -> tuple[int, ...]:
        return tuple(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        sizes = {index: len(slot) for index, slot in self._slots.items()}
        return f"QueueRegistry(slots={sizes})"


DEFAULT_REGISTRY = QueueRegistry()
