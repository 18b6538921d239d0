# src/frontload/engine/connect.py
"""connect(): wire a fetch function to a tree position.

connect() returns a NodeBinder. Binding it to a component and its props gives
a ConnectedNode, which is what the tree traversal works with: it calls
mount()/update() with the FrontloadContext it is threading down the tree,
and render() to get the wrapped component's output.

Example:
    async def load_profile(props, phase):
        store["profile"] = await api.get_profile(props["user_id"])

    profile_binder = connect(load_profile, NodeOptions(on_update=True))
    node = profile_binder(profile_view, {"user_id": 7})

    node.mount(provider.context)
    node.render()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from frontload.contracts.enums import LifecycleEvent
from frontload.contracts.requests import FetchFn
from frontload.core.config import NodeOptions
from frontload.engine.provider import FrontloadContext

T = TypeVar("T")

Component = Callable[[Any], T]


def display_name(component: Callable[..., Any]) -> str:
    """Name used for a component in log output."""
    name = getattr(component, "display_name", None) or getattr(component, "__name__", None)
    return name if isinstance(name, str) and name else "anonymous"


class ConnectedNode(Generic[T]):
    """One appearance of a connected component in the tree."""

    def __init__(
        self,
        fetch_fn: FetchFn,
        options: NodeOptions,
        component: Component[T],
        props: Any,
    ) -> None:
        self._fetch_fn = fetch_fn
        self._options = options
        self._component = component
        self._props = props

    @property
    def options(self) -> NodeOptions:
        return self._options

    @property
    def props(self) -> Any:
        return self._props

    @property
    def display_name(self) -> str:
        return display_name(self._component)

    def mount(self, context: FrontloadContext) -> None:
        """Report that this node mounted (server: before render; client: after commit)."""
        self._push(context, LifecycleEvent.MOUNT)

    def update(self, context: FrontloadContext) -> None:
        """Report that this node updated. Server renders never update."""
        self._push(context, LifecycleEvent.UPDATE)

    def render(self) -> T:
        return self._component(self._props)

    def _push(self, context: FrontloadContext, event: LifecycleEvent) -> None:
        context.push_frontload(self._fetch_fn, self._options, event, self._props, label=self.display_name)


class NodeBinder:
    """Binds one fetch function and its options to components."""

    def __init__(self, fetch_fn: FetchFn, options: NodeOptions) -> None:
        self._fetch_fn = fetch_fn
        self._options = options

    @property
    def fetch_fn(self) -> FetchFn:
        return self._fetch_fn

    @property
    def options(self) -> NodeOptions:
        return self._options

    def __call__(self, component: Component[T], props: Any = None) -> ConnectedNode[T]:
        return ConnectedNode(self._fetch_fn, self._options, component, props)

    def wrap(self, component: Component[T]) -> Callable[[Any], ConnectedNode[T]]:
        """Return a props -> ConnectedNode factory for one component."""

        def factory(props: Any = None) -> ConnectedNode[T]:
            return self(component, props)

        factory.__name__ = display_name(component)
        return factory


def connect(fetch_fn: FetchFn, options: NodeOptions | None = None) -> NodeBinder:
    """Wire fetch_fn to whatever component the returned binder is applied to."""
    return NodeBinder(fetch_fn, options if options is not None else NodeOptions())
