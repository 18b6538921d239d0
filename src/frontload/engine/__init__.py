"""Frontload engine: registry, push protocol, flush, providers, coordinator.

Example:
    from frontload.core import NodeOptions, ProviderSettings, RenderSettings
    from frontload.engine import Provider, QueueRegistry, connect, coordinate

    registry = QueueRegistry()
    todos_node = connect(load_todos)(todo_list, {"user": 1})

    def render(is_dry_run: bool) -> str:
        provider = Provider(ProviderSettings(is_server=True), registry=registry)
        todos_node.mount(provider.context)
        return todos_node.render()

    html = await coordinate(render, RenderSettings(max_passes=2), registry=registry)
"""

from frontload.engine.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from frontload.engine.connect import ConnectedNode, NodeBinder, connect
from frontload.engine.coordinator import RenderPassCoordinator, coordinate
from frontload.engine.flush import FlushOptions, flush
from frontload.engine.provider import FrontloadContext, Provider
from frontload.engine.push import PushContext, decide
from frontload.engine.registry import DEFAULT_REGISTRY, QueueRegistry

__all__ = [
    "DEFAULT_CLOCK",
    "DEFAULT_REGISTRY",
    "Clock",
    "ConnectedNode",
    "FlushOptions",
    "FrontloadContext",
    "MockClock",
    "NodeBinder",
    "Provider",
    "PushContext",
    "QueueRegistry",
    "RenderPassCoordinator",
    "SystemClock",
    "connect",
    "coordinate",
    "decide",
    "flush",
]
