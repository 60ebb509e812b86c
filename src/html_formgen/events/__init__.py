"""Event dispatch."""

from .event_manager import (
    Event,
    EventManager,
    ResponseCollection,
    AbstractListenerAggregate,
)

__all__ = [
    "Event",
    "EventManager",
    "ResponseCollection",
    "AbstractListenerAggregate",
]
