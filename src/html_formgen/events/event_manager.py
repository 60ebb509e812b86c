"""
Event manager.

Listeners are attached to named events with a priority; triggering an event
calls them highest priority first (attach order breaks ties) and collects
their return values in a ResponseCollection.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from html_formgen.exceptions import InvalidArgumentError
from html_formgen.protocols import ListenerAggregate

logger = logging.getLogger(__name__)

# Debug flag for verbose trigger logging
DEBUG_EVENTS = False

Listener = Callable[["Event"], Any]


@dataclass
class Event:
    """Event passed to each listener."""
    name: str                                         # Event name
    target: Any = None                                # Object the event is about
    params: Dict[str, Any] = field(default_factory=dict)  # Shared, mutable parameters
    _stopped: bool = field(default=False, repr=False)

    def get_name(self) -> str:
        return self.name

    def get_target(self) -> Any:
        return self.target

    def get_params(self) -> Dict[str, Any]:
        return self.params

    def get_param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)

    def set_param(self, name: str, value: Any) -> None:
        self.params[name] = value

    def stop_propagation(self, flag: bool = True) -> None:
        self._stopped = flag

    def propagation_is_stopped(self) -> bool:
        return self._stopped


class ResponseCollection(list):
    """Listener return values, in call order."""

    def __init__(self, *args):
        super().__init__(*args)
        self._stopped = False

    def first(self) -> Any:
        return self[0] if self else None

    def last(self) -> Any:
        return self[-1] if self else None

    def stopped(self) -> bool:
        """True when a short-circuit callback or Event.stop_propagation() ended the trigger."""
        return self._stopped

    def set_stopped(self, flag: bool) -> None:
        self._stopped = flag


class EventManager:
    """
    Priority-ordered event dispatcher.

    Example:
        events = EventManager(identifiers=["form_builder"])
        events.attach("discover_name", lambda e: "fallback", priority=0)
        events.attach("discover_name", lambda e: e.get_param("name"), priority=1)
        events.trigger("discover_name", params={"name": "user"}).first()  # "user"
    """

    def __init__(self, identifiers: Iterable[str] = ()):
        self._identifiers: List[str] = []
        self._listeners: Dict[str, List[Tuple[int, int, Listener]]] = {}
        self._sequence = itertools.count()
        self.set_identifiers(identifiers)

    # ==================== IDENTIFIERS ====================

    def set_identifiers(self, identifiers: Iterable[str]) -> None:
        if isinstance(identifiers, str):
            identifiers = [identifiers]
        self._identifiers = list(dict.fromkeys(identifiers))

    def add_identifiers(self, identifiers: Iterable[str]) -> None:
        if isinstance(identifiers, str):
            identifiers = [identifiers]
        self.set_identifiers(self._identifiers + list(identifiers))

    def get_identifiers(self) -> List[str]:
        return list(self._identifiers)

    # ==================== LISTENERS ====================

    def attach(self, event_name: str, listener: Listener, priority: int = 1) -> Listener:
        """
        Attach a listener to an event.

        Returns:
            The listener, so it can be passed to detach() later

        Raises:
            InvalidArgumentError: If event_name is empty or listener is not callable
        """
        if not isinstance(event_name, str) or not event_name:
            raise InvalidArgumentError(f"Event name must be a non-empty string; received {event_name!r}")
        if not callable(listener):
            raise InvalidArgumentError(f"Listener for '{event_name}' must be callable; received {listener!r}")
        entries = self._listeners.setdefault(event_name, [])
        entries.append((priority, next(self._sequence), listener))
        entries.sort(key=lambda entry: (-entry[0], entry[1]))
        logger.debug(f"EventManager: attached {getattr(listener, '__qualname__', listener)} to '{event_name}' (priority={priority})")
        return listener

    def detach(self, listener: Listener, event_name: Optional[str] = None) -> bool:
        """
        Detach a listener from one event, or from every event when event_name is None.

        Returns:
            True if the listener was attached anywhere
        """
        names = [event_name] if event_name is not None else list(self._listeners)
        removed = False
        for name in names:
            entries = self._listeners.get(name, [])
            kept = [entry for entry in entries if entry[2] != listener]
            if len(kept) != len(entries):
                removed = True
                self._listeners[name] = kept
        return removed

    def clear_listeners(self, event_name: str) -> None:
        self._listeners.pop(event_name, None)

    def get_listeners(self, event_name: str) -> List[Listener]:
        return [entry[2] for entry in self._listeners.get(event_name, [])]

    def get_events(self) -> List[str]:
        return [name for name, entries in self._listeners.items() if entries]

    # ==================== TRIGGERING ====================

    def trigger(self, event_name: str, target: Any = None, params: Optional[Dict[str, Any]] = None) -> ResponseCollection:
        return self._trigger_listeners(Event(event_name, target, params if params is not None else {}))

    def trigger_event(self, event: Event) -> ResponseCollection:
        return self._trigger_listeners(event)

    def trigger_until(self, callback: Callable[[Any], bool], event_name: str, target: Any = None,
                      params: Optional[Dict[str, Any]] = None) -> ResponseCollection:
        """Trigger, stopping after the first listener whose result makes callback return True."""
        return self._trigger_listeners(Event(event_name, target, params if params is not None else {}), callback)

    def trigger_event_until(self, callback: Callable[[Any], bool], event: Event) -> ResponseCollection:
        return self._trigger_listeners(event, callback)

    def _trigger_listeners(self, event: Event, callback: Optional[Callable[[Any], bool]] = None) -> ResponseCollection:
        responses = ResponseCollection()
        event.stop_propagation(False)
        # Snapshot so listeners may attach/detach while running
        for _, _, listener in list(self._listeners.get(event.name, [])):
            response = listener(event)
            responses.append(response)
            if event.propagation_is_stopped():
                responses.set_stopped(True)
                break
            if callback is not None and callback(response):
                responses.set_stopped(True)
                break
        if DEBUG_EVENTS:
            logger.debug(f"EventManager: '{event.name}' -> {len(responses)} response(s), stopped={responses.stopped()}")
        return responses


class AbstractListenerAggregate(ListenerAggregate):
    """
    Base for listener aggregates; tracks attached listeners so detach() is automatic.

    Subclasses implement attach() and register each listener through _listen().
    """

    def __init__(self):
        self._attached: List[Tuple[str, Listener]] = []

    def _listen(self, events: EventManager, event_name: str, listener: Listener, priority: int = 1) -> None:
        events.attach(event_name, listener, priority)
        self._attached.append((event_name, listener))

    def detach(self, events: EventManager) -> None:
        for event_name, listener in self._attached:
            events.detach(listener, event_name)
        self._attached = []
