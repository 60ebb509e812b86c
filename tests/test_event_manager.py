"""Tests for the event manager."""

import pytest


def test_listeners_run_by_priority_then_attach_order():
    """Test higher priorities run first and ties keep attach order."""
    from html_formgen.events import EventManager

    events = EventManager()
    calls = []
    events.attach("build", lambda e: calls.append("a"))
    events.attach("build", lambda e: calls.append("b"), priority=10)
    events.attach("build", lambda e: calls.append("c"))
    events.trigger("build")

    assert calls == ["b", "a", "c"]


def test_trigger_collects_responses():
    """Test trigger returns every listener result in call order."""
    from html_formgen.events import EventManager

    events = EventManager()
    events.attach("discover_name", lambda e: "fallback", priority=0)
    events.attach("discover_name", lambda e: e.get_param("name"), priority=1)

    responses = events.trigger("discover_name", params={"name": "user"})
    assert list(responses) == ["user", "fallback"]
    assert responses.first() == "user"
    assert responses.last() == "fallback"
    assert not responses.stopped()


def test_trigger_until_short_circuits():
    """Test trigger_until stops at the first accepted result."""
    from html_formgen.events import EventManager

    events = EventManager()
    calls = []

    def listener(value):
        def handle(e):
            calls.append(value)
            return value
        return handle

    events.attach("discover_name", listener(False), priority=3)
    events.attach("discover_name", listener("found"), priority=2)
    events.attach("discover_name", listener("never"), priority=1)

    responses = events.trigger_until(lambda result: isinstance(result, str), "discover_name")
    assert responses.stopped()
    assert responses.last() == "found"
    assert calls == [False, "found"]


def test_stop_propagation():
    """Test a listener can stop the remaining listeners."""
    from html_formgen.events import EventManager

    events = EventManager()
    calls = []

    def stopper(e):
        calls.append("stopper")
        e.stop_propagation()

    events.attach("configure_element", stopper, priority=5)
    events.attach("configure_element", lambda e: calls.append("late"))

    responses = events.trigger("configure_element")
    assert calls == ["stopper"]
    assert responses.stopped()


def test_trigger_event_passes_event_object():
    """Test trigger_event hands the same event to every listener."""
    from html_formgen.events import Event, EventManager

    events = EventManager()
    events.attach("configure_form", lambda e: e.set_param("seen", e.get_param("seen", 0) + 1))
    events.attach("configure_form", lambda e: e.set_param("seen", e.get_param("seen", 0) + 1))

    event = Event("configure_form", target="builder")
    events.trigger_event(event)
    assert event.get_param("seen") == 2
    assert event.get_target() == "builder"
    assert event.get_name() == "configure_form"


def test_empty_response_collection():
    """Test first/last on an event nobody listens to."""
    from html_formgen.events import EventManager

    responses = EventManager().trigger("nothing")
    assert responses.first() is None
    assert responses.last() is None
    assert len(responses) == 0


def test_detach():
    """Test detaching from one event or from all events."""
    from html_formgen.events import EventManager

    events = EventManager()

    def listener(e):
        return "x"

    events.attach("one", listener)
    events.attach("two", listener)

    assert events.detach(listener, "one") is True
    assert events.get_listeners("one") == []
    assert events.get_listeners("two") == [listener]

    assert events.detach(listener) is True
    assert events.detach(listener) is False
    assert events.get_events() == []


def test_attach_rejects_invalid_arguments():
    """Test attach validates the event name and listener."""
    from html_formgen.events import EventManager
    from html_formgen.exceptions import InvalidArgumentError

    events = EventManager()
    with pytest.raises(InvalidArgumentError):
        events.attach("", lambda e: None)
    with pytest.raises(InvalidArgumentError):
        events.attach("build", "not callable")


def test_identifiers_are_deduplicated():
    """Test identifiers keep their order without duplicates."""
    from html_formgen.events import EventManager

    events = EventManager(identifiers="builder")
    events.add_identifiers(["forms", "builder"])
    assert events.get_identifiers() == ["builder", "forms"]


def test_listener_aggregate_detaches_everything():
    """Test aggregates remove all listeners they attached."""
    from html_formgen.events import AbstractListenerAggregate, EventManager

    class Aggregate(AbstractListenerAggregate):
        def attach(self, events, priority=1):
            self._listen(events, "configure_form", self.on_form, priority)
            self._listen(events, "configure_element", self.on_element, priority)

        def on_form(self, e):
            return "form"

        def on_element(self, e):
            return "element"

    events = EventManager()
    aggregate = Aggregate()
    aggregate.attach(events)
    assert events.trigger("configure_form").first() == "form"

    aggregate.detach(events)
    assert events.get_events() == []


def test_builder_event_manager_has_default_listeners(builder):
    """Test the builder wires its listener aggregates to its event manager."""
    from html_formgen.annotation import (
        EVENT_CHECK_FOR_EXCLUDE, EVENT_CONFIGURE_ELEMENT, EVENT_CONFIGURE_FORM, EVENT_DISCOVER_NAME,
    )

    events = builder.get_event_manager()
    for name in (EVENT_DISCOVER_NAME, EVENT_CONFIGURE_FORM, EVENT_CONFIGURE_ELEMENT, EVENT_CHECK_FOR_EXCLUDE):
        assert events.get_listeners(name)
    assert "AnnotationBuilder" in events.get_identifiers()
