"""
Default annotation listeners.

Each handler receives the event for one annotation and updates the shared
specification dicts passed in the event params. Handlers return early for
annotation types they do not own, so every handler sees every annotation.

Event params:
- discover_name: annotations, reflection
- configure_form: annotation, name, form_spec
- configure_element: annotation, name, element_spec, input_spec, filter_spec
- check_for_exclude: annotations
"""

from typing import Any, Dict
import logging

from html_formgen.core import merge
from html_formgen.events import AbstractListenerAggregate, Event, EventManager
from .annotations import (
    AllowEmpty, Attributes, ComposedObject, ContinueIfEmpty, ErrorMessage, Exclude,
    Filter, Flags, Hydrator, Input, InputFilter, Instance, Name, Options, Required,
    Type, ValidationGroup, Validator,
)

logger = logging.getLogger(__name__)

EVENT_DISCOVER_NAME = "discover_name"
EVENT_CONFIGURE_FORM = "configure_form"
EVENT_CONFIGURE_ELEMENT = "configure_element"
EVENT_CHECK_FOR_EXCLUDE = "check_for_exclude"


def _merged(current: Any, update: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(current or {})
    result.update(update)
    return result


class AbstractAnnotationsListener(AbstractListenerAggregate):
    """Name discovery shared by the form and element listeners."""

    def attach(self, events: EventManager, priority: int = 1) -> None:
        self._listen(events, EVENT_DISCOVER_NAME, self.handle_name_annotation, priority)
        self._listen(events, EVENT_DISCOVER_NAME, self.discover_fallback_name, priority - 1)

    def handle_name_annotation(self, e: Event) -> Any:
        annotations = e.get_param("annotations")
        name = annotations.get(Name)
        if name is None:
            return False
        return name.get_name()

    def discover_fallback_name(self, e: Event) -> str:
        return e.get_param("reflection").name


class ElementAnnotationsListener(AbstractAnnotationsListener):
    """Builds element and input specifications from property annotations."""

    def attach(self, events: EventManager, priority: int = 1) -> None:
        for handler in (
            self.handle_allow_empty_annotation,
            self.handle_attributes_annotation,
            self.handle_composed_object_annotation,
            self.handle_continue_if_empty_annotation,
            self.handle_error_message_annotation,
            self.handle_filter_annotation,
            self.handle_flags_annotation,
            self.handle_hydrator_annotation,
            self.handle_input_annotation,
            self.handle_object_annotation,
            self.handle_options_annotation,
            self.handle_required_annotation,
            self.handle_type_annotation,
            self.handle_validator_annotation,
        ):
            self._listen(events, EVENT_CONFIGURE_ELEMENT, handler, priority)
        self._listen(events, EVENT_CHECK_FOR_EXCLUDE, self.handle_exclude_annotation, priority)
        super().attach(events, priority)

    def handle_allow_empty_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, AllowEmpty):
            return
        e.get_param("input_spec")["allow_empty"] = annotation.get_allow_empty()

    def handle_attributes_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Attributes):
            return
        spec = e.get_param("element_spec")["spec"]
        spec["attributes"] = _merged(spec.get("attributes"), annotation.get_attributes())

    def handle_composed_object_annotation(self, e: Event) -> None:
        """
        Build a nested fieldset (or collection of fieldsets) from the composed class.

        The nested input filter lands in the parent filter spec under the element name.
        """
        annotation = e.get_param("annotation")
        if not isinstance(annotation, ComposedObject):
            return

        builder = e.get_target()
        target = annotation.get_composed_object()
        specification = builder.get_form_specification(target, use_metadata=builder.is_using_metadata())
        name = e.get_param("name")
        spec = e.get_param("element_spec")["spec"]
        filter_spec = e.get_param("filter_spec")
        nested_filter = specification.get("input_filter", {})
        if isinstance(nested_filter, dict):
            nested_filter = {"type": "input_filter", **nested_filter}

        if annotation.is_collection_object():
            target_spec = dict(specification)
            target_spec.pop("input_filter", None)
            target_spec.setdefault("type", "fieldset")
            target_spec.setdefault("object", builder.resolve_entity(target))
            spec["type"] = "collection"
            spec["options"] = _merged(spec.get("options"), {"target_element": target_spec})
            filter_spec[name] = {"type": "collection", "input_filter": nested_filter}
        else:
            spec["type"] = specification.get("type", "fieldset")
            spec["object"] = builder.resolve_entity(target)
            spec["options"] = _merged(spec.get("options"), specification.get("options", {}))
            spec["elements"] = specification.get("elements", [])
            spec["fieldsets"] = specification.get("fieldsets", [])
            if specification.get("attributes"):
                spec["attributes"] = _merged(spec.get("attributes"), specification["attributes"])
            filter_spec[name] = nested_filter

        if "hydrator" in specification:
            spec["hydrator"] = specification["hydrator"]
        if annotation.get_options():
            spec["options"] = merge(spec.get("options", {}), annotation.get_options())
        logger.debug(f"ComposedObject '{name}': nested {spec['type']} from {getattr(target, '__name__', target)}")

    def handle_continue_if_empty_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, ContinueIfEmpty):
            return
        e.get_param("input_spec")["continue_if_empty"] = annotation.get_continue_if_empty()

    def handle_error_message_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, ErrorMessage):
            return
        e.get_param("input_spec")["error_message"] = annotation.get_message()

    def handle_exclude_annotation(self, e: Event) -> bool:
        return e.get_param("annotations").has_annotation(Exclude)

    def handle_filter_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Filter):
            return
        e.get_param("input_spec").setdefault("filters", []).append(annotation.get_filter_specification())

    def handle_flags_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Flags):
            return
        e.get_param("element_spec")["flags"] = annotation.get_flags()

    def handle_hydrator_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Hydrator):
            return
        e.get_param("element_spec")["spec"]["hydrator"] = annotation.get_hydrator()

    def handle_input_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Input):
            return
        e.get_param("input_spec")["type"] = annotation.get_input()

    def handle_object_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Instance):
            return
        e.get_param("element_spec")["spec"]["object"] = annotation.get_object()

    def handle_options_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Options):
            return
        spec = e.get_param("element_spec")["spec"]
        spec["options"] = _merged(spec.get("options"), annotation.get_options())

    def handle_required_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Required):
            return
        required = annotation.get_required()
        e.get_param("input_spec")["required"] = required
        if required:
            spec = e.get_param("element_spec")["spec"]
            spec["attributes"] = _merged(spec.get("attributes"), {"required": "required"})

    def handle_type_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Type):
            return
        e.get_param("element_spec")["spec"]["type"] = annotation.get_type()

    def handle_validator_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Validator):
            return
        e.get_param("input_spec").setdefault("validators", []).append(annotation.get_validator_specification())


class FormAnnotationsListener(AbstractAnnotationsListener):
    """Builds the form specification from class annotations."""

    def attach(self, events: EventManager, priority: int = 1) -> None:
        for handler in (
            self.handle_attributes_annotation,
            self.handle_flags_annotation,
            self.handle_hydrator_annotation,
            self.handle_input_filter_annotation,
            self.handle_object_annotation,
            self.handle_options_annotation,
            self.handle_type_annotation,
            self.handle_validation_group_annotation,
        ):
            self._listen(events, EVENT_CONFIGURE_FORM, handler, priority)
        super().attach(events, priority)

    def handle_attributes_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Attributes):
            return
        form_spec = e.get_param("form_spec")
        form_spec["attributes"] = _merged(form_spec.get("attributes"), annotation.get_attributes())

    def handle_flags_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Flags):
            return
        e.get_param("form_spec")["flags"] = annotation.get_flags()

    def handle_hydrator_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Hydrator):
            return
        e.get_param("form_spec")["hydrator"] = annotation.get_hydrator()

    def handle_input_filter_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, InputFilter):
            return
        e.get_param("form_spec")["input_filter"] = annotation.get_input_filter()

    def handle_object_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Instance):
            return
        e.get_param("form_spec")["object"] = annotation.get_object()

    def handle_options_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Options):
            return
        form_spec = e.get_param("form_spec")
        form_spec["options"] = _merged(form_spec.get("options"), annotation.get_options())

    def handle_type_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, Type):
            return
        e.get_param("form_spec")["type"] = annotation.get_type()

    def handle_validation_group_annotation(self, e: Event) -> None:
        annotation = e.get_param("annotation")
        if not isinstance(annotation, ValidationGroup):
            return
        e.get_param("form_spec")["validation_group"] = annotation.get_validation_group()
