"""
AnnotationBuilder: derives form specifications from annotated classes.

The builder itself knows nothing about individual annotations. It reflects
the class, then triggers one event per annotation; the listener aggregates
attached to its event manager translate annotations into specification
entries. Custom annotations are supported by attaching more listeners.
"""

import importlib
from collections.abc import Mapping
from typing import Any, Dict, Optional
import logging

from html_formgen.core import merge, next_index
from html_formgen.elements import Fieldset, Form, get_element_class
from html_formgen.events import EventManager
from html_formgen.exceptions import InvalidArgumentError
from html_formgen.protocols import get_form_config
from .collection import AnnotationCollection
from .listeners import (
    EVENT_CHECK_FOR_EXCLUDE, EVENT_CONFIGURE_ELEMENT, EVENT_CONFIGURE_FORM, EVENT_DISCOVER_NAME,
    ElementAnnotationsListener, FormAnnotationsListener,
)
from .readers import PropertyReflection, get_reader
from .type_inference import infer_element_spec, infer_element_types

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bytes, int, float, complex, bool, list, tuple, dict, set, frozenset)


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


class AnnotationBuilder:
    """
    Builds form specifications (and forms) from annotated classes.

    Example:
        @form_annotations(Name("user"))
        @dataclass
        class User:
            username: Annotated[str, Required(), Filter("StringTrim")]
            born: Annotated[date, Type("date")]

        builder = AnnotationBuilder()
        spec = builder.get_form_specification(User)
        form = builder.create_form(User)
    """

    def __init__(self, preserve_defined_order: Optional[bool] = None, infer_types: Optional[bool] = None):
        config = get_form_config()
        self._preserve_defined_order = (
            config.preserve_defined_order if preserve_defined_order is None else preserve_defined_order
        )
        self._infer_types = config.infer_types if infer_types is None else infer_types
        self._event_manager: Optional[EventManager] = None
        self._form_factory: Any = None
        self._entity: Any = None
        self._use_metadata = False

    # ==================== COLLABORATORS ====================

    def set_event_manager(self, events: EventManager) -> "AnnotationBuilder":
        """Set the event manager; identifiers are set and the default listeners attached."""
        events.set_identifiers([type(self).__name__, "AnnotationBuilder", "html_formgen"])
        ElementAnnotationsListener().attach(events)
        FormAnnotationsListener().attach(events)
        self._event_manager = events
        return self

    def get_event_manager(self) -> EventManager:
        if self._event_manager is None:
            self.set_event_manager(EventManager())
        return self._event_manager

    def set_form_factory(self, factory: Any) -> "AnnotationBuilder":
        self._form_factory = factory
        return self

    def get_form_factory(self) -> Any:
        if self._form_factory is None:
            from html_formgen.factory import Factory
            self._form_factory = Factory()
        return self._form_factory

    # ==================== FLAGS ====================

    def set_preserve_defined_order(self, flag: bool) -> "AnnotationBuilder":
        self._preserve_defined_order = bool(flag)
        return self

    def preserve_defined_order(self) -> bool:
        return self._preserve_defined_order

    def set_infer_types(self, flag: bool) -> "AnnotationBuilder":
        self._infer_types = bool(flag)
        return self

    def infer_types(self) -> bool:
        return self._infer_types

    def is_using_metadata(self) -> bool:
        return self._use_metadata

    def get_entity(self) -> Any:
        """Return the last entity processed."""
        return self._entity

    # ==================== BUILDING ====================

    def resolve_entity(self, entity: Any) -> Any:
        """
        Validate an entity argument.

        Accepts a class, an instance of a user class, or an importable class
        name ("pkg.mod:Class" or "pkg.mod.Class").

        Raises:
            InvalidArgumentError: If the entity is not a class, instance or resolvable name
        """
        if isinstance(entity, str):
            return self._import_class(entity)
        if entity is None or isinstance(entity, _SCALAR_TYPES):
            raise InvalidArgumentError(
                f"get_form_specification expects an object or valid class name; received {entity!r}"
            )
        return entity

    def _import_class(self, name: str) -> type:
        module_name, sep, attr = name.partition(":")
        if not sep:
            module_name, _, attr = name.rpartition(".")
        if not module_name or not attr:
            raise InvalidArgumentError(
                f"get_form_specification expects an object or valid class name; received {name!r}"
            )
        try:
            resolved = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError) as e:
            raise InvalidArgumentError(
                f"get_form_specification expects an object or valid class name; received {name!r}"
            ) from e
        if not isinstance(resolved, type):
            raise InvalidArgumentError(
                f"get_form_specification expects an object or valid class name; received {name!r}"
            )
        return resolved

    def get_form_specification(self, entity: Any, use_metadata: bool = False) -> Dict[str, Any]:
        """
        Derive a form specification from an annotated class or instance.

        Args:
            entity: Class, instance or importable class name
            use_metadata: Read dataclass field metadata instead of Annotated extras

        Returns:
            Form specification for Factory.create_form()

        Raises:
            InvalidArgumentError: If the entity is invalid, or not a dataclass with use_metadata
        """
        entity = self.resolve_entity(entity)
        self._entity = entity
        self._use_metadata = use_metadata
        reader = get_reader(use_metadata)

        form_spec: Dict[str, Any] = {}
        filter_spec: Dict[Any, Any] = {}

        class_reflection = reader.get_class_annotations(entity)
        self.configure_form(class_reflection.annotations, class_reflection, form_spec, filter_spec)

        inferred_types: Dict[str, Any] = {}
        if self._infer_types:
            inferred_types = infer_element_types(entity if isinstance(entity, type) else type(entity))

        for prop in reader.get_property_annotations(entity):
            # Nested ComposedObject builds may have reset these
            self._use_metadata = use_metadata
            self.configure_element(prop.annotations, prop, form_spec, filter_spec,
                                   inferred_types.get(prop.name, prop.type_hint))

        if "input_filter" not in form_spec:
            form_spec["input_filter"] = filter_spec
        elif isinstance(form_spec["input_filter"], Mapping):
            form_spec["input_filter"] = merge(filter_spec, form_spec["input_filter"])

        self._entity = entity
        self._use_metadata = use_metadata
        logger.debug(
            f"Form specification for {getattr(entity, '__name__', type(entity).__name__)}: "
            f"{len(form_spec['elements'])} element(s), {len(form_spec['fieldsets'])} fieldset(s)"
        )
        return form_spec

    def create_form(self, entity: Any, use_metadata: bool = False) -> Form:
        """Build the specification and hand it to the form factory."""
        return self.get_form_factory().create_form(self.get_form_specification(entity, use_metadata))

    def _discover_name(self, annotations: AnnotationCollection, reflection: Any) -> str:
        results = self.get_event_manager().trigger_until(
            _non_empty_string, EVENT_DISCOVER_NAME, self,
            {"annotations": annotations, "reflection": reflection},
        )
        return results.last()

    def configure_form(self, annotations: AnnotationCollection, reflection: Any,
                       form_spec: Dict[str, Any], filter_spec: Dict[Any, Any]) -> None:
        """Name the form, initialise its collections and trigger configure_form per annotation."""
        name = self._discover_name(annotations, reflection)
        form_spec["name"] = name
        form_spec["attributes"] = {}
        form_spec["elements"] = []
        form_spec["fieldsets"] = []

        events = self.get_event_manager()
        for annotation in annotations:
            events.trigger(EVENT_CONFIGURE_FORM, self, {
                "annotation": annotation,
                "name": name,
                "form_spec": form_spec,
                "filter_spec": filter_spec,
            })

    def configure_element(self, annotations: AnnotationCollection, reflection: PropertyReflection,
                          form_spec: Dict[str, Any], filter_spec: Dict[Any, Any],
                          type_hint: Any = None) -> None:
        """Build one element (or fieldset) specification plus its input specification."""
        events = self.get_event_manager()
        excluded = events.trigger_until(
            lambda result: result is True, EVENT_CHECK_FOR_EXCLUDE, self, {"annotations": annotations},
        )
        if excluded.stopped():
            logger.debug(f"Excluding property '{reflection.name}'")
            return

        name = self._discover_name(annotations, reflection)
        element_spec: Dict[str, Any] = {"flags": {}, "spec": {"name": name}}
        input_spec: Dict[str, Any] = {"name": name}

        for annotation in annotations:
            events.trigger(EVENT_CONFIGURE_ELEMENT, self, {
                "annotation": annotation,
                "name": name,
                "element_spec": element_spec,
                "input_spec": input_spec,
                "filter_spec": filter_spec,
            })

        if self._infer_types and "type" not in element_spec["spec"]:
            self._apply_inferred_type(element_spec["spec"], type_hint)

        # A ComposedObject handler may already have stored a nested filter under this name
        if len(input_spec) > 1:
            if name == "type":
                filter_spec[next_index(filter_spec)] = input_spec
            elif name not in filter_spec:
                filter_spec[name] = input_spec

        if not self._preserve_defined_order and self._is_fieldset(element_spec["spec"].get("type")):
            form_spec["fieldsets"].append(element_spec)
        else:
            form_spec["elements"].append(element_spec)

    def _apply_inferred_type(self, spec: Dict[str, Any], type_hint: Any) -> None:
        inferred = infer_element_spec(type_hint)
        if inferred is None:
            return
        spec["type"] = inferred["type"]
        if "options" in inferred:
            spec["options"] = merge(inferred["options"], spec.get("options", {}))
        if "attributes" in inferred:
            spec["attributes"] = merge(inferred["attributes"], spec.get("attributes", {}))

    def _is_fieldset(self, element_type: Any) -> bool:
        if element_type is None:
            return False
        if isinstance(element_type, type):
            return issubclass(element_type, Fieldset)
        try:
            return issubclass(get_element_class(str(element_type)), Fieldset)
        except KeyError:
            return False
