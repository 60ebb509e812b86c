"""
Factory: builds elements, fieldsets and forms from specifications.

Element specification::

    {"type": "date", "name": "start", "options": {...}, "attributes": {...}}

Fieldset and form specifications additionally accept ``elements`` and
``fieldsets`` as lists of ``{"flags": {...}, "spec": {...}}`` entries, plus
``hydrator`` and ``object``. Forms also accept ``input_filter`` and
``validation_group``.
"""

import inspect
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional, Type
import logging

from html_formgen.elements import Element, Fieldset, Form, resolve_element_type
from html_formgen.exceptions import InvalidArgumentError
from html_formgen.hydrators import requires_arguments
from html_formgen.input_filter import InputFilterFactory

logger = logging.getLogger(__name__)


class Factory:
    """
    Creates form objects from specifications.

    Example:
        factory = Factory()
        form = factory.create_form({
            "name": "contact",
            "elements": [
                {"spec": {"name": "email", "type": "email"}},
                {"spec": {"name": "send", "type": "submit"}, "flags": {"priority": -10}},
            ],
            "input_filter": {"email": {"required": True}},
        })
    """

    def __init__(self, input_filter_factory: Optional[InputFilterFactory] = None):
        self._input_filter_factory = input_filter_factory

    def get_input_filter_factory(self) -> InputFilterFactory:
        """Lazy-load the input filter factory."""
        if self._input_filter_factory is None:
            self._input_filter_factory = InputFilterFactory()
        return self._input_filter_factory

    def set_input_filter_factory(self, factory: InputFilterFactory) -> "Factory":
        self._input_filter_factory = factory
        return self

    # ==================== DISPATCH ====================

    def create(self, spec: Any) -> Element:
        """
        Create an element, fieldset or form, dispatching on ``spec["type"]``.

        Raises:
            InvalidArgumentError: If spec is not a mapping or the type is unknown
        """
        spec = self._validate_spec(spec, "create")
        element_class = resolve_element_type(spec.get("type", Element))
        logger.debug(f"Factory.create: '{spec.get('name')}' -> {element_class.__name__}")
        if issubclass(element_class, Form):
            return self.create_form(spec)
        if issubclass(element_class, Fieldset):
            return self.create_fieldset(spec)
        return self.create_element(spec)

    def create_element(self, spec: Any) -> Element:
        """Create a non-container element, applying name, options, attributes and object."""
        spec = self._validate_spec(spec, "create_element")
        element_class = resolve_element_type(spec.get("type", Element))
        return self._configure_element(element_class(), spec)

    def create_fieldset(self, spec: Any) -> Fieldset:
        """Create a fieldset, its children, hydrator and bound object."""
        spec = self._validate_spec(spec, "create_fieldset")
        fieldset_class = self._container_class(spec.get("type", Fieldset), Fieldset)
        fieldset = fieldset_class()
        fieldset.set_form_factory(self)
        self._configure_element(fieldset, spec)
        self._prepare_and_inject_elements(spec.get("elements"), fieldset, "create_fieldset")
        self._prepare_and_inject_fieldsets(spec.get("fieldsets"), fieldset, "create_fieldset")
        self._prepare_and_inject_hydrator(spec.get("hydrator"), fieldset)
        return fieldset

    def create_form(self, spec: Any) -> Form:
        """Create a form; as create_fieldset plus input filter and validation group."""
        spec = self._validate_spec(spec, "create_form")
        spec = dict(spec)
        spec["type"] = self._container_class(spec.get("type", Form), Form)
        form = self.create_fieldset(spec)
        form.set_input_filter_factory(self.get_input_filter_factory())

        input_filter = spec.get("input_filter")
        if input_filter is not None:
            form.set_input_filter(self._prepare_input_filter(input_filter))
        validation_group = spec.get("validation_group")
        if validation_group:
            form.set_validation_group(validation_group)
        return form

    # ==================== HELPERS ====================

    def _validate_spec(self, spec: Any, method: str) -> Mapping:
        if not isinstance(spec, Mapping):
            raise InvalidArgumentError(
                f"Factory.{method} expects a mapping specification; received {type(spec).__name__}"
            )
        return spec

    def _container_class(self, type_spec: Any, base: Type) -> Type:
        container_class = resolve_element_type(type_spec)
        if not issubclass(container_class, base):
            raise InvalidArgumentError(
                f"{container_class.__name__} is not a {base.__name__} subclass"
            )
        return container_class

    def _configure_element(self, element: Element, spec: Mapping) -> Element:
        if isinstance(element, Fieldset):
            element.set_form_factory(self)
        if spec.get("name") is not None:
            element.set_name(spec["name"])
        if spec.get("options"):
            element.set_options(spec["options"])
        if spec.get("attributes"):
            element.set_attributes(spec["attributes"])
        if spec.get("object") is not None:
            self._prepare_and_inject_object(spec["object"], element)
        return element

    def _entries(self, entries: Any, method: str) -> Iterable[Any]:
        if entries is None:
            return ()
        if isinstance(entries, Mapping):
            return entries.values()
        if isinstance(entries, (list, tuple)):
            return entries
        raise InvalidArgumentError(
            f"Factory.{method} expects elements/fieldsets as a list; received {type(entries).__name__}"
        )

    def _prepare_and_inject_elements(self, elements: Any, fieldset: Fieldset, method: str) -> None:
        for entry in self._entries(elements, method):
            if not isinstance(entry, Mapping):
                raise InvalidArgumentError(f"Factory.{method}: element entries must be mappings; received {entry!r}")
            spec = entry.get("spec", entry)
            flags = entry.get("flags") or {}
            fieldset.add(self.create(spec), flags)

    def _prepare_and_inject_fieldsets(self, fieldsets: Any, fieldset: Fieldset, method: str) -> None:
        for entry in self._entries(fieldsets, method):
            if not isinstance(entry, Mapping):
                raise InvalidArgumentError(f"Factory.{method}: fieldset entries must be mappings; received {entry!r}")
            spec = dict(entry.get("spec", entry))
            spec.setdefault("type", Fieldset)
            flags = entry.get("flags") or {}
            fieldset.add(self.create(spec), flags)

    def _prepare_and_inject_hydrator(self, hydrator: Any, fieldset: Fieldset) -> None:
        if hydrator is None:
            return
        try:
            fieldset.set_hydrator(hydrator)
        except InvalidArgumentError as e:
            raise InvalidArgumentError(
                f"Factory could not create hydrator for '{fieldset.get_name()}': {e}"
            ) from e

    def _prepare_and_inject_object(self, obj: Any, element: Element) -> None:
        if not isinstance(element, Fieldset):
            logger.debug(f"Factory: ignoring 'object' for non-fieldset '{element.get_name()}'")
            return
        if inspect.isclass(obj):
            if requires_arguments(obj):
                # Built from the validated values in bind_values()
                element.allowed_object_binding_class = obj
                logger.debug(f"Factory: '{element.get_name()}' binds new {obj.__name__} instances")
                return
            try:
                obj = obj()
            except TypeError as e:
                raise InvalidArgumentError(
                    f"Factory could not instantiate object {obj.__name__} for '{element.get_name()}': {e}"
                ) from e
        element.set_object(obj)

    def _prepare_input_filter(self, input_filter: Any) -> Any:
        if isinstance(input_filter, Mapping):
            return dict(input_filter)
        return self.get_input_filter_factory().create_input_filter(input_filter)


def create_form(spec: Dict[str, Any]) -> Form:
    """Module-level convenience wrapper around Factory().create_form()."""
    return Factory().create_form(spec)
