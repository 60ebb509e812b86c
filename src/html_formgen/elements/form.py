"""
Form: the top-level fieldset.

A form owns the input filter used to validate submitted data. When no filter
is supplied, or the supplied one lacks inputs for some elements, defaults are
taken from the elements themselves (InputProvider / InputFilterProvider).
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional
import logging

from html_formgen.exceptions import DomainError, InvalidArgumentError
from html_formgen.input_filter import CollectionInputFilter, Input, InputFilter, InputFilterFactory
from html_formgen.protocols import InputFilterProvider, InputProvider
from .fieldset import Collection, Fieldset
from .inputs import File

logger = logging.getLogger(__name__)


class Form(Fieldset):
    """
    HTML form with data validation and object binding.

    Example:
        form = Form("login")
        form.add({"name": "username", "type": "text"})
        form.set_input_filter({"username": {"required": True}})
        form.set_data({"username": "alice"})
        if form.is_valid():
            data = form.get_data()
    """

    _type_id = "form"
    _default_attributes = {"method": "POST"}

    def __init__(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self._input_filter: Optional[InputFilter] = None
        self._input_filter_spec: Any = None
        self._input_filter_factory: Optional[InputFilterFactory] = None
        self._defaults_attached = False
        self._data: Optional[Dict[str, Any]] = None
        self._has_validated = False
        self._is_valid = False
        self._validation_group: Optional[Any] = None
        self._is_prepared = False
        self.bind_on_validate = True
        super().__init__(name, options)

    def _apply_option(self, key: str, value: Any) -> None:
        if key == "bind_on_validate":
            self.bind_on_validate = bool(value)
        else:
            super()._apply_option(key, value)

    # ==================== INPUT FILTER ====================

    def get_input_filter_factory(self) -> InputFilterFactory:
        if self._input_filter_factory is None:
            self._input_filter_factory = InputFilterFactory()
        return self._input_filter_factory

    def set_input_filter_factory(self, factory: InputFilterFactory) -> "Form":
        self._input_filter_factory = factory
        return self

    def set_input_filter(self, input_filter: Any) -> "Form":
        """
        Set the input filter as an InputFilter, class, registered id or specification mapping.

        Specifications are turned into a filter lazily by get_input_filter().
        """
        if isinstance(input_filter, InputFilter):
            self._input_filter, self._input_filter_spec = input_filter, None
        else:
            self._input_filter, self._input_filter_spec = None, input_filter
        self._defaults_attached = False
        return self

    def get_input_filter(self) -> InputFilter:
        """Return the input filter, creating it and attaching element defaults on first use."""
        if self._input_filter is None:
            spec = self._input_filter_spec if self._input_filter_spec is not None else {}
            self._input_filter = self.get_input_filter_factory().create_input_filter(spec)
        if not self._defaults_attached:
            self._attach_input_filter_defaults(self._input_filter, self)
            self._defaults_attached = True
        return self._input_filter

    def _attach_input_filter_defaults(self, input_filter: InputFilter, fieldset: Fieldset) -> None:
        factory = self.get_input_filter_factory()

        if isinstance(fieldset, InputFilterProvider):
            provided = factory.create_input_filter(fieldset.get_input_filter_specification())
            for name, child in provided.get_inputs().items():
                if not input_filter.has(name):
                    input_filter.add(child, name)

        for name, element in fieldset.items():
            if isinstance(element, Collection):
                self._attach_collection_defaults(input_filter, name, element)
            elif isinstance(element, Fieldset):
                if input_filter.has(name) and isinstance(input_filter.get(name), InputFilter):
                    nested = input_filter.get(name)
                else:
                    nested = InputFilter()
                    input_filter.add(nested, name)
                self._attach_input_filter_defaults(nested, element)
            elif not input_filter.has(name):
                if isinstance(element, InputProvider):
                    spec = dict(element.get_input_specification())
                    spec["name"] = name
                    input_filter.add(factory.create_input(spec), name)
                else:
                    input_filter.add(Input(name).set_required(False), name)
                logger.debug(f"Form '{self.get_name()}': attached default input for '{name}'")

    def _attach_collection_defaults(self, input_filter: InputFilter, name: str, collection: Collection) -> None:
        if input_filter.has(name):
            existing = input_filter.get(name)
            if isinstance(existing, CollectionInputFilter):
                target = collection.get_target_element()
                if isinstance(target, Fieldset):
                    self._attach_input_filter_defaults(existing.get_input_filter(), target)
            return

        target = collection.get_target_element()
        template = InputFilter()
        if isinstance(target, Fieldset):
            self._attach_input_filter_defaults(template, target)
        input_filter.add(CollectionInputFilter(input_filter=template), name)

    # ==================== DATA / VALIDATION ====================

    def set_data(self, data: Any) -> "Form":
        """
        Set submitted data and populate element values.

        Raises:
            InvalidArgumentError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                f"Form.set_data expects a mapping; received {type(data).__name__}"
            )
        self._data = dict(data)
        self._has_validated = False
        self.populate_values(self._data)
        return self

    def set_validation_group(self, *names: Any) -> "Form":
        """Limit validation to the named inputs; see InputFilter.set_validation_group()."""
        if len(names) == 1 and isinstance(names[0], (list, tuple, dict)):
            self._validation_group = names[0]
        else:
            self._validation_group = list(names)
        self._has_validated = False
        return self

    def get_validation_group(self) -> Optional[Any]:
        return self._validation_group

    def is_valid(self) -> bool:
        """
        Validate the current data.

        On success with a bound object (and bind_on_validate), the object is
        hydrated with the filtered values; with only an allowed_object_binding_class
        a new instance is created and bound. On failure, messages are pushed to
        the elements.

        Raises:
            DomainError: If no data has been set
        """
        if self._data is None:
            raise DomainError(
                f"{type(self).__name__}.is_valid is unable to validate as there is no data currently set"
            )

        input_filter = self.get_input_filter()
        input_filter.set_data(self._data)
        if self._validation_group is not None:
            input_filter.set_validation_group(self._validation_group)
        else:
            input_filter.clear_validation_group()

        self._is_valid = input_filter.is_valid()
        self._has_validated = True
        if not self._is_valid:
            self.set_messages(input_filter.get_messages())
        elif self.bind_on_validate and self.can_bind_values():
            bound = self.bind_values(input_filter.get_values())
            if self.object is None:
                self.object = bound
        logger.debug(f"Form '{self.get_name()}' validated: {self._is_valid}")
        return self._is_valid

    def has_validated(self) -> bool:
        return self._has_validated

    def get_data(self) -> Any:
        """
        Return the validated data.

        Returns:
            The bound object when one is set, otherwise the filtered values

        Raises:
            DomainError: If is_valid() has not been called since data was set
        """
        if not self._has_validated:
            raise DomainError(
                f"{type(self).__name__}.get_data cannot return data as validation has not yet occurred"
            )
        if self.object is not None and self.bind_on_validate and self._is_valid:
            return self.object
        return self.get_input_filter().get_values()

    # ==================== BINDING ====================

    def bind(self, obj: Any) -> "Form":
        """Bind an object and populate the form from its extracted values."""
        self.set_object(obj)
        values = self.extract()
        if values:
            self.populate_values(values)
        return self

    # ==================== PREPARATION ====================

    def prepare(self) -> "Form":
        """
        Prepare for rendering: nested element names become ``outer[inner]``
        and forms containing a File element get a multipart enctype.
        Repeated calls are no-ops.
        """
        if self._is_prepared:
            return self
        for name, fieldset in self.get_fieldsets().items():
            fieldset._prepare_children(name)
        if self._contains_file(self):
            self.set_attribute("enctype", "multipart/form-data")
        self._is_prepared = True
        return self

    def is_prepared(self) -> bool:
        return self._is_prepared

    def _contains_file(self, fieldset: Fieldset) -> bool:
        for element in fieldset:
            if isinstance(element, File):
                return True
            if isinstance(element, Collection) and isinstance(element.get_target_element(), File):
                return True
            if isinstance(element, Fieldset) and self._contains_file(element):
                return True
        return False

    def get_element_names(self) -> List[str]:
        return [name for name, _ in self.items()]
