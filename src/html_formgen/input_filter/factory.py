"""
InputFilterFactory: builds inputs and input filters from specifications.

Input specification keys: name, type, required, allow_empty,
continue_if_empty, break_on_failure, error_message, fallback_value,
filters, validators.

Input filter specifications map input names to input specifications.
The reserved key ``type`` selects the input filter class; collection
filters also read ``input_filter``, ``count`` and ``required``.
"""

from collections.abc import Mapping
from typing import Any, Dict, Type, Union
import logging

from html_formgen.exceptions import InvalidArgumentError
from html_formgen.registry import lookup
from .input import Input, INPUT_IMPLEMENTATIONS
from .input_filter import InputFilter, CollectionInputFilter, INPUT_FILTER_IMPLEMENTATIONS

logger = logging.getLogger(__name__)

_COLLECTION_KEYS = ("input_filter", "count", "required")


class InputFilterFactory:
    """
    Creates Input and InputFilter objects from mappings.

    Example:
        factory = InputFilterFactory()
        input_filter = factory.create_input_filter({
            "username": {
                "required": True,
                "filters": [{"name": "StringTrim"}],
                "validators": [{"name": "StringLength", "options": {"min": 3}}],
            },
        })
    """

    def _resolve_class(self, type_spec: Any) -> Type:
        if isinstance(type_spec, type):
            return type_spec
        if isinstance(type_spec, str):
            key_registries = (
                (INPUT_IMPLEMENTATIONS, "input"),
                (INPUT_FILTER_IMPLEMENTATIONS, "input filter"),
            )
            for registry, kind in key_registries:
                try:
                    return lookup(registry, type_spec, kind)
                except KeyError:
                    continue
            raise InvalidArgumentError(
                f"Unknown input type '{type_spec}'. "
                f"Available: {sorted(INPUT_IMPLEMENTATIONS) + sorted(INPUT_FILTER_IMPLEMENTATIONS)}"
            )
        raise InvalidArgumentError(f"Input 'type' must be a class or registered id; received {type_spec!r}")

    def create_input(self, spec: Any) -> Union[Input, InputFilter]:
        """
        Create an input from a specification.

        Raises:
            InvalidArgumentError: If spec is not a mapping, Input or InputFilter
        """
        if isinstance(spec, (Input, InputFilter)):
            return spec
        if not isinstance(spec, Mapping):
            raise InvalidArgumentError(
                f"create_input expects a mapping, Input or InputFilter; received {type(spec).__name__}"
            )

        input_class = self._resolve_class(spec["type"]) if "type" in spec else Input
        if issubclass(input_class, InputFilter):
            return self.create_input_filter(spec)
        if not issubclass(input_class, Input):
            raise InvalidArgumentError(f"Input type {input_class.__name__} is not an Input subclass")

        input_ = input_class()
        for key, value in spec.items():
            if key == "name":
                input_.set_name(value)
            elif key == "required":
                input_.set_required(value)
            elif key == "allow_empty":
                input_.set_allow_empty(value)
            elif key == "continue_if_empty":
                input_.set_continue_if_empty(value)
            elif key == "break_on_failure":
                input_.set_break_on_failure(value)
            elif key == "error_message":
                input_.set_error_message(value)
            elif key == "fallback_value":
                input_.set_fallback_value(value)
            elif key == "filters":
                self._populate_filters(input_, value)
            elif key == "validators":
                self._populate_validators(input_, value)
            elif key == "type":
                continue
            else:
                logger.debug(f"create_input: ignoring unknown key '{key}'")
        return input_

    def _populate_filters(self, input_: Input, filters: Any) -> None:
        chain = input_.get_filter_chain()
        for filter_spec in filters or ():
            if isinstance(filter_spec, Mapping) and "priority" in filter_spec:
                chain.attach({k: v for k, v in filter_spec.items() if k != "priority"}, filter_spec["priority"])
            else:
                chain.attach(filter_spec)

    def _populate_validators(self, input_: Input, validators: Any) -> None:
        chain = input_.get_validator_chain()
        for validator_spec in validators or ():
            if isinstance(validator_spec, Mapping):
                break_chain = bool(validator_spec.get("break_chain_on_failure", False))
                priority = validator_spec.get("priority", 1)
                component = {k: v for k, v in validator_spec.items()
                             if k not in ("break_chain_on_failure", "priority")}
                chain.attach(component, break_chain, priority)
            else:
                chain.attach(validator_spec)

    def create_input_filter(self, spec: Any) -> InputFilter:
        """
        Create an input filter from a specification, class, id or instance.

        Raises:
            InvalidArgumentError: If the specification cannot be used
        """
        if isinstance(spec, InputFilter):
            return spec
        if isinstance(spec, (type, str)):
            filter_class = self._resolve_class(spec)
            if not issubclass(filter_class, InputFilter):
                raise InvalidArgumentError(f"{filter_class.__name__} is not an InputFilter subclass")
            return filter_class()
        if not isinstance(spec, Mapping):
            raise InvalidArgumentError(
                f"create_input_filter expects a mapping, class or InputFilter; received {type(spec).__name__}"
            )

        filter_class: Type = InputFilter
        if "type" in spec and not isinstance(spec["type"], Mapping):
            filter_class = self._resolve_class(spec["type"])
            if not issubclass(filter_class, InputFilter):
                raise InvalidArgumentError(f"{filter_class.__name__} is not an InputFilter subclass")

        if issubclass(filter_class, CollectionInputFilter):
            return self._create_collection_input_filter(filter_class, spec)

        input_filter = filter_class()
        for key, value in spec.items():
            if key == "type" and not isinstance(value, Mapping):
                continue
            child = self.create_input(value)
            if isinstance(child, InputFilter):
                input_filter.add(child, key if not isinstance(key, int) else None)
                continue
            if child.get_name() is None and not isinstance(key, int):
                child.set_name(key)
            input_filter.add(child, child.get_name())
        return input_filter

    def _create_collection_input_filter(self, filter_class: Type, spec: Dict[Any, Any]) -> CollectionInputFilter:
        collection = filter_class()
        if "input_filter" in spec:
            collection.set_input_filter(self.create_input_filter(spec["input_filter"]))
        if "count" in spec:
            collection.count = spec["count"]
        if "required" in spec:
            collection.is_required = bool(spec["required"])
        ignored = [key for key in spec if key not in _COLLECTION_KEYS + ("type",)]
        if ignored:
            logger.debug(f"create_input_filter: collection ignores keys {ignored}")
        return collection
