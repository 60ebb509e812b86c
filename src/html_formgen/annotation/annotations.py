"""
Annotation value objects.

Attach these to classes (``@form_annotations(...)`` or ``__form_annotations__``)
and properties (``typing.Annotated[...]`` extras or
``field(metadata={"form": [...]})``) to describe the form built from them.

Example:
    @form_annotations(Name("user"), Attributes({"class": "user-form"}))
    @dataclass
    class User:
        username: Annotated[str, Filter("StringTrim"), Validator("StringLength", {"min": 3})]
        born: Annotated[date, Type("date"), Options({"label": "Birth date"})]
        password_hash: Annotated[str, Exclude()] = ""
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from html_formgen.exceptions import InvalidArgumentError


class Annotation:
    """Base for all annotation value objects."""

    def __repr__(self) -> str:
        values = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({values})"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    __hash__ = None


def _require_mapping(annotation: str, value: Any) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(
            f"{annotation} annotation expects a mapping; received {type(value).__name__}"
        )
    return dict(value)


def _require_bool(annotation: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidArgumentError(
            f"{annotation} annotation expects a boolean; received {value!r}"
        )
    return value


class Attributes(Annotation):
    """HTML attributes for the form or element."""

    def __init__(self, attributes: Mapping):
        self.attributes = _require_mapping("Attributes", attributes)

    def get_attributes(self) -> Dict[str, Any]:
        return dict(self.attributes)


class Options(Annotation):
    """Behavioral options for the form or element."""

    def __init__(self, options: Mapping):
        self.options = _require_mapping("Options", options)

    def get_options(self) -> Dict[str, Any]:
        return dict(self.options)


class Name(Annotation):
    """Overrides the discovered form or element name."""

    def __init__(self, name: str):
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"Name annotation expects a non-empty string; received {name!r}")
        self.name = name

    def get_name(self) -> str:
        return self.name


class Type(Annotation):
    """Element, fieldset or form class (or its registered id)."""

    def __init__(self, element_type: Any):
        if not (isinstance(element_type, str) and element_type) and not isinstance(element_type, type):
            raise InvalidArgumentError(f"Type annotation expects a class or type id; received {element_type!r}")
        self.type = element_type

    def get_type(self) -> Any:
        return self.type


class Flags(Annotation):
    """Flags used when adding the element to its fieldset (name, priority)."""

    def __init__(self, flags: Mapping):
        self.flags = _require_mapping("Flags", flags)

    def get_flags(self) -> Dict[str, Any]:
        return dict(self.flags)


class Exclude(Annotation):
    """Marks a property as not part of the form."""


class Required(Annotation):
    def __init__(self, required: bool = True):
        self.required = _require_bool("Required", required)

    def get_required(self) -> bool:
        return self.required


class AllowEmpty(Annotation):
    def __init__(self, allow_empty: bool = True):
        self.allow_empty = _require_bool("AllowEmpty", allow_empty)

    def get_allow_empty(self) -> bool:
        return self.allow_empty


class ContinueIfEmpty(Annotation):
    def __init__(self, continue_if_empty: bool = True):
        self.continue_if_empty = _require_bool("ContinueIfEmpty", continue_if_empty)

    def get_continue_if_empty(self) -> bool:
        return self.continue_if_empty


class ErrorMessage(Annotation):
    """Single message replacing all validation messages of the input."""

    def __init__(self, message: str):
        if not isinstance(message, str):
            raise InvalidArgumentError(f"ErrorMessage annotation expects a string; received {message!r}")
        self.message = message

    def get_message(self) -> str:
        return self.message


class Filter(Annotation):
    """A filter for the element's input: Filter("StringTrim") or Filter("ToInt", priority=10)."""

    def __init__(self, name: Any, options: Optional[Mapping] = None, priority: Optional[int] = None):
        if not name:
            raise InvalidArgumentError("Filter annotation requires a filter name or class")
        self.name = name
        self.options = _require_mapping("Filter", options) if options is not None else {}
        self.priority = priority

    def get_filter_specification(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {"name": self.name}
        if self.options:
            spec["options"] = dict(self.options)
        if self.priority is not None:
            spec["priority"] = self.priority
        return spec


class Validator(Annotation):
    """A validator for the element's input."""

    def __init__(self, name: Any, options: Optional[Mapping] = None,
                 break_chain_on_failure: bool = False, priority: Optional[int] = None):
        if not name:
            raise InvalidArgumentError("Validator annotation requires a validator name or class")
        self.name = name
        self.options = _require_mapping("Validator", options) if options is not None else {}
        self.break_chain_on_failure = _require_bool("Validator", break_chain_on_failure)
        self.priority = priority

    def get_validator_specification(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {"name": self.name}
        if self.options:
            spec["options"] = dict(self.options)
        if self.break_chain_on_failure:
            spec["break_chain_on_failure"] = True
        if self.priority is not None:
            spec["priority"] = self.priority
        return spec


class Input(Annotation):
    """Input class (or registered id) used for the element."""

    def __init__(self, input: Any):
        if not input:
            raise InvalidArgumentError("Input annotation requires an input class or type id")
        self.input = input

    def get_input(self) -> Any:
        return self.input


class InputFilter(Annotation):
    """Input filter specification, class or instance for the form."""

    def __init__(self, input_filter: Any):
        if input_filter is None:
            raise InvalidArgumentError("InputFilter annotation requires a specification, class or instance")
        self.input_filter = input_filter

    def get_input_filter(self) -> Any:
        return self.input_filter


class Hydrator(Annotation):
    """Hydrator class, id, instance or {"type", "options"} mapping."""

    def __init__(self, hydrator: Any):
        if hydrator is None:
            raise InvalidArgumentError("Hydrator annotation requires a hydrator specification")
        self.hydrator = hydrator

    def get_hydrator(self) -> Any:
        return self.hydrator


class Instance(Annotation):
    """Object (or class to instantiate) bound to the form or fieldset."""

    def __init__(self, obj: Any):
        if obj is None:
            raise InvalidArgumentError("Instance annotation requires an object")
        self.object = obj

    def get_object(self) -> Any:
        return self.object


class ComposedObject(Annotation):
    """
    Builds a nested fieldset (or a collection of them) from another annotated class.

    Args:
        target_object: Class (or importable class name) to build from
        is_collection: Build a Collection of target fieldsets instead of a single fieldset
        options: Options merged into the element's options
    """

    def __init__(self, target_object: Any, is_collection: bool = False, options: Optional[Mapping] = None):
        if target_object is None or target_object == "":
            raise InvalidArgumentError("ComposedObject annotation requires a target object")
        self.target_object = target_object
        self.is_collection = _require_bool("ComposedObject", is_collection)
        self.options = _require_mapping("ComposedObject", options) if options is not None else {}

    def get_composed_object(self) -> Any:
        return self.target_object

    def is_collection_object(self) -> bool:
        return self.is_collection

    def get_options(self) -> Dict[str, Any]:
        return dict(self.options)


class ValidationGroup(Annotation):
    """Validation group applied to the form."""

    def __init__(self, group: Any):
        if not isinstance(group, (list, tuple, Mapping)):
            raise InvalidArgumentError(
                f"ValidationGroup annotation expects a list or mapping; received {type(group).__name__}"
            )
        self.group = list(group) if isinstance(group, (list, tuple)) else dict(group)

    def get_validation_group(self) -> Any:
        return self.group


ANNOTATION_CLASSES: List[type] = [
    Attributes, Options, Name, Type, Flags, Exclude, Required, AllowEmpty,
    ContinueIfEmpty, ErrorMessage, Filter, Validator, Input, InputFilter,
    Hydrator, Instance, ComposedObject, ValidationGroup,
]
