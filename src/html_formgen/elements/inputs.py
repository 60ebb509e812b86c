"""
Concrete input elements.

Elements implementing InputProvider describe their own default validation;
the rest get an optional, unvalidated input when a form builds its filter.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from html_formgen.protocols import InputProvider
from html_formgen.validators import (
    EmailAddress, Explode, GreaterThan, InArray, LessThan, Regex, Step,
)
from .element import Element


class Text(Element):
    _type_id = "text"
    _default_attributes = {"type": "text"}


class Hidden(Element):
    _type_id = "hidden"
    _default_attributes = {"type": "hidden"}


class Password(Element):
    _type_id = "password"
    _default_attributes = {"type": "password"}


class Textarea(Element):
    _type_id = "textarea"
    _default_attributes = {"type": "textarea"}


class Submit(Element):
    _type_id = "submit"
    _default_attributes = {"type": "submit"}


class Button(Element):
    _type_id = "button"
    _default_attributes = {"type": "button"}


class Email(Element, InputProvider):
    """Email input; the "multiple" attribute validates a comma separated list."""

    _type_id = "email"
    _default_attributes = {"type": "email"}

    def get_validators(self) -> List[Any]:
        if self.get_attribute("multiple"):
            return [Explode(validator=EmailAddress(), value_delimiter=",")]
        return [EmailAddress()]

    def get_input_specification(self) -> Dict[str, Any]:
        return {
            "name": self.get_name(),
            "required": True,
            "filters": [{"name": "StringTrim"}],
            "validators": self.get_validators(),
        }


class Number(Element, InputProvider):
    """Numeric input honoring the min, max and step attributes."""

    _type_id = "number"
    _default_attributes = {"type": "number"}
    NUMBER_PATTERN = r"^-?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?$"

    def get_validators(self) -> List[Any]:
        validators: List[Any] = [
            Regex(self.NUMBER_PATTERN, messages={"not_match": "The input is not a valid number"}),
        ]
        minimum = self.get_attribute("min")
        maximum = self.get_attribute("max")
        if minimum is not None:
            validators.append(GreaterThan(min=minimum, inclusive=True))
        if maximum is not None:
            validators.append(LessThan(max=maximum, inclusive=True))

        step = self.get_attribute("step", 1)
        if step != "any":
            validators.append(Step(base_value=minimum if minimum is not None else 0, step=step))
        return validators

    def get_input_specification(self) -> Dict[str, Any]:
        return {
            "name": self.get_name(),
            "required": True,
            "filters": [{"name": "StringTrim"}],
            "validators": self.get_validators(),
        }


class Checkbox(Element, InputProvider):
    """
    Checkbox with configurable checked/unchecked values.

    Options: use_hidden_element (default True), checked_value ("1"),
    unchecked_value ("0").
    """

    _type_id = "checkbox"
    _default_attributes = {"type": "checkbox"}

    def __init__(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self.use_hidden_element = True
        self.checked_value = "1"
        self.unchecked_value = "0"
        super().__init__(name, options)
        self.value = self.unchecked_value

    def _apply_option(self, key: str, value: Any) -> None:
        if key == "use_hidden_element":
            self.use_hidden_element = bool(value)
        elif key == "checked_value":
            self.checked_value = str(value)
        elif key == "unchecked_value":
            self.unchecked_value = str(value)
        else:
            super()._apply_option(key, value)

    def set_checked(self, checked: bool) -> "Checkbox":
        self.value = self.checked_value if checked else self.unchecked_value
        return self

    def is_checked(self) -> bool:
        return self.value == self.checked_value

    def set_value(self, value: Any) -> "Checkbox":
        if isinstance(value, bool):
            return self.set_checked(value)
        return self.set_checked(str(value) == self.checked_value)

    def get_input_specification(self) -> Dict[str, Any]:
        return {
            "name": self.get_name(),
            "required": True,
            "validators": [InArray(haystack=[self.checked_value, self.unchecked_value], strict=False)],
        }


class Select(Element, InputProvider):
    """
    Select element.

    value_options accepts:
    - a mapping of value -> label
    - a mapping of value -> {"label", "value", "disabled", "selected", "attributes"}
    - a mapping of key -> {"label", "options": {...}} for option groups
    - a list of option mappings
    """

    _type_id = "select"
    _default_attributes = {"type": "select"}

    def __init__(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self.value_options: Any = {}
        self.empty_option: Optional[Any] = None
        self.disable_inarray_validator = False
        self.unselected_value: Optional[str] = None
        super().__init__(name, options)

    def _apply_option(self, key: str, value: Any) -> None:
        if key == "value_options":
            self.set_value_options(value)
        elif key == "empty_option":
            self.set_empty_option(value)
        elif key == "disable_inarray_validator":
            self.disable_inarray_validator = bool(value)
        elif key == "unselected_value":
            self.unselected_value = value
        else:
            super()._apply_option(key, value)

    def set_value_options(self, options: Any) -> "Select":
        self.value_options = options
        return self

    def get_value_options(self) -> Any:
        return self.value_options

    def set_empty_option(self, option: Any) -> "Select":
        self.empty_option = option
        return self

    def get_empty_option(self) -> Any:
        return self.empty_option

    def get_option_values(self, options: Any = None) -> List[Any]:
        """Flatten value_options (including option groups) into the list of selectable values."""
        options = self.value_options if options is None else options
        values: List[Any] = []
        items = options.items() if isinstance(options, Mapping) else enumerate(options)
        for key, option in items:
            if isinstance(option, Mapping):
                if "options" in option:
                    values.extend(self.get_option_values(option["options"]))
                elif "value" in option:
                    values.append(option["value"])
                else:
                    values.append(key)
            else:
                values.append(key if isinstance(options, Mapping) else option)
        return values

    def get_validators(self) -> List[Any]:
        if self.disable_inarray_validator:
            return []
        haystack = self.get_option_values()
        if self.empty_option is not None:
            haystack.append("")
        in_array = InArray(haystack=haystack, strict=False)
        if self.get_attribute("multiple"):
            return [Explode(validator=in_array, value_delimiter=",")]
        return [in_array]

    def get_input_specification(self) -> Dict[str, Any]:
        spec = {
            "name": self.get_name(),
            "required": True,
            "validators": self.get_validators(),
        }
        if self.unselected_value is not None:
            spec["fallback_value"] = self.unselected_value
        return spec


class File(Element, InputProvider):
    """File upload element; validated by a FileInput."""

    _type_id = "file"
    _default_attributes = {"type": "file"}

    def get_input_specification(self) -> Dict[str, Any]:
        return {
            "type": "file",
            "name": self.get_name(),
            "required": True,
        }
