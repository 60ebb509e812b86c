"""General purpose validators."""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, Optional, Pattern, Union

from html_formgen.exceptions import InvalidArgumentError
from html_formgen.protocols import ValidatorInterface
from html_formgen.registry import resolve_component
from .base import AbstractValidator, VALIDATOR_IMPLEMENTATIONS

_NUMERIC_RE = re.compile(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?\s*$")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _comparable(value: Any, bound: Any):
    """
    Coerce a value and a bound to a comparable pair.

    Numeric strings are compared as numbers when the other side is numeric,
    everything else is compared as-is (ISO date strings compare lexically).
    """
    value_numeric = _is_number(value) or (isinstance(value, str) and _NUMERIC_RE.match(value))
    bound_numeric = _is_number(bound) or (isinstance(bound, str) and _NUMERIC_RE.match(bound))
    if value_numeric and bound_numeric:
        return float(value), float(bound)
    return value, bound


class NotEmpty(AbstractValidator):
    """Fails for None, empty or whitespace-only strings and empty collections."""

    _type_id = "NotEmpty"
    message_templates = {
        "is_empty": "Value is required and can't be empty",
    }

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if value is None:
            return self._error("is_empty")
        if isinstance(value, str) and value.strip() == "":
            return self._error("is_empty")
        if isinstance(value, (list, tuple, dict, set)) and len(value) == 0:
            return self._error("is_empty")
        return True


class StringLength(AbstractValidator):
    _type_id = "StringLength"
    message_templates = {
        "invalid": "Invalid type given. String expected",
        "too_short": "The input is less than {min} characters long",
        "too_long": "The input is more than {max} characters long",
    }

    def __init__(self, min: int = 0, max: Optional[int] = None, messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        if max is not None and max < min:
            raise InvalidArgumentError(
                f"StringLength: 'min' ({min}) must be less than or equal to 'max' ({max})"
            )
        self.min = min
        self.max = max

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if not isinstance(value, str):
            return self._error("invalid")
        if len(value) < self.min:
            return self._error("too_short", min=self.min)
        if self.max is not None and len(value) > self.max:
            return self._error("too_long", max=self.max)
        return True


class Regex(AbstractValidator):
    _type_id = "Regex"
    message_templates = {
        "invalid": "Invalid type given. String, integer or float expected",
        "not_match": "The input does not match against pattern '{pattern}'",
    }

    def __init__(self, pattern: Union[str, Pattern], messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        try:
            self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        except re.error as e:
            raise InvalidArgumentError(f"Regex: invalid pattern {pattern!r}: {e}") from e

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if not isinstance(value, str) and not _is_number(value):
            return self._error("invalid")
        if self.pattern.search(str(value)) is None:
            return self._error("not_match", pattern=self.pattern.pattern)
        return True


class GreaterThan(AbstractValidator):
    _type_id = "GreaterThan"
    message_templates = {
        "not_greater": "The input is not greater than '{min}'",
        "not_greater_inclusive": "The input is not greater than or equal to '{min}'",
    }

    def __init__(self, min: Any = 0, inclusive: bool = False, messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        self.min = min
        self.inclusive = inclusive

    def get_min(self) -> Any:
        return self.min

    def get_inclusive(self) -> bool:
        return self.inclusive

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        left, right = _comparable(value, self.min)
        try:
            if self.inclusive:
                return True if left >= right else self._error("not_greater_inclusive", min=self.min)
            return True if left > right else self._error("not_greater", min=self.min)
        except TypeError:
            return self._error("not_greater_inclusive" if self.inclusive else "not_greater", min=self.min)


class LessThan(AbstractValidator):
    _type_id = "LessThan"
    message_templates = {
        "not_less": "The input is not less than '{max}'",
        "not_less_inclusive": "The input is not less or equal than '{max}'",
    }

    def __init__(self, max: Any = 0, inclusive: bool = False, messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        self.max = max
        self.inclusive = inclusive

    def get_max(self) -> Any:
        return self.max

    def get_inclusive(self) -> bool:
        return self.inclusive

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        left, right = _comparable(value, self.max)
        try:
            if self.inclusive:
                return True if left <= right else self._error("not_less_inclusive", max=self.max)
            return True if left < right else self._error("not_less", max=self.max)
        except TypeError:
            return self._error("not_less_inclusive" if self.inclusive else "not_less", max=self.max)


class Between(AbstractValidator):
    _type_id = "Between"
    message_templates = {
        "not_between": "The input is not between '{min}' and '{max}', inclusively",
        "not_between_strict": "The input is not strictly between '{min}' and '{max}'",
    }

    def __init__(self, min: Any = 0, max: Any = None, inclusive: bool = True,
                 messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        if max is None:
            raise InvalidArgumentError("Between: missing option 'max'")
        self.min = min
        self.max = max
        self.inclusive = inclusive

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        low_value, low = _comparable(value, self.min)
        high_value, high = _comparable(value, self.max)
        try:
            if self.inclusive:
                ok = low <= low_value and high_value <= high
            else:
                ok = low < low_value and high_value < high
        except TypeError:
            ok = False
        if ok:
            return True
        return self._error("not_between" if self.inclusive else "not_between_strict", min=self.min, max=self.max)


class InArray(AbstractValidator):
    """
    Checks a value against a haystack.

    Non-strict comparison also matches string forms, so a submitted "1"
    matches a haystack entry of 1.
    """

    _type_id = "InArray"
    message_templates = {
        "not_in_array": "The input was not found in the haystack",
    }

    def __init__(self, haystack: Iterable[Any] = (), strict: bool = False,
                 messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        self.haystack = list(haystack)
        self.strict = strict

    def get_haystack(self) -> list:
        return list(self.haystack)

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if self.strict:
            found = any(type(item) is type(value) and item == value for item in self.haystack)
        else:
            found = value in self.haystack or str(value) in {str(item) for item in self.haystack}
        return True if found else self._error("not_in_array")


class Digits(AbstractValidator):
    _type_id = "Digits"
    message_templates = {
        "not_digits": "The input must contain only digits",
        "string_empty": "The input is an empty string",
        "invalid": "Invalid type given. String, integer or float expected",
    }

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if not isinstance(value, str) and not _is_number(value):
            return self._error("invalid")
        text = str(value)
        if text == "":
            return self._error("string_empty")
        return True if text.isdigit() else self._error("not_digits")


class EmailAddress(AbstractValidator):
    _type_id = "EmailAddress"
    message_templates = {
        "invalid": "Invalid type given. String expected",
        "invalid_format": "The input is not a valid email address. Use the basic format local-part@hostname",
    }
    pattern = re.compile(
        r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@"
        r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
        r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"
    )

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if not isinstance(value, str):
            return self._error("invalid")
        return True if self.pattern.match(value) else self._error("invalid_format")


class Step(AbstractValidator):
    """Numeric step validator: (value - base_value) must be a whole multiple of step."""

    _type_id = "Step"
    message_templates = {
        "invalid": "Invalid value given. Scalar expected",
        "not_step": "The input is not a valid step",
    }

    def __init__(self, base_value: Any = 0, step: Any = 1, messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        self.base_value = Decimal(str(base_value))
        self.step = Decimal(str(step))
        if self.step <= 0:
            raise InvalidArgumentError(f"Step: 'step' must be positive; received {step!r}")

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if not (_is_number(value) or isinstance(value, str)):
            return self._error("invalid")
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            return self._error("invalid")
        return True if (number - self.base_value) % self.step == 0 else self._error("not_step")


class Callback(AbstractValidator):
    """Delegates to ``callback(value, context)``."""

    _type_id = "Callback"
    message_templates = {
        "invalid": "The input is not valid",
    }

    def __init__(self, callback: Callable[..., bool], messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        if not callable(callback):
            raise InvalidArgumentError(f"Callback: expected a callable; received {callback!r}")
        self.callback = callback

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        return True if self.callback(value, context) else self._error("invalid")


class Explode(AbstractValidator):
    """Applies a validator to every item of a list (or delimited string) value."""

    _type_id = "Explode"
    message_templates = {
        "invalid": "Invalid type given",
    }

    def __init__(self, validator: Any, value_delimiter: str = ",", break_on_first_failure: bool = False,
                 messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        self.validator = resolve_component(VALIDATOR_IMPLEMENTATIONS, validator, "validator", ValidatorInterface)
        self.value_delimiter = value_delimiter
        self.break_on_first_failure = break_on_first_failure

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if isinstance(value, str):
            items = value.split(self.value_delimiter)
        elif isinstance(value, (list, tuple, set)):
            items = list(value)
        else:
            return self._error("invalid")

        result = True
        for item in items:
            if self.validator.is_valid(item, context):
                continue
            result = False
            self._messages.update(self.validator.get_messages())
            if self.break_on_first_failure:
                break
        return result


class UploadFile(AbstractValidator):
    """Validates an upload mapping with ``error``, ``name`` and ``tmp_name`` keys."""

    _type_id = "UploadFile"
    message_templates = {
        "ini_size": "File exceeds the defined ini size",
        "form_size": "File exceeds the defined form size",
        "partial": "File was only partially uploaded",
        "no_file": "File was not uploaded",
        "no_tmp_dir": "No temporary directory was found for file",
        "cant_write": "File can't be written",
        "extension": "A PHP extension returned an error while uploading the file",
        "attack": "File was illegally uploaded. This could be a possible attack",
        "file_not_found": "File was not found",
        "unknown": "Unknown error while uploading file",
    }

    # Upload error code -> message key
    _ERROR_KEYS = {
        1: "ini_size",
        2: "form_size",
        3: "partial",
        4: "no_file",
        6: "no_tmp_dir",
        7: "cant_write",
        8: "extension",
    }

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if isinstance(value, (list, tuple)):
            return all(self.is_valid(item, context) for item in value)
        if not isinstance(value, dict) or "error" not in value:
            return self._error("file_not_found")
        error = value["error"]
        if error == 0:
            return True if value.get("tmp_name") else self._error("attack")
        return self._error(self._ERROR_KEYS.get(error, "unknown"))
