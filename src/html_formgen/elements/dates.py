"""
Date and time elements.

Each element carries a strftime ``format`` and derives its validators from the
``min``, ``max`` and ``step`` attributes:

- Date validator for the format
- GreaterThan(min, inclusive) when ``min`` is set
- LessThan(max, inclusive) when ``max`` is set
- DateStep unless ``step`` is "any"

``min`` and ``max`` must themselves match the format; anything else raises
InvalidArgumentError when the input specification is requested.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil.relativedelta import relativedelta

from html_formgen.exceptions import InvalidArgumentError
from html_formgen.protocols import InputProvider
from html_formgen.validators import Date as DateValidator, DateStep, GreaterThan, LessThan
from .element import Element

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DateTime(Element, InputProvider):
    """
    Base date/time element.

    Subclasses set DATETIME_FORMAT and implement the step interval through
    ``_step_interval()``.
    """

    _type_id = "datetime"
    _default_attributes = {"type": "datetime"}
    DATETIME_FORMAT = "%Y-%m-%dT%H:%M%z"

    def __init__(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self.format = self.DATETIME_FORMAT
        super().__init__(name, options)

    def _apply_option(self, key: str, value: Any) -> None:
        if key == "format":
            self.set_format(value)
        else:
            super()._apply_option(key, value)

    def set_format(self, fmt: str) -> "DateTime":
        self.format = fmt
        return self

    def get_format(self) -> str:
        return self.format

    def get_value(self, return_formatted_value: bool = True) -> Any:
        """Return the value, formatting date/datetime objects with the element format."""
        value = self.value
        if return_formatted_value and isinstance(value, date):
            return value.strftime(self.format)
        return value

    def _is_valid_format(self, value: Any) -> bool:
        if isinstance(value, date):
            return True
        try:
            datetime.strptime(str(value), self.format)
        except ValueError:
            return False
        return True

    def _checked_bound(self, attribute: str) -> Any:
        value = self.get_attribute(attribute)
        if not self._is_valid_format(value):
            raise InvalidArgumentError(
                f"{type(self).__name__}.get_validators expects '{attribute}' to conform to "
                f"'{self.format}'; received {value!r}"
            )
        if isinstance(value, date):
            return value.strftime(self.format)
        return value

    def _step_interval(self, step: Any) -> relativedelta:
        """Minutes, as for a datetime input."""
        return relativedelta(minutes=int(step))

    def _default_step(self) -> Any:
        return 1

    def _base_value(self) -> str:
        minimum = self.get_attribute("min")
        if minimum is not None:
            return self._checked_bound("min")
        return EPOCH.strftime(self.format)

    def get_step_validator(self) -> DateStep:
        step = self.get_attribute("step")
        step = self._default_step() if step is None else step
        return DateStep(format=self.format, base_value=self._base_value(), step=self._step_interval(step))

    def get_validators(self) -> List[Any]:
        validators: List[Any] = [DateValidator(format=self.format)]

        if self.has_attribute("min"):
            validators.append(GreaterThan(min=self._checked_bound("min"), inclusive=True))
        if self.has_attribute("max"):
            validators.append(LessThan(max=self._checked_bound("max"), inclusive=True))

        if self.get_attribute("step") != "any":
            validators.append(self.get_step_validator())
        return validators

    def get_input_specification(self) -> Dict[str, Any]:
        return {
            "name": self.get_name(),
            "required": True,
            "filters": [{"name": "StringTrim"}],
            "validators": self.get_validators(),
        }


class Date(DateTime):
    """Date element; ``step`` counts days."""

    _type_id = "date"
    _default_attributes = {"type": "date"}
    DATETIME_FORMAT = "%Y-%m-%d"

    def _step_interval(self, step: Any) -> relativedelta:
        return relativedelta(days=int(step))


class DateTimeLocal(DateTime):
    """Local date and time element; ``step`` counts seconds (default 60)."""

    _type_id = "datetime-local"
    _default_attributes = {"type": "datetime-local"}
    DATETIME_FORMAT = "%Y-%m-%dT%H:%M"

    def _step_interval(self, step: Any) -> relativedelta:
        return relativedelta(seconds=int(step))

    def _default_step(self) -> Any:
        return 60


class Month(DateTime):
    """Month element; ``step`` counts months."""

    _type_id = "month"
    _default_attributes = {"type": "month"}
    DATETIME_FORMAT = "%Y-%m"

    def _step_interval(self, step: Any) -> relativedelta:
        return relativedelta(months=int(step))
