"""
Date validators.

Date checks that a value parses with a strftime format. DateStep checks that a
value lies a whole number of steps away from a base value; steps are
``dateutil.relativedelta`` intervals so month and year steps follow the calendar.
"""

import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Union

from dateutil.relativedelta import relativedelta

from html_formgen.exceptions import InvalidArgumentError
from .base import AbstractValidator

DEFAULT_DATE_FORMAT = "%Y-%m-%d"

_DURATION_RE = re.compile(
    r"^P(?!$)(?:(?P<years>\d+)Y)?(?:(?P<months>\d+)M)?(?:(?P<weeks>\d+)W)?(?:(?P<days>\d+)D)?"
    r"(?:T(?=\d)(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def parse_duration(duration: str) -> relativedelta:
    """
    Parse an ISO 8601 duration such as "P1D", "P1M" or "PT60S".

    Raises:
        InvalidArgumentError: If the string is not a duration
    """
    match = _DURATION_RE.match(duration)
    if match is None:
        raise InvalidArgumentError(f"Invalid ISO 8601 duration {duration!r}")
    parts = {key: int(val) for key, val in match.groupdict().items() if val is not None}
    return relativedelta(**parts)


def to_relativedelta(step: Union[relativedelta, timedelta, str, int]) -> relativedelta:
    """Normalize a step given as relativedelta, timedelta, ISO duration or a number of days."""
    if isinstance(step, relativedelta):
        return step
    if isinstance(step, timedelta):
        return relativedelta(days=step.days, seconds=step.seconds, microseconds=step.microseconds)
    if isinstance(step, str):
        return parse_duration(step)
    if isinstance(step, int) and not isinstance(step, bool):
        return relativedelta(days=step)
    raise InvalidArgumentError(f"Unsupported step {step!r}; expected relativedelta, timedelta, duration or int")


def to_datetime(value: Any, fmt: str) -> datetime:
    """
    Convert a date, datetime or formatted string to a naive datetime.

    Timezone information is dropped so daylight saving transitions never
    shift a comparison.

    Raises:
        ValueError: If a string does not match the format
        TypeError: For unsupported value types
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        result = datetime.strptime(value, fmt)
    else:
        raise TypeError(f"Cannot convert {type(value).__name__} to a datetime")
    return result.replace(tzinfo=None)


class Date(AbstractValidator):
    _type_id = "Date"
    message_templates = {
        "invalid": "Invalid type given. String, date or datetime expected",
        "invalid_date": "The input does not appear to be a valid date",
        "false_format": "The input does not fit the date format '{format}'",
    }

    def __init__(self, format: str = DEFAULT_DATE_FORMAT, messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        self.format = format

    def get_format(self) -> str:
        return self.format

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if isinstance(value, date):
            return True
        if not isinstance(value, str):
            return self._error("invalid")
        try:
            datetime.strptime(value, self.format)
        except ValueError:
            return self._error("false_format", format=self.format)
        return True


class DateStep(AbstractValidator):
    """
    Validates that a date is a whole number of steps from ``base_value``.

    Example:
        >>> validator = DateStep(base_value="2000-01-01", step=relativedelta(days=2))
        >>> validator.is_valid("2000-01-05")
        True
    """

    _type_id = "DateStep"
    message_templates = {
        "invalid": "Invalid type given. String, date or datetime expected",
        "invalid_date": "The input does not appear to be a valid date",
        "false_format": "The input does not fit the date format '{format}'",
        "not_step": "The input is not a valid step",
    }

    def __init__(self, format: str = DEFAULT_DATE_FORMAT, base_value: Any = "1970-01-01",
                 step: Union[relativedelta, timedelta, str, int] = relativedelta(days=1),
                 messages: Optional[Dict[str, str]] = None):
        super().__init__(messages)
        self.format = format
        self.base_value = base_value
        self.step = to_relativedelta(step)
        if self.step == relativedelta():
            raise InvalidArgumentError("DateStep: 'step' must not be zero")

    def get_format(self) -> str:
        return self.format

    def get_base_value(self) -> Any:
        return self.base_value

    def get_step(self) -> relativedelta:
        return self.step

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._setup(value)
        if not isinstance(value, (str, date)):
            return self._error("invalid")
        try:
            current = to_datetime(value, self.format)
        except ValueError:
            return self._error("false_format", format=self.format)
        try:
            base = to_datetime(self.base_value, self.format)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(
                f"DateStep: base value {self.base_value!r} does not fit format '{self.format}'"
            ) from e

        return True if self._fits_step(base, current) else self._error("not_step")

    def _fits_step(self, base: datetime, current: datetime) -> bool:
        step = self.step
        step_months = step.years * 12 + step.months
        step_seconds = timedelta(days=step.days, hours=step.hours, minutes=step.minutes,
                                 seconds=step.seconds, microseconds=step.microseconds).total_seconds()

        if step_months == 0:
            return (current - base).total_seconds() % step_seconds == 0

        if step_seconds == 0:
            diff_months = (current.year - base.year) * 12 + (current.month - base.month)
            if diff_months % step_months != 0:
                return False
            return base + relativedelta(months=diff_months) == current

        # Mixed calendar and clock steps: walk from the base.
        direction = 1 if current >= base else -1
        candidate = base
        while (candidate < current) if direction == 1 else (candidate > current):
            candidate = candidate + step if direction == 1 else candidate - step
        return candidate == current
