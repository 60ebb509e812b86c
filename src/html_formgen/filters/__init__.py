"""
Value filters.

Filters normalize submitted values before validation. They auto-register
under their ``_type_id`` so input specifications can name them
(``{"name": "StringTrim"}``).
"""

import re
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type
import logging

from html_formgen.exceptions import InvalidArgumentError
from html_formgen.protocols import FilterInterface
from html_formgen.registry import RegistryMeta, resolve_component

logger = logging.getLogger(__name__)

# Maps normalized filter id -> filter class
FILTER_IMPLEMENTATIONS: Dict[str, Type] = {}


class AbstractFilter(FilterInterface, metaclass=RegistryMeta):
    """Base class for registered filters."""

    _registry = FILTER_IMPLEMENTATIONS

    def __call__(self, value: Any) -> Any:
        return self.filter(value)


class StringTrim(AbstractFilter):
    _type_id = "StringTrim"

    def __init__(self, charlist: Optional[str] = None):
        self.charlist = charlist

    def filter(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return value.strip(self.charlist)


class StripTags(AbstractFilter):
    _type_id = "StripTags"
    _tag_re = re.compile(r"<[^>]*>")

    def filter(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return self._tag_re.sub("", value)


class StringToLower(AbstractFilter):
    _type_id = "StringToLower"

    def filter(self, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class StringToUpper(AbstractFilter):
    _type_id = "StringToUpper"

    def filter(self, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class ToInt(AbstractFilter):
    """Casts numeric strings and floats to int; other values pass through for validators to reject."""

    _type_id = "ToInt"

    def filter(self, value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, (float, Decimal)):
            return int(value)
        if isinstance(value, str):
            try:
                return int(Decimal(value.strip()))
            except (ArithmeticError, ValueError):
                return value
        return value


class ToFloat(AbstractFilter):
    _type_id = "ToFloat"

    def filter(self, value: Any) -> Any:
        if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return value
        return value


class ToNull(AbstractFilter):
    """
    Converts "empty" values to None.

    ``types`` selects which values count as empty: "string" (""),
    "zero_string" ("0"), "array" (empty list/tuple/dict), "boolean" (False),
    "integer" (0) and "float" (0.0).
    """

    _type_id = "ToNull"
    ALL_TYPES = ("string", "zero_string", "array", "boolean", "integer", "float")

    def __init__(self, types: Iterable[str] = ALL_TYPES):
        self.types = set(types)
        unknown = self.types - set(self.ALL_TYPES)
        if unknown:
            raise InvalidArgumentError(f"ToNull: unknown types {sorted(unknown)}; expected {self.ALL_TYPES}")

    def filter(self, value: Any) -> Any:
        if isinstance(value, bool):
            return None if ("boolean" in self.types and value is False) else value
        if isinstance(value, str):
            if value == "" and "string" in self.types:
                return None
            if value == "0" and "zero_string" in self.types:
                return None
            return value
        if isinstance(value, int) and value == 0 and "integer" in self.types:
            return None
        if isinstance(value, float) and value == 0.0 and "float" in self.types:
            return None
        if isinstance(value, (list, tuple, dict)) and len(value) == 0 and "array" in self.types:
            return None
        return value


class Boolean(AbstractFilter):
    _type_id = "Boolean"
    TRUE_VALUES = ("1", "true", "on", "yes", "y")
    FALSE_VALUES = ("0", "false", "off", "no", "n", "")

    def filter(self, value: Any) -> Any:
        if isinstance(value, bool) or value is None:
            return bool(value)
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in self.TRUE_VALUES:
                return True
            if lowered in self.FALSE_VALUES:
                return False
        return value


class Callback(AbstractFilter):
    _type_id = "Callback"

    def __init__(self, callback: Callable[[Any], Any]):
        if not callable(callback):
            raise InvalidArgumentError(f"Callback filter expects a callable; received {callback!r}")
        self.callback = callback

    def filter(self, value: Any) -> Any:
        return self.callback(value)


class FilterChain(FilterInterface):
    """Applies filters in priority order (higher first, then attach order)."""

    DEFAULT_PRIORITY = 1000

    def __init__(self):
        self._filters: List[Tuple[int, int, FilterInterface]] = []

    def attach(self, filter_spec: Any, priority: int = DEFAULT_PRIORITY) -> "FilterChain":
        """
        Attach a filter.

        Args:
            filter_spec: Filter instance, class, registered id, name/options mapping or plain callable
            priority: Higher priorities run first
        """
        if callable(filter_spec) and not isinstance(filter_spec, (type, FilterInterface)):
            instance = Callback(filter_spec)
        else:
            instance = resolve_component(FILTER_IMPLEMENTATIONS, filter_spec, "filter", FilterInterface)
        self._filters.append((priority, len(self._filters), instance))
        return self

    def get_filters(self) -> List[FilterInterface]:
        return [entry[2] for entry in sorted(self._filters, key=lambda e: (-e[0], e[1]))]

    def filter(self, value: Any) -> Any:
        for filter_ in self.get_filters():
            value = filter_.filter(value)
        return value

    def __len__(self) -> int:
        return len(self._filters)


__all__ = [
    "AbstractFilter",
    "FilterChain",
    "FILTER_IMPLEMENTATIONS",
    "StringTrim",
    "StripTags",
    "StringToLower",
    "StringToUpper",
    "ToInt",
    "ToFloat",
    "ToNull",
    "Boolean",
    "Callback",
]
