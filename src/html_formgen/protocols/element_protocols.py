"""
ABC contracts for form components.

Defines explicit contracts for elements, validators, filters and hydrators,
eliminating duck typing in favor of fail-loud inheritance-based architecture.

Design Philosophy:
- Explicit inheritance over duck typing
- Fail-loud over fail-silent
- Multiple inheritance for composable capabilities
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class InputProvider(ABC):
    """
    ABC for elements that know how they should be validated and filtered.

    Form.get_input_filter() collects these specifications for every element
    that does not already have an explicit input definition.
    """

    @abstractmethod
    def get_input_specification(self) -> Dict[str, Any]:
        """
        Return the input specification for this element.

        Returns:
            Mapping accepted by InputFilterFactory.create_input()
        """
        pass


class InputFilterProvider(ABC):
    """ABC for fieldsets that provide an input filter specification for their children."""

    @abstractmethod
    def get_input_filter_specification(self) -> Dict[str, Any]:
        """
        Return the input filter specification.

        Returns:
            Mapping accepted by InputFilterFactory.create_input_filter()
        """
        pass


class ValidatorInterface(ABC):
    """ABC for validators."""

    @abstractmethod
    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        """
        Validate a value.

        Args:
            value: The value to validate
            context: The whole data set being validated, if any

        Returns:
            True if valid. Failure messages are available from get_messages().
        """
        pass

    @abstractmethod
    def get_messages(self) -> Dict[str, str]:
        """Return failure messages from the last is_valid() call keyed by failure id."""
        pass


class FilterInterface(ABC):
    """ABC for value filters."""

    @abstractmethod
    def filter(self, value: Any) -> Any:
        """
        Return the filtered value.

        Values the filter cannot handle are returned unchanged.
        """
        pass


class HydratorInterface(ABC):
    """ABC for hydrators that move data between objects and mappings."""

    @abstractmethod
    def extract(self, obj: Any) -> Dict[str, Any]:
        """Extract values from an object into a mapping."""
        pass

    @abstractmethod
    def hydrate(self, data: Dict[str, Any], obj: Any) -> Any:
        """Populate an object from a mapping and return it."""
        pass


class ListenerAggregate(ABC):
    """ABC for objects that attach several listeners to an event manager at once."""

    @abstractmethod
    def attach(self, events: Any, priority: int = 1) -> None:
        pass

    @abstractmethod
    def detach(self, events: Any) -> None:
        pass


__all__: List[str] = [
    "InputProvider",
    "InputFilterProvider",
    "ValidatorInterface",
    "FilterInterface",
    "HydratorInterface",
    "ListenerAggregate",
]
