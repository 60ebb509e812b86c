"""
Input filters: named collections of inputs and nested input filters.
"""

import copy
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type, Union
import logging

from html_formgen.exceptions import InvalidArgumentError, InvalidElementError
from html_formgen.registry import RegistryMeta
from .input import Input

logger = logging.getLogger(__name__)

# Maps normalized input filter id -> input filter class
INPUT_FILTER_IMPLEMENTATIONS: Dict[str, Type] = {}


class InputFilter(metaclass=RegistryMeta):
    """
    Validates a mapping of data against named inputs.

    Children are either Input instances or nested InputFilter instances; nested
    filters receive the sub-mapping stored under their name.

    Example:
        >>> input_filter = InputFilter()
        >>> input_filter.add(Input("username"))
        >>> input_filter.set_data({"username": "alice"}).is_valid()
        True
    """

    _registry = INPUT_FILTER_IMPLEMENTATIONS
    _type_id = "input_filter"

    def __init__(self):
        self._inputs: Dict[str, Union[Input, "InputFilter"]] = {}
        self._data: Optional[Dict[str, Any]] = None
        self._validation_group: Optional[List[str]] = None
        self._valid_inputs: Dict[str, Any] = {}
        self._invalid_inputs: Dict[str, Any] = {}

    # ==================== CHILDREN ====================

    def add(self, input_or_filter: Union[Input, "InputFilter"], name: Optional[str] = None) -> "InputFilter":
        """
        Add an input or nested input filter.

        Adding a second Input under an existing name merges it into the first.

        Raises:
            InvalidArgumentError: If no name can be determined or the child has the wrong type
        """
        if not isinstance(input_or_filter, (Input, InputFilter)):
            raise InvalidArgumentError(
                f"InputFilter.add expects an Input or InputFilter; received {type(input_or_filter).__name__}"
            )
        if isinstance(input_or_filter, Input):
            name = name if name is not None else input_or_filter.get_name()
        if name is None or name == "":
            raise InvalidArgumentError("InputFilter.add requires a name for the added input or input filter")

        existing = self._inputs.get(name)
        if isinstance(existing, Input) and isinstance(input_or_filter, Input) and existing is not input_or_filter:
            input_or_filter = existing.merge(input_or_filter)
            logger.debug(f"Merged duplicate input '{name}'")
        self._inputs[name] = input_or_filter
        return self

    def get(self, name: str) -> Union[Input, "InputFilter"]:
        if name not in self._inputs:
            raise InvalidElementError(
                f"No input or input filter named '{name}'. Available: {list(self._inputs.keys())}"
            )
        return self._inputs[name]

    def has(self, name: str) -> bool:
        return name in self._inputs

    def remove(self, name: str) -> "InputFilter":
        self._inputs.pop(name, None)
        return self

    def get_inputs(self) -> Dict[str, Union[Input, "InputFilter"]]:
        return dict(self._inputs)

    def __iter__(self) -> Iterator[str]:
        return iter(self._inputs)

    def __len__(self) -> int:
        return len(self._inputs)

    def __contains__(self, name: object) -> bool:
        return name in self._inputs

    # ==================== DATA ====================

    def set_data(self, data: Any) -> "InputFilter":
        """
        Set the data to validate.

        Raises:
            InvalidArgumentError: If data is not a mapping
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                f"{type(self).__name__}.set_data expects a mapping; received {type(data).__name__}"
            )
        self._data = dict(data)
        for name, child in self._inputs.items():
            if isinstance(child, InputFilter):
                child.set_data(self._data.get(name))
            elif name in self._data:
                child.set_value(self._data[name])
            else:
                child.reset_value()
        return self

    def set_validation_group(self, *names: Union[str, Sequence[str]]) -> "InputFilter":
        """
        Limit validation to the named inputs.

        Accepts names as positional arguments or as a single list. A nested
        filter can be limited with a mapping ``{"fieldset": ["a", "b"]}``.

        Raises:
            InvalidArgumentError: If a name is not a known input
        """
        if len(names) == 1 and isinstance(names[0], (list, tuple, dict)):
            group = names[0]
        else:
            group = list(names)

        if isinstance(group, dict):
            flat = []
            for key, sub_group in group.items():
                if isinstance(key, int):
                    flat.append(sub_group)
                    continue
                child = self.get(key)
                if isinstance(child, InputFilter):
                    child.set_validation_group(sub_group)
                flat.append(key)
            group = flat

        for name in group:
            if name not in self._inputs:
                raise InvalidArgumentError(
                    f"Validation group refers to unknown input '{name}'. Available: {list(self._inputs.keys())}"
                )
        self._validation_group = list(group)
        return self

    def clear_validation_group(self) -> "InputFilter":
        self._validation_group = None
        return self

    def _active_names(self) -> List[str]:
        if self._validation_group is None:
            return list(self._inputs.keys())
        return list(self._validation_group)

    # ==================== VALIDATION ====================

    def is_valid(self, context: Optional[Dict[str, Any]] = None) -> bool:
        """
        Validate all active inputs.

        Raises:
            InvalidArgumentError: If no data has been set
        """
        if self._data is None:
            raise InvalidArgumentError(f"{type(self).__name__}: no data present to validate; call set_data() first")

        context = self._data if context is None else context
        self._valid_inputs, self._invalid_inputs = {}, {}
        valid = True
        for name in self._active_names():
            child = self._inputs[name]
            if isinstance(child, InputFilter):
                child_valid = child.is_valid()
            else:
                child_valid = child.is_valid(context)
            if child_valid:
                self._valid_inputs[name] = child
                continue
            self._invalid_inputs[name] = child
            valid = False
            if isinstance(child, Input) and child.break_on_failure:
                logger.debug(f"Input '{name}' failed with break_on_failure, stopping validation")
                break
        return valid

    def get_valid_input(self) -> Dict[str, Any]:
        return dict(self._valid_inputs)

    def get_invalid_input(self) -> Dict[str, Any]:
        return dict(self._invalid_inputs)

    def get_values(self) -> Dict[str, Any]:
        """Return filtered values for all active inputs."""
        values: Dict[str, Any] = {}
        for name in self._active_names():
            child = self._inputs[name]
            values[name] = child.get_values() if isinstance(child, InputFilter) else child.get_value()
        return values

    def get_raw_values(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for name in self._active_names():
            child = self._inputs[name]
            values[name] = child.get_raw_values() if isinstance(child, InputFilter) else child.get_raw_value()
        return values

    def get_messages(self) -> Dict[str, Any]:
        """Return failure messages keyed by input name (nested filters give nested mappings)."""
        return {name: child.get_messages() for name, child in self._invalid_inputs.items()}


class CollectionInputFilter(InputFilter):
    """
    Validates a list of mappings with the same input filter.

    ``count`` requires a minimum number of entries; ``is_required`` rejects an
    empty collection.
    """

    _type_id = "collection"

    def __init__(self, input_filter: Optional[InputFilter] = None, count: Optional[int] = None,
                 is_required: bool = False):
        super().__init__()
        self._template = input_filter or InputFilter()
        self.count = count
        self.is_required = is_required
        self._items: List[Any] = []
        self._item_values: List[Dict[str, Any]] = []
        self._item_raw_values: List[Dict[str, Any]] = []
        self._collection_messages: Dict[Any, Any] = {}

    def set_input_filter(self, input_filter: InputFilter) -> "CollectionInputFilter":
        self._template = input_filter
        return self

    def get_input_filter(self) -> InputFilter:
        return self._template

    def set_data(self, data: Any) -> "CollectionInputFilter":
        if data is None:
            data = []
        if isinstance(data, Mapping):
            data = list(data.values())
        if not isinstance(data, (list, tuple)):
            raise InvalidArgumentError(
                f"CollectionInputFilter.set_data expects a list; received {type(data).__name__}"
            )
        self._items = list(data)
        self._data = {}
        return self

    def is_valid(self, context: Optional[Dict[str, Any]] = None) -> bool:
        self._collection_messages, self._item_values, self._item_raw_values = {}, [], []
        valid = True

        if self.is_required and not self._items:
            self._collection_messages["is_empty"] = "The input is required and can't be empty"
            return False
        if self.count is not None and len(self._items) < self.count:
            self._collection_messages["not_enough"] = f"The input must contain at least {self.count} items"
            return False

        for index, item in enumerate(self._items):
            item_filter = copy.deepcopy(self._template)
            item_filter.set_data(item)
            if not item_filter.is_valid():
                valid = False
                self._collection_messages[index] = item_filter.get_messages()
            self._item_values.append(item_filter.get_values())
            self._item_raw_values.append(item_filter.get_raw_values())
        return valid

    def get_values(self) -> List[Dict[str, Any]]:
        return list(self._item_values)

    def get_raw_values(self) -> List[Dict[str, Any]]:
        return list(self._item_raw_values)

    def get_messages(self) -> Dict[Any, Any]:
        return dict(self._collection_messages)
