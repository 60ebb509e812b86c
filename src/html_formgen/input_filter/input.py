"""
Inputs: a single named value with its filter and validator chains.
"""

from typing import Any, Dict, Optional, Type
import logging

from html_formgen.filters import FilterChain
from html_formgen.registry import RegistryMeta
from html_formgen.validators import ValidatorChain, UploadFile

logger = logging.getLogger(__name__)

# Maps normalized input id -> input class
INPUT_IMPLEMENTATIONS: Dict[str, Type] = {}

IS_EMPTY_MESSAGE = "Value is required and can't be empty"


def is_empty_value(value: Any) -> bool:
    """Return True for None, empty strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


class Input(metaclass=RegistryMeta):
    """
    A named input.

    Empty value handling:
    - no value set and not required -> valid
    - empty and not required -> valid, unless continue_if_empty
    - empty and allow_empty -> valid, unless continue_if_empty
    - empty and required -> "is required" failure, unless continue_if_empty
    - continue_if_empty -> the validator chain decides
    """

    _registry = INPUT_IMPLEMENTATIONS
    _type_id = "input"

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.required = True
        self.allow_empty = False
        self.continue_if_empty = False
        self.break_on_failure = False
        self.error_message: Optional[str] = None
        self.fallback_value: Any = None
        self._has_fallback = False
        self._value: Any = None
        self._has_value = False
        self._filter_chain = FilterChain()
        self._validator_chain = ValidatorChain()
        self._messages: Dict[str, str] = {}

    # ==================== CONFIGURATION ====================

    def set_name(self, name: str) -> "Input":
        self.name = name
        return self

    def get_name(self) -> Optional[str]:
        return self.name

    def set_required(self, required: bool) -> "Input":
        self.required = bool(required)
        return self

    def is_required(self) -> bool:
        return self.required

    def set_allow_empty(self, allow_empty: bool) -> "Input":
        self.allow_empty = bool(allow_empty)
        return self

    def set_continue_if_empty(self, continue_if_empty: bool) -> "Input":
        self.continue_if_empty = bool(continue_if_empty)
        return self

    def set_break_on_failure(self, break_on_failure: bool) -> "Input":
        self.break_on_failure = bool(break_on_failure)
        return self

    def set_error_message(self, message: Optional[str]) -> "Input":
        self.error_message = message
        return self

    def set_fallback_value(self, value: Any) -> "Input":
        self.fallback_value = value
        self._has_fallback = True
        return self

    def get_filter_chain(self) -> FilterChain:
        return self._filter_chain

    def set_filter_chain(self, chain: FilterChain) -> "Input":
        self._filter_chain = chain
        return self

    def get_validator_chain(self) -> ValidatorChain:
        return self._validator_chain

    def set_validator_chain(self, chain: ValidatorChain) -> "Input":
        self._validator_chain = chain
        return self

    # ==================== VALUES ====================

    def set_value(self, value: Any) -> "Input":
        self._value = value
        self._has_value = True
        return self

    def reset_value(self) -> "Input":
        self._value = None
        self._has_value = False
        return self

    def has_value(self) -> bool:
        return self._has_value

    def get_raw_value(self) -> Any:
        return self._value

    def get_value(self) -> Any:
        return self._filter_chain.filter(self._value)

    # ==================== VALIDATION ====================

    def is_valid(self, context: Optional[Dict[str, Any]] = None) -> bool:
        self._messages = {}
        value = self.get_value()
        empty = is_empty_value(value)

        if not self._has_value and not self.required:
            return True

        if empty and not self.continue_if_empty:
            if not self.required or self.allow_empty:
                return True
            return self._fail({"is_empty": IS_EMPTY_MESSAGE})

        if self._validator_chain.is_valid(value, context):
            return True
        return self._fail(self._validator_chain.get_messages())

    def _fail(self, messages: Dict[str, str]) -> bool:
        if self._has_fallback:
            logger.debug(f"Input '{self.name}' invalid, using fallback value")
            self._value = self.fallback_value
            self._messages = {}
            return True
        self._messages = {"error_message": self.error_message} if self.error_message else messages
        return False

    def get_messages(self) -> Dict[str, str]:
        return dict(self._messages)

    def merge(self, other: "Input") -> "Input":
        """Copy configuration and chains from another input into this one."""
        self.set_name(other.get_name())
        self.set_required(other.is_required())
        self.set_allow_empty(other.allow_empty)
        self.set_continue_if_empty(other.continue_if_empty)
        self.set_break_on_failure(other.break_on_failure)
        self.set_error_message(other.error_message)
        if other.has_value():
            self.set_value(other.get_raw_value())
        for filter_ in other.get_filter_chain().get_filters():
            self._filter_chain.attach(filter_)
        for validator in other.get_validator_chain().get_validators():
            self._validator_chain.attach(validator)
        return self


class FileInput(Input):
    """
    Input for file uploads.

    Values are upload mappings ({"name", "tmp_name", "error", ...}) or lists of
    them. An upload reporting error 4 (no file) counts as empty. Filters only
    run once the upload is valid.
    """

    _type_id = "file"
    NO_FILE_ERROR = 4

    def __init__(self, name: Optional[str] = None):
        super().__init__(name)
        self.auto_prepend_upload_validator = True

    def get_value(self) -> Any:
        return self._value

    def get_filtered_value(self) -> Any:
        return self._filter_chain.filter(self._value)

    def _is_empty_upload(self, value: Any) -> bool:
        if is_empty_value(value):
            return True
        if isinstance(value, dict):
            return value.get("error") == self.NO_FILE_ERROR
        if isinstance(value, (list, tuple)):
            return all(self._is_empty_upload(item) for item in value)
        return False

    def is_valid(self, context: Optional[Dict[str, Any]] = None) -> bool:
        self._messages = {}
        value = self._value

        if not self._has_value and not self.required:
            return True

        if self._is_empty_upload(value) and not self.continue_if_empty:
            if not self.required or self.allow_empty:
                return True
            return self._fail({"is_empty": IS_EMPTY_MESSAGE})

        if self.auto_prepend_upload_validator and not self._validator_chain.has_validator(UploadFile):
            self._validator_chain.prepend(UploadFile(), break_chain_on_failure=True)

        if self._validator_chain.is_valid(value, context):
            return True
        return self._fail(self._validator_chain.get_messages())
