"""
Base form element.

An element is a named bag of HTML attributes, behavioral options and a value.
Element classes auto-register by ``_type_id`` so specifications can say
``{"type": "date"}`` instead of importing the class.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional, Type
import logging

from html_formgen.exceptions import InvalidArgumentError
from html_formgen.registry import RegistryMeta, lookup

logger = logging.getLogger(__name__)

# Global registry of element implementations
# Maps normalized type id -> element class
ELEMENT_IMPLEMENTATIONS: Dict[str, Type] = {}


class Element(metaclass=RegistryMeta):
    """
    A single form element.

    The element name is stored as the ``name`` attribute, so
    ``set_attributes({"name": "x"})`` renames the element.

    Subclasses declare ``_default_attributes`` (copied per instance) and may
    override ``_apply_option()`` to consume their own options.
    """

    _registry = ELEMENT_IMPLEMENTATIONS
    _type_id = "element"
    _default_attributes: Dict[str, Any] = {}

    def __init__(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self.attributes: Dict[str, Any] = dict(self._default_attributes)
        self.options: Dict[str, Any] = {}
        self.label: Optional[str] = None
        self.label_attributes: Dict[str, Any] = {}
        self.label_options: Dict[str, Any] = {}
        self.messages: Dict[str, Any] = {}
        self.value: Any = None

        if name is not None:
            self.set_name(name)
        if options:
            self.set_options(options)

    # ==================== NAME ====================

    def set_name(self, name: str) -> "Element":
        self.attributes["name"] = name
        return self

    def get_name(self) -> Optional[str]:
        return self.attributes.get("name")

    # ==================== OPTIONS ====================

    def set_options(self, options: Any) -> "Element":
        """
        Merge behavioral options.

        Known options ("label", "label_attributes", "label_options" and any
        subclass-specific keys) are applied to the element; all options stay
        available from get_option().

        Raises:
            InvalidArgumentError: If options is not a mapping
        """
        if not isinstance(options, Mapping):
            raise InvalidArgumentError(
                f"{type(self).__name__}.set_options expects a mapping; received {type(options).__name__}"
            )
        for key, value in options.items():
            self.options[key] = value
            self._apply_option(key, value)
        return self

    def _apply_option(self, key: str, value: Any) -> None:
        if key == "label":
            self.set_label(value)
        elif key == "label_attributes":
            self.set_label_attributes(value)
        elif key == "label_options":
            self.label_options = dict(value)

    def get_options(self) -> Dict[str, Any]:
        return dict(self.options)

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def set_option(self, key: str, value: Any) -> "Element":
        return self.set_options({key: value})

    # ==================== ATTRIBUTES ====================

    def set_attribute(self, key: str, value: Any) -> "Element":
        self.attributes[key] = value
        return self

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes

    def remove_attribute(self, key: str) -> "Element":
        self.attributes.pop(key, None)
        return self

    def set_attributes(self, attributes: Any) -> "Element":
        """
        Merge HTML attributes into the element.

        Raises:
            InvalidArgumentError: If attributes is not a mapping
        """
        if not isinstance(attributes, Mapping):
            raise InvalidArgumentError(
                f"{type(self).__name__}.set_attributes expects a mapping; received {type(attributes).__name__}"
            )
        for key, value in attributes.items():
            self.set_attribute(key, value)
        return self

    def get_attributes(self) -> Dict[str, Any]:
        return dict(self.attributes)

    def clear_attributes(self) -> "Element":
        self.attributes = {}
        return self

    # ==================== VALUE / LABEL / MESSAGES ====================

    def set_value(self, value: Any) -> "Element":
        self.value = value
        return self

    def get_value(self) -> Any:
        return self.value

    def set_label(self, label: Optional[str]) -> "Element":
        self.label = label
        return self

    def get_label(self) -> Optional[str]:
        return self.label

    def set_label_attributes(self, attributes: Mapping) -> "Element":
        self.label_attributes = dict(attributes)
        return self

    def get_label_attributes(self) -> Dict[str, Any]:
        return dict(self.label_attributes)

    def set_messages(self, messages: Any) -> "Element":
        if not isinstance(messages, Mapping):
            raise InvalidArgumentError(
                f"{type(self).__name__}.set_messages expects a mapping; received {type(messages).__name__}"
            )
        self.messages = dict(messages)
        return self

    def get_messages(self) -> Dict[str, Any]:
        return dict(self.messages)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.get_name()!r})"


def get_element_class(type_id: str) -> Type:
    """
    Get element class by id.

    Raises:
        KeyError: If type_id is not registered
    """
    return lookup(ELEMENT_IMPLEMENTATIONS, type_id, "element")


def resolve_element_type(element_type: Any) -> Type:
    """
    Resolve a class or registered id to an element class.

    Raises:
        InvalidArgumentError: If the type is unknown or not an Element subclass
    """
    if isinstance(element_type, str):
        try:
            return get_element_class(element_type)
        except KeyError as e:
            raise InvalidArgumentError(str(e.args[0])) from e
    if isinstance(element_type, type) and issubclass(element_type, Element):
        return element_type
    raise InvalidArgumentError(
        f"Element type must be an Element subclass or registered id; received {element_type!r}"
    )
