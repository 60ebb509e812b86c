"""
Fieldsets and collections.

A fieldset is an element that contains other elements and fieldsets, kept in
priority order (higher first, then insertion order). Fieldsets can be bound to
an object through a hydrator.
"""

import copy
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging

from html_formgen.exceptions import DomainError, InvalidArgumentError, InvalidElementError
from html_formgen.hydrators import create_hydrator, create_instance, default_hydrator_for
from html_formgen.protocols import HydratorInterface
from .element import Element

logger = logging.getLogger(__name__)


class Fieldset(Element):
    """
    Group of elements and nested fieldsets.

    Example:
        fieldset = Fieldset("address")
        fieldset.add({"name": "street", "type": "text"})
        fieldset.add(Text("city"), {"priority": 10})
        [e.get_name() for e in fieldset]   # ["city", "street"]
    """

    _type_id = "fieldset"
    _default_attributes: Dict[str, Any] = {}

    def __init__(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self._children: Dict[str, Element] = {}
        self._order: Dict[str, Tuple[int, int]] = {}
        self._sequence = 0
        self.object: Any = None
        self.hydrator: Optional[HydratorInterface] = None
        self.allowed_object_binding_class: Optional[type] = None
        self.use_as_base_fieldset = False
        self._form_factory: Any = None
        super().__init__(name, options)

    def _apply_option(self, key: str, value: Any) -> None:
        if key == "use_as_base_fieldset":
            self.use_as_base_fieldset = bool(value)
        elif key == "allowed_object_binding_class":
            self.allowed_object_binding_class = value
        else:
            super()._apply_option(key, value)

    # ==================== FACTORY ====================

    def set_form_factory(self, factory: Any) -> "Fieldset":
        self._form_factory = factory
        return self

    def get_form_factory(self) -> Any:
        """Lazy-load the default form factory."""
        if self._form_factory is None:
            from html_formgen.factory import Factory
            self._form_factory = Factory()
        return self._form_factory

    # ==================== CHILDREN ====================

    def add(self, element_or_spec: Any, flags: Optional[Dict[str, Any]] = None) -> "Fieldset":
        """
        Add an element or fieldset.

        Args:
            element_or_spec: Element instance or specification mapping for the form factory
            flags: Optional {"name": ..., "priority": ...}

        Raises:
            InvalidArgumentError: If the element has no name or is not an Element
        """
        if isinstance(element_or_spec, Mapping):
            element = self.get_form_factory().create(element_or_spec)
        else:
            element = element_or_spec
        if not isinstance(element, Element):
            raise InvalidArgumentError(
                f"{type(self).__name__}.add requires an Element or specification; "
                f"received {type(element_or_spec).__name__}"
            )

        flags = dict(flags or {})
        if flags.get("name"):
            element.set_name(flags["name"])
        name = element.get_name()
        if name is None or name == "":
            raise InvalidArgumentError(
                f"{type(self).__name__}.add requires that the element has an assigned name; "
                f"none discovered"
            )

        self._children.pop(name, None)
        self._children[name] = element
        self._sequence += 1
        self._order[name] = (int(flags.get("priority", 0)), self._sequence)
        logger.debug(f"{type(self).__name__} '{self.get_name()}': added {type(element).__name__} '{name}'")
        return self

    def has(self, name: str) -> bool:
        return name in self._children

    def get(self, name: str) -> Element:
        if name not in self._children:
            raise InvalidElementError(
                f"No element by the name of [{name}] found in {type(self).__name__} "
                f"'{self.get_name()}'. Available: {list(self._children.keys())}"
            )
        return self._children[name]

    def remove(self, name: str) -> "Fieldset":
        self._children.pop(name, None)
        self._order.pop(name, None)
        return self

    def set_priority(self, name: str, priority: int) -> "Fieldset":
        self.get(name)
        self._order[name] = (int(priority), self._order[name][1])
        return self

    def _ordered_items(self) -> List[Tuple[str, Element]]:
        return sorted(self._children.items(), key=lambda item: (-self._order[item[0]][0], self._order[item[0]][1]))

    def __iter__(self) -> Iterator[Element]:
        return iter([element for _, element in self._ordered_items()])

    def __len__(self) -> int:
        return len(self._children)

    def count(self) -> int:
        return len(self._children)

    def get_elements(self) -> Dict[str, Element]:
        """Return child elements that are not fieldsets, in priority order."""
        return {name: el for name, el in self._ordered_items() if not isinstance(el, Fieldset)}

    def get_fieldsets(self) -> Dict[str, "Fieldset"]:
        """Return child fieldsets, in priority order."""
        return {name: el for name, el in self._ordered_items() if isinstance(el, Fieldset)}

    def items(self) -> List[Tuple[str, Element]]:
        """Return (original name, element) pairs in priority order."""
        return self._ordered_items()

    # ==================== VALUES / MESSAGES ====================

    def populate_values(self, data: Any) -> "Fieldset":
        """
        Recursively populate child values from a mapping.

        Raises:
            InvalidArgumentError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                f"{type(self).__name__}.populate_values expects a mapping; received {type(data).__name__}"
            )
        for name, element in self._children.items():
            if name not in data:
                continue
            value = data[name]
            if isinstance(element, Fieldset):
                if value is not None:
                    element.populate_values(value)
            else:
                element.set_value(value)
        return self

    def set_messages(self, messages: Any) -> "Fieldset":
        if not isinstance(messages, Mapping):
            raise InvalidArgumentError(
                f"{type(self).__name__}.set_messages expects a mapping; received {type(messages).__name__}"
            )
        for name, element_messages in messages.items():
            # Collection children are keyed by str(index)
            child = self._children.get(name, self._children.get(str(name)))
            if child is not None and isinstance(element_messages, Mapping):
                child.set_messages(element_messages)
            else:
                self.messages[name] = element_messages
        return self

    def get_messages(self, name: Optional[str] = None) -> Dict[str, Any]:
        if name is not None:
            return self.get(name).get_messages()
        messages = dict(self.messages)
        for child_name, element in self._children.items():
            child_messages = element.get_messages()
            if child_messages:
                messages[child_name] = child_messages
        return messages

    # ==================== OBJECT BINDING ====================

    def allow_object_binding(self, obj: Any) -> bool:
        if self.allowed_object_binding_class is not None:
            return isinstance(obj, self.allowed_object_binding_class)
        if self.object is not None:
            return isinstance(obj, type(self.object))
        return False

    def set_object(self, obj: Any) -> "Fieldset":
        self.object = obj
        return self

    def get_object(self) -> Any:
        return self.object

    def set_hydrator(self, hydrator: Any) -> "Fieldset":
        self.hydrator = hydrator if isinstance(hydrator, HydratorInterface) else create_hydrator(hydrator)
        return self

    def get_hydrator(self) -> HydratorInterface:
        if self.hydrator is None:
            self.hydrator = default_hydrator_for(self.object)
        return self.hydrator

    def extract(self) -> Dict[str, Any]:
        """Extract values from the bound object, recursing into fieldsets bound to nested objects."""
        if self.object is None:
            return {}
        values = self.get_hydrator().extract(self.object)
        for name, fieldset in self.get_fieldsets().items():
            if name not in values or values[name] is None:
                continue
            nested = values[name]
            if isinstance(fieldset, Collection):
                values[name] = fieldset.extract_items(nested)
            elif not isinstance(nested, Mapping):
                fieldset.set_object(nested)
                values[name] = fieldset.extract()
        return values

    def can_bind_values(self) -> bool:
        return self.object is not None or self.allowed_object_binding_class is not None

    def bind_values(self, values: Mapping) -> Any:
        """
        Hydrate the bound object with validated values.

        Nested fieldsets with their own objects hydrate those first. Without
        an object, an allowed_object_binding_class is instantiated from the values.

        Returns:
            The bound or new object, or the values unchanged when nothing is bound

        Raises:
            InvalidArgumentError: If the binding class rejects the values
        """
        if not self.can_bind_values():
            return dict(values)
        data: Dict[str, Any] = {}
        for name, element in self._children.items():
            if name not in values:
                continue
            value = values[name]
            if isinstance(element, Fieldset) and value is not None:
                value = element.bind_values(value)
            data[name] = value
        if self.object is None:
            return create_instance(self.allowed_object_binding_class, data)
        return self.get_hydrator().hydrate(data, self.object)

    # ==================== PREPARATION ====================

    def _prepare_children(self, prefix: str) -> None:
        """Wrap child names as prefix[child], recursively."""
        for name, element in self._ordered_items():
            element.set_name(f"{prefix}[{name}]")
            if isinstance(element, Fieldset):
                element._prepare_children(element.get_name())


class Collection(Fieldset):
    """
    Repeating fieldset built from a target element.

    Options: target_element (Element or specification), count (default 1),
    allow_add (default True), allow_remove (default True).
    """

    _type_id = "collection"

    def __init__(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self.target_element: Optional[Element] = None
        self.count_option = 1
        self.allow_add = True
        self.allow_remove = True
        super().__init__(name, options)

    def _apply_option(self, key: str, value: Any) -> None:
        if key == "target_element":
            self.set_target_element(value)
        elif key == "count":
            self.count_option = int(value)
        elif key == "allow_add":
            self.allow_add = bool(value)
        elif key == "allow_remove":
            self.allow_remove = bool(value)
        else:
            super()._apply_option(key, value)

    def set_target_element(self, element_or_spec: Any) -> "Collection":
        if isinstance(element_or_spec, Mapping):
            element_or_spec = self.get_form_factory().create(element_or_spec)
        if not isinstance(element_or_spec, Element):
            raise InvalidArgumentError(
                f"Collection.set_target_element requires an Element or specification; "
                f"received {type(element_or_spec).__name__}"
            )
        self.target_element = element_or_spec
        return self

    def get_target_element(self) -> Optional[Element]:
        return self.target_element

    def _create_new_target(self, key: Any) -> Element:
        if self.target_element is None:
            raise DomainError(f"Collection '{self.get_name()}' has no target_element")
        element = copy.deepcopy(self.target_element)
        element.set_name(str(key))
        return element

    def _ensure_children(self) -> None:
        if self._children:
            return
        for index in range(self.count_option):
            self.add(self._create_new_target(index))

    def populate_values(self, data: Any) -> "Collection":
        """
        Replace the children with one target copy per entry.

        Raises:
            InvalidArgumentError: If data is not a list or mapping
            DomainError: If entries exceed count while allow_add is off
        """
        if isinstance(data, Mapping):
            entries = list(data.items())
        elif isinstance(data, (list, tuple)):
            entries = list(enumerate(data))
        else:
            raise InvalidArgumentError(
                f"Collection.populate_values expects a list or mapping; received {type(data).__name__}"
            )
        if not self.allow_add and len(entries) > self.count_option:
            raise DomainError(
                f"There are more elements than specified in the collection ({self.get_name()}). "
                f"Either set the allow_add option to True, or re-submit the form."
            )

        self._children, self._order = {}, {}
        for key, value in entries:
            element = self._create_new_target(key)
            if isinstance(element, Fieldset):
                element.populate_values(value)
            else:
                element.set_value(value)
            self.add(element)
        return self

    def extract_items(self, items: Any) -> List[Any]:
        """Extract each item of a bound list through the target fieldset."""
        extracted = []
        for item in items:
            if isinstance(self.target_element, Fieldset) and not isinstance(item, Mapping):
                target = copy.deepcopy(self.target_element)
                target.set_object(item)
                extracted.append(target.extract())
            else:
                extracted.append(item)
        return extracted

    def bind_values(self, values: Any) -> Any:
        """Hydrate a fresh copy of the target object (or a new binding class instance) per entry."""
        target_element = self.target_element
        if not isinstance(target_element, Fieldset) or not target_element.can_bind_values():
            return list(values)
        bound = []
        for item in values:
            target = copy.deepcopy(target_element)
            bound.append(target.bind_values(item))
        return bound

    def _prepare_children(self, prefix: str) -> None:
        self._ensure_children()
        super()._prepare_children(prefix)
