"""
Component registry with metaclass auto-registration.

Elements, validators, filters and hydrators auto-register when their classes
are defined, eliminating manual registration boilerplate. Specifications can
then refer to components by id ("date", "StringTrim", "GreaterThan").

Design:
- RegistryMeta metaclass handles auto-registration
- Each component family owns one registry dict, declared as ``_registry`` on its base class
- Ids are normalized (case, "-", "_" and spaces ignored) so "datetime-local",
  "DateTimeLocal" and "date_time_local" resolve to the same class
- Fail-loud if an id is not registered
"""

from abc import ABCMeta
from typing import Any, Dict, Type
import logging

logger = logging.getLogger(__name__)


def normalize_id(type_id: str) -> str:
    """Normalize a component id for registry lookup."""
    return "".join(ch for ch in type_id.lower() if ch not in "-_ ")


class RegistryMeta(ABCMeta):
    """
    Metaclass for automatic component registration.

    1. Only registers concrete implementations (no abstract methods)
    2. Requires its own ``_type_id`` attribute (inherited ids are ignored)
    3. Registers into the ``_registry`` dict found on the class hierarchy

    Example:
        class Date(DateTime):
            _type_id = "date"

    The element auto-registers in ELEMENT_IMPLEMENTATIONS["date"] when the
    class is defined.
    """

    def __new__(mcs, name, bases, attrs):
        new_class = super().__new__(mcs, name, bases, attrs)

        registry = getattr(new_class, "_registry", None)
        if registry is None:
            return new_class

        if getattr(new_class, "__abstractmethods__", None):
            logger.debug(
                f"Skipping registration for {name} - abstract methods remaining: "
                f"{set(new_class.__abstractmethods__)}"
            )
            return new_class

        type_id = attrs.get("_type_id")
        if type_id is None:
            logger.debug(f"Skipping registration for {name} - no _type_id attribute")
            return new_class

        key = normalize_id(type_id)
        if key in registry and registry[key] is not new_class:
            logger.warning(
                f"Component id '{type_id}' already registered to {registry[key].__name__}. "
                f"Overwriting with {name}."
            )
        registry[key] = new_class
        logger.debug(f"Auto-registered {name} as '{type_id}'")
        return new_class


def lookup(registry: Dict[str, Type], type_id: str, kind: str) -> Type:
    """
    Get a registered class by id.

    Args:
        registry: The registry dict to search
        type_id: The component identifier (e.g., "date")
        kind: Human readable component family for error messages

    Returns:
        The registered class

    Raises:
        KeyError: If type_id is not registered
    """
    key = normalize_id(type_id)
    if key not in registry:
        raise KeyError(
            f"No {kind} registered with id '{type_id}'. "
            f"Available {kind}s: {sorted(registry.keys())}"
        )
    return registry[key]


def resolve_component(registry: Dict[str, Type], spec: Any, kind: str, base: Type) -> Any:
    """
    Instantiate a component from an instance, class, id or {"name", "options"} mapping.

    Args:
        registry: Registry used to resolve string ids
        spec: The component specification
        kind: Human readable component family for error messages
        base: Required base class of the result

    Returns:
        Instance of ``base``

    Raises:
        TypeError: If the specification cannot be turned into a ``base`` instance
    """
    if isinstance(spec, base):
        return spec

    options: Dict[str, Any] = {}
    target = spec
    if isinstance(spec, dict):
        if "name" not in spec:
            raise TypeError(f"{kind} specification is missing the 'name' key: {spec!r}")
        target = spec["name"]
        options = dict(spec.get("options") or {})

    if isinstance(target, str):
        target = lookup(registry, target, kind)

    if isinstance(target, type) and issubclass(target, base):
        return target(**options)

    raise TypeError(
        f"Cannot create {kind} from {spec!r}. "
        f"Expected a {base.__name__} instance, subclass, registered id or name/options mapping."
    )
