"""
Hydrators move values between bound objects and form data.

Registered by id so specifications can say ``"hydrator": "class_methods"``.
"""

import dataclasses
import inspect
from collections.abc import MutableMapping
from typing import Any, Callable, Dict, List, Mapping, Type
import logging

from html_formgen.exceptions import InvalidArgumentError
from html_formgen.protocols import HydratorInterface
from html_formgen.registry import RegistryMeta, resolve_component

logger = logging.getLogger(__name__)

# Maps normalized hydrator id -> hydrator class
HYDRATOR_IMPLEMENTATIONS: Dict[str, Type] = {}

_ARGUMENT_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def requires_arguments(func: Callable) -> bool:
    """Whether calling ``func`` (a class or bound method) needs at least one argument."""
    try:
        parameters = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(p.kind in _ARGUMENT_KINDS and p.default is p.empty for p in parameters)


def create_instance(cls: type, data: Mapping[str, Any]) -> Any:
    """
    Instantiate ``cls`` from validated values.

    Values matching constructor parameters are passed as keyword arguments;
    the rest are set as attributes afterwards.

    Raises:
        InvalidArgumentError: If the constructor rejects the values
    """
    try:
        parameters = inspect.signature(cls).parameters
    except (TypeError, ValueError):
        parameters = {}
    takes_kwargs = any(p.kind is p.VAR_KEYWORD for p in parameters.values())
    kwargs = {name: value for name, value in data.items() if takes_kwargs or name in parameters}
    try:
        obj = cls(**kwargs)
    except TypeError as e:
        raise InvalidArgumentError(
            f"Cannot create {cls.__name__} from values {sorted(data)}: {e}"
        ) from e
    remaining = {name: value for name, value in data.items() if name not in kwargs}
    if remaining:
        default_hydrator_for(obj).hydrate(remaining, obj)
    return obj


def _attribute_names(obj: Any) -> List[str]:
    """Instance attribute names, covering dataclass fields and __slots__ as well as __dict__."""
    names: List[str] = []
    if dataclasses.is_dataclass(obj):
        names.extend(f.name for f in dataclasses.fields(obj))
    for klass in type(obj).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        names.extend([slots] if isinstance(slots, str) else slots)
    if hasattr(obj, "__dict__"):
        names.extend(vars(obj))
    return list(dict.fromkeys(names))


class AbstractHydrator(HydratorInterface, metaclass=RegistryMeta):
    _registry = HYDRATOR_IMPLEMENTATIONS


class ObjectPropertyHydrator(AbstractHydrator):
    """Reads and writes public instance attributes, including slotted ones."""

    _type_id = "object_property"

    def extract(self, obj: Any) -> Dict[str, Any]:
        return {
            name: getattr(obj, name)
            for name in _attribute_names(obj)
            if not name.startswith("_") and hasattr(obj, name)
        }

    def hydrate(self, data: Dict[str, Any], obj: Any) -> Any:
        for name, value in data.items():
            setattr(obj, name, value)
        return obj


class ClassMethodsHydrator(AbstractHydrator):
    """Uses get_<name>/is_<name> and set_<name> methods; getters taking arguments are skipped."""

    _type_id = "class_methods"

    def extract(self, obj: Any) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for attr in dir(obj):
            for prefix in ("get_", "is_", "has_"):
                if not attr.startswith(prefix):
                    continue
                method = getattr(obj, attr)
                if callable(method) and not requires_arguments(method):
                    values[attr[len(prefix):]] = method()
                break
        return values

    def hydrate(self, data: Dict[str, Any], obj: Any) -> Any:
        for name, value in data.items():
            setter = getattr(obj, f"set_{name}", None)
            if callable(setter):
                setter(value)
            else:
                logger.debug(f"ClassMethodsHydrator: {type(obj).__name__} has no set_{name}(), skipping")
        return obj


class DictHydrator(AbstractHydrator):
    """Hydrates mutable mappings."""

    _type_id = "dict"

    def extract(self, obj: Any) -> Dict[str, Any]:
        if not isinstance(obj, MutableMapping):
            raise InvalidArgumentError(f"DictHydrator expects a mapping; received {type(obj).__name__}")
        return dict(obj)

    def hydrate(self, data: Dict[str, Any], obj: Any) -> Any:
        if not isinstance(obj, MutableMapping):
            raise InvalidArgumentError(f"DictHydrator expects a mapping; received {type(obj).__name__}")
        obj.update(data)
        return obj


def create_hydrator(spec: Any) -> HydratorInterface:
    """
    Create a hydrator from an instance, class, id or {"type"/"name", "options"} mapping.

    Raises:
        InvalidArgumentError: If the specification cannot be resolved
    """
    if isinstance(spec, dict) and "type" in spec and "name" not in spec:
        spec = {"name": spec["type"], "options": spec.get("options")}
    try:
        return resolve_component(HYDRATOR_IMPLEMENTATIONS, spec, "hydrator", HydratorInterface)
    except (KeyError, TypeError) as e:
        raise InvalidArgumentError(f"Cannot create hydrator from {spec!r}: {e}") from e


def default_hydrator_for(obj: Any) -> HydratorInterface:
    """Pick a hydrator for an object: mappings get DictHydrator, everything else ObjectPropertyHydrator."""
    if isinstance(obj, MutableMapping):
        return DictHydrator()
    return ObjectPropertyHydrator()
