"""
Element type inference from Python type hints.

Explicit type -> element dispatch:
- ELEMENT_TYPE_REGISTRY: Python type -> element type id
- Handles Optional[T], Annotated[T, ...], Enum and List[Enum]
- Extended per application through FormGenConfig.custom_element_types
"""

import types
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Dict, Optional, Type, Union, get_args, get_origin
import logging

from html_formgen.protocols import get_form_config

logger = logging.getLogger(__name__)

# Maps Python type -> element type id
ELEMENT_TYPE_REGISTRY: Dict[Type, str] = {
    str: "text",
    int: "number",
    float: "number",
    bool: "checkbox",
    date: "date",
    datetime: "datetime-local",
}


def strip_annotated(param_type: Any) -> Any:
    """Resolve Annotated[T, ...] to T."""
    if get_origin(param_type) is Annotated:
        return get_args(param_type)[0]
    return param_type


def resolve_optional(param_type: Any) -> Any:
    """Resolve Optional[T] (or T | None) to T."""
    if get_origin(param_type) in (Union, types.UnionType):
        args = get_args(param_type)
        if len(args) == 2 and type(None) in args:
            return next(arg for arg in args if arg is not type(None))
    return param_type


def is_enum_type(param_type: Any) -> bool:
    return isinstance(param_type, type) and issubclass(param_type, Enum)


def is_list_of_enums(param_type: Any) -> bool:
    """Check if type is List[Enum]."""
    if get_origin(param_type) is list:
        args = get_args(param_type)
        if args and is_enum_type(args[0]):
            return True
    return False


def _enum_value_options(enum_type: Type[Enum]) -> Dict[Any, str]:
    return {member.value: member.name for member in enum_type}


def infer_element_spec(param_type: Any) -> Optional[Dict[str, Any]]:
    """
    Map a type hint to a partial element specification.

    Args:
        param_type: Type hint, possibly Annotated or Optional

    Returns:
        {"type": ..., "options": ..., "attributes": ...} or None when no mapping applies

    Example:
        infer_element_spec(Optional[int])   # {"type": "number"}
        infer_element_spec(Color)           # {"type": "select", "options": {"value_options": {...}}}
    """
    param_type = resolve_optional(strip_annotated(param_type))

    if is_list_of_enums(param_type):
        enum_type = get_args(param_type)[0]
        return {
            "type": "select",
            "options": {"value_options": _enum_value_options(enum_type)},
            "attributes": {"multiple": True},
        }
    if is_enum_type(param_type):
        return {"type": "select", "options": {"value_options": _enum_value_options(param_type)}}

    if not isinstance(param_type, type):
        return None
    registry = {**ELEMENT_TYPE_REGISTRY, **get_form_config().custom_element_types}
    # MRO order so datetime wins over date and bool over int
    for klass in param_type.__mro__:
        if klass in registry:
            return {"type": registry[klass]}
    return None


def infer_element_types(entity: Any) -> Dict[str, Any]:
    """
    Get the declared type of every parameter of an entity.

    Uses python_introspect so dataclasses, plain classes and callables share one code path.
    """
    from python_introspect import UnifiedParameterAnalyzer
    param_info_dict = UnifiedParameterAnalyzer.analyze(entity)
    param_types = {name: info.param_type for name, info in param_info_dict.items()}
    logger.debug(f"Inferred parameter types for {getattr(entity, '__name__', type(entity).__name__)}: {list(param_types)}")
    return param_types
