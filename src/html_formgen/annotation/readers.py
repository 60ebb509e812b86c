"""
Annotation readers.

A reader turns an annotated class into a ClassReflection (the class-level
annotations) and an ordered list of PropertyReflection objects (one per
declared field). Two readers are provided:

- AnnotatedReader: ``@form_annotations(...)`` plus ``typing.Annotated`` extras
- MetadataReader: ``__form_annotations__`` plus dataclass field metadata
"""

import builtins
import dataclasses
import inspect
import logging
import sys
import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from html_formgen.exceptions import InvalidArgumentError
from .annotations import Annotation
from .collection import AnnotationCollection

logger = logging.getLogger(__name__)

CLASS_ANNOTATIONS_ATTR = "__form_class_annotations__"
METADATA_CLASS_ATTR = "__form_annotations__"
METADATA_KEY = "form"


@dataclass
class ClassReflection:
    """An annotated class."""
    cls: type
    annotations: AnnotationCollection = field(default_factory=AnnotationCollection)

    @property
    def name(self) -> str:
        return self.cls.__name__


@dataclass
class PropertyReflection:
    """A declared field of an annotated class."""
    name: str
    type_hint: Any = None
    annotations: AnnotationCollection = field(default_factory=AnnotationCollection)
    owner: Optional[type] = None


def form_annotations(*annotations: Annotation) -> Callable[[type], type]:
    """
    Class decorator attaching form-level annotations.

    Only the decorated class carries them; subclasses must redeclare.

    Raises:
        InvalidArgumentError: If a non-annotation is passed
    """
    for annotation in annotations:
        if not isinstance(annotation, Annotation):
            raise InvalidArgumentError(
                f"form_annotations expects annotation objects; received {annotation!r}"
            )

    def decorator(cls: type) -> type:
        setattr(cls, CLASS_ANNOTATIONS_ATTR, tuple(annotations))
        return cls

    return decorator


def _only_annotations(values: Any, owner: str) -> AnnotationCollection:
    collection = AnnotationCollection()
    for value in values or ():
        if isinstance(value, Annotation):
            collection.append(value)
        else:
            logger.debug(f"{owner}: ignoring non-annotation {value!r}")
    return collection


def _entity_class(entity: Any) -> type:
    return entity if isinstance(entity, type) else type(entity)


def _own_annotations(klass: type) -> Dict[str, Any]:
    try:
        return inspect.get_annotations(klass)
    except NameError:
        return dict(klass.__dict__.get("__annotations__", {}))


class _ForwardRefNamespace(dict):
    """Class namespace for evaluating string annotations; unknown names become forward references."""

    def __init__(self, klass: type, module_globals: Dict[str, Any]):
        super().__init__(vars(klass))
        self.module_globals = module_globals
        self.unresolved: List[str] = []

    def __missing__(self, name: str) -> Any:
        if name in self.module_globals:
            return self.module_globals[name]
        if hasattr(builtins, name):
            return getattr(builtins, name)
        self.unresolved.append(name)
        return typing.ForwardRef(name)


def _resolve_field_hint(cls: type, name: str, annotation: Any, namespace: _ForwardRefNamespace) -> Any:
    if isinstance(annotation, typing.ForwardRef):
        annotation = annotation.__forward_arg__
    if not isinstance(annotation, str):
        return annotation
    namespace.unresolved = []
    try:
        hint = eval(annotation, namespace.module_globals, namespace)
    except (AttributeError, NameError, SyntaxError, TypeError) as e:
        logger.warning(
            f"{cls.__name__}.{name}: cannot evaluate annotation {annotation!r} ({e}); "
            f"its form annotations are ignored"
        )
        return annotation
    if namespace.unresolved:
        logger.warning(
            f"{cls.__name__}.{name}: unresolved names {namespace.unresolved} in {annotation!r}; "
            f"keeping its form annotations with forward references"
        )
    return hint


def _resolved_hints(cls: type) -> Dict[str, Any]:
    """
    Type hints with Annotated extras.

    When the class as a whole does not resolve, each field is evaluated on
    its own so one bad forward reference does not drop the annotations of
    every other field.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        logger.debug(f"Could not resolve type hints for {cls.__name__} ({e}); resolving per field")
    hints: Dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        module = sys.modules.get(klass.__module__)
        namespace = _ForwardRefNamespace(klass, vars(module) if module is not None else {})
        for name, annotation in _own_annotations(klass).items():
            hints[name] = _resolve_field_hint(cls, name, annotation, namespace)
    return hints


def _is_class_var(hint: Any) -> bool:
    return hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar


class AnnotationReader(ABC):
    """Reads form annotations from a class."""

    @abstractmethod
    def get_class_annotations(self, entity: Any) -> ClassReflection:
        pass

    @abstractmethod
    def get_property_annotations(self, entity: Any) -> List[PropertyReflection]:
        pass


class AnnotatedReader(AnnotationReader):
    """
    Reads ``typing.Annotated`` extras.

    Example:
        @form_annotations(Name("login"))
        class Login:
            username: Annotated[str, Required(), Filter("StringTrim")]
            password: Annotated[str, Type("password")]
    """

    def get_class_annotations(self, entity: Any) -> ClassReflection:
        cls = _entity_class(entity)
        annotations = cls.__dict__.get(CLASS_ANNOTATIONS_ATTR, ())
        return ClassReflection(cls, _only_annotations(annotations, cls.__name__))

    def get_property_annotations(self, entity: Any) -> List[PropertyReflection]:
        cls = _entity_class(entity)
        hints = _resolved_hints(cls)

        # Base classes first; a redeclared field keeps its original position
        owners: Dict[str, type] = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name in _own_annotations(klass):
                owners.setdefault(name, klass)

        properties = []
        for name, owner in owners.items():
            if name.startswith("_"):
                continue
            hint = hints.get(name)
            if _is_class_var(hint):
                continue
            extras: Any = ()
            if typing.get_origin(hint) is typing.Annotated:
                extras = hint.__metadata__
            properties.append(PropertyReflection(
                name=name,
                type_hint=hint,
                annotations=_only_annotations(extras, f"{cls.__name__}.{name}"),
                owner=owner,
            ))
        return properties


class MetadataReader(AnnotationReader):
    """
    Reads dataclass field metadata.

    Example:
        @dataclass
        class Login:
            __form_annotations__ = [Name("login")]
            username: str = field(default="", metadata={"form": [Required()]})
    """

    def _require_dataclass(self, entity: Any) -> type:
        cls = _entity_class(entity)
        if not dataclasses.is_dataclass(cls):
            raise InvalidArgumentError(
                f"MetadataReader requires a dataclass; received {cls.__name__}"
            )
        return cls

    def get_class_annotations(self, entity: Any) -> ClassReflection:
        cls = self._require_dataclass(entity)
        annotations = cls.__dict__.get(METADATA_CLASS_ATTR, ())
        return ClassReflection(cls, _only_annotations(annotations, cls.__name__))

    def get_property_annotations(self, entity: Any) -> List[PropertyReflection]:
        cls = self._require_dataclass(entity)
        hints = _resolved_hints(cls)
        properties = []
        for dc_field in dataclasses.fields(cls):
            properties.append(PropertyReflection(
                name=dc_field.name,
                type_hint=hints.get(dc_field.name, dc_field.type),
                annotations=_only_annotations(
                    dc_field.metadata.get(METADATA_KEY, ()), f"{cls.__name__}.{dc_field.name}"
                ),
                owner=cls,
            ))
        return properties


def get_reader(use_metadata: bool = False) -> AnnotationReader:
    return MetadataReader() if use_metadata else AnnotatedReader()


__all__: List[str] = [
    "ClassReflection",
    "PropertyReflection",
    "AnnotationReader",
    "AnnotatedReader",
    "MetadataReader",
    "form_annotations",
    "get_reader",
]
