"""
Annotation-driven form building.

Annotate a class, then let AnnotationBuilder turn it into a form
specification (or a ready Form via the Factory).
"""

from .annotations import (
    Annotation,
    Attributes,
    Options,
    Name,
    Type,
    Flags,
    Exclude,
    Required,
    AllowEmpty,
    ContinueIfEmpty,
    ErrorMessage,
    Filter,
    Validator,
    Input,
    InputFilter,
    Hydrator,
    Instance,
    ComposedObject,
    ValidationGroup,
    ANNOTATION_CLASSES,
)
from .collection import AnnotationCollection
from .readers import (
    ClassReflection,
    PropertyReflection,
    AnnotationReader,
    AnnotatedReader,
    MetadataReader,
    form_annotations,
    get_reader,
)
from .listeners import (
    AbstractAnnotationsListener,
    ElementAnnotationsListener,
    FormAnnotationsListener,
    EVENT_DISCOVER_NAME,
    EVENT_CONFIGURE_FORM,
    EVENT_CONFIGURE_ELEMENT,
    EVENT_CHECK_FOR_EXCLUDE,
)
from .type_inference import ELEMENT_TYPE_REGISTRY, infer_element_spec, infer_element_types
from .builder import AnnotationBuilder

__all__ = [
    "Annotation",
    "Attributes",
    "Options",
    "Name",
    "Type",
    "Flags",
    "Exclude",
    "Required",
    "AllowEmpty",
    "ContinueIfEmpty",
    "ErrorMessage",
    "Filter",
    "Validator",
    "Input",
    "InputFilter",
    "Hydrator",
    "Instance",
    "ComposedObject",
    "ValidationGroup",
    "ANNOTATION_CLASSES",
    "AnnotationCollection",
    "ClassReflection",
    "PropertyReflection",
    "AnnotationReader",
    "AnnotatedReader",
    "MetadataReader",
    "form_annotations",
    "get_reader",
    "AbstractAnnotationsListener",
    "ElementAnnotationsListener",
    "FormAnnotationsListener",
    "EVENT_DISCOVER_NAME",
    "EVENT_CONFIGURE_FORM",
    "EVENT_CONFIGURE_ELEMENT",
    "EVENT_CHECK_FOR_EXCLUDE",
    "ELEMENT_TYPE_REGISTRY",
    "infer_element_spec",
    "infer_element_types",
    "AnnotationBuilder",
]
