"""Ordered collection of annotation objects."""

from typing import Any, Iterable, List, Optional, Type

from .annotations import Annotation


class AnnotationCollection(list):
    """List of annotations for one class or property, in declaration order."""

    def __init__(self, annotations: Iterable[Annotation] = ()):
        super().__init__(annotations)

    def has_annotation(self, annotation_class: Type[Annotation]) -> bool:
        return any(isinstance(annotation, annotation_class) for annotation in self)

    def get(self, annotation_class: Type[Annotation]) -> Optional[Any]:
        """Return the first annotation of the given class, or None."""
        for annotation in self:
            if isinstance(annotation, annotation_class):
                return annotation
        return None

    def get_all(self, annotation_class: Type[Annotation]) -> List[Any]:
        return [annotation for annotation in self if isinstance(annotation, annotation_class)]
