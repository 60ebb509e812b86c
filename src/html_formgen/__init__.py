"""
html-formgen: annotation-driven HTML form generation.

Describe a form by annotating a Python class, build it with the
AnnotationBuilder, validate submitted data through its input filter and
render it with the view helpers.

Architecture:
- Tier 1 (Core): merge utilities, exceptions, component registries
- Tier 2 (Protocols): provider and component ABCs, FormGenConfig
- Tier 3 (Components): validators, filters, inputs, input filters, hydrators
- Tier 4 (Forms): elements, fieldsets, forms and the Factory
- Tier 5 (Annotations): readers, listeners and the AnnotationBuilder
- Tier 6 (View): escaper and HTML view helpers

Example:
    from dataclasses import dataclass
    from typing import Annotated
    from html_formgen import AnnotationBuilder, Required, Type
    from html_formgen.view import Form as FormHelper

    @dataclass
    class Contact:
        email: Annotated[str, Type("email"), Required()] = ""

    form = AnnotationBuilder().create_form(Contact)
    html = FormHelper()(form)
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .annotation import (
        AnnotationBuilder, Attributes, ComposedObject, Exclude, Filter, Flags, Name, Options,
        Required, Type, Validator, form_annotations,
    )
    from .elements import Element, Fieldset, Collection, Form
    from .factory import Factory
    from .input_filter import Input, InputFilter, InputFilterFactory
    from .protocols import FormGenConfig, set_form_config, get_form_config, configure_logging
    from .exceptions import FormGenError, InvalidArgumentError, DomainError, InvalidElementError

__version__ = "0.1.0"

_EXPORTS = {
    "AnnotationBuilder": ("html_formgen.annotation", "AnnotationBuilder"),
    "form_annotations": ("html_formgen.annotation", "form_annotations"),
    "Attributes": ("html_formgen.annotation", "Attributes"),
    "ComposedObject": ("html_formgen.annotation", "ComposedObject"),
    "Exclude": ("html_formgen.annotation", "Exclude"),
    "Filter": ("html_formgen.annotation", "Filter"),
    "Flags": ("html_formgen.annotation", "Flags"),
    "Name": ("html_formgen.annotation", "Name"),
    "Options": ("html_formgen.annotation", "Options"),
    "Required": ("html_formgen.annotation", "Required"),
    "Type": ("html_formgen.annotation", "Type"),
    "Validator": ("html_formgen.annotation", "Validator"),
    "Element": ("html_formgen.elements", "Element"),
    "Fieldset": ("html_formgen.elements", "Fieldset"),
    "Collection": ("html_formgen.elements", "Collection"),
    "Form": ("html_formgen.elements", "Form"),
    "Factory": ("html_formgen.factory", "Factory"),
    "Input": ("html_formgen.input_filter", "Input"),
    "InputFilter": ("html_formgen.input_filter", "InputFilter"),
    "InputFilterFactory": ("html_formgen.input_filter", "InputFilterFactory"),
    "FormGenConfig": ("html_formgen.protocols", "FormGenConfig"),
    "set_form_config": ("html_formgen.protocols", "set_form_config"),
    "get_form_config": ("html_formgen.protocols", "get_form_config"),
    "configure_logging": ("html_formgen.protocols", "configure_logging"),
    "FormGenError": ("html_formgen.exceptions", "FormGenError"),
    "InvalidArgumentError": ("html_formgen.exceptions", "InvalidArgumentError"),
    "DomainError": ("html_formgen.exceptions", "DomainError"),
    "InvalidElementError": ("html_formgen.exceptions", "InvalidElementError"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["__version__"] + list(_EXPORTS.keys())
