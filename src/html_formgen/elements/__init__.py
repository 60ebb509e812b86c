"""
Form elements.

Importing this package registers every built-in element type, so
specifications can refer to them by id ("text", "date", "fieldset", ...).
"""

from .element import Element, ELEMENT_IMPLEMENTATIONS, get_element_class, resolve_element_type
from .inputs import (
    Text, Hidden, Password, Textarea, Submit, Button,
    Email, Number, Checkbox, Select, File,
)
from .dates import DateTime, Date, DateTimeLocal, Month
from .fieldset import Fieldset, Collection
from .form import Form

__all__ = [
    "Element",
    "ELEMENT_IMPLEMENTATIONS",
    "get_element_class",
    "resolve_element_type",
    "Text",
    "Hidden",
    "Password",
    "Textarea",
    "Submit",
    "Button",
    "Email",
    "Number",
    "Checkbox",
    "Select",
    "File",
    "DateTime",
    "Date",
    "DateTimeLocal",
    "Month",
    "Fieldset",
    "Collection",
    "Form",
]
