"""
View helpers rendering elements as HTML.

Every helper is callable: ``helper(element)`` renders, ``helper()`` returns
the helper itself. Output is ``markupsafe.Markup``.
"""

from .abstract_helper import (
    AbstractHelper,
    BOOLEAN_ATTRIBUTES,
    DOCTYPE_HTML5,
    DOCTYPE_XHTML,
    VALID_ATTRIBUTE_PREFIXES,
    VALID_GLOBAL_ATTRIBUTES,
)
from .form_input import (
    FormInput,
    FormText,
    FormHidden,
    FormPassword,
    FormEmail,
    FormNumber,
    FormDate,
    FormDateTimeLocal,
    FormMonth,
    FormSubmit,
    FormButton,
    FormCheckbox,
)
from .form_file import FormFile
from .form_select import FormSelect
from .form_textarea import FormTextarea
from .form_label import FormLabel
from .form_element import FormElement, CLASS_HELPER_REGISTRY, TYPE_HELPER_REGISTRY
from .form_collection import FormCollection
from .form import FormTag, Form

__all__ = [
    "AbstractHelper",
    "BOOLEAN_ATTRIBUTES",
    "DOCTYPE_HTML5",
    "DOCTYPE_XHTML",
    "VALID_ATTRIBUTE_PREFIXES",
    "VALID_GLOBAL_ATTRIBUTES",
    "FormInput",
    "FormText",
    "FormHidden",
    "FormPassword",
    "FormEmail",
    "FormNumber",
    "FormDate",
    "FormDateTimeLocal",
    "FormMonth",
    "FormSubmit",
    "FormButton",
    "FormCheckbox",
    "FormFile",
    "FormSelect",
    "FormTextarea",
    "FormLabel",
    "FormElement",
    "CLASS_HELPER_REGISTRY",
    "TYPE_HELPER_REGISTRY",
    "FormCollection",
    "FormTag",
    "Form",
]
