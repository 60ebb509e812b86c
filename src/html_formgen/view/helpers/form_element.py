"""
FormElement: renders any element by dispatching to the matching helper.

Dispatch order:
1. FormGenConfig.custom_view_helpers, walking the element's MRO
2. CLASS_HELPER_REGISTRY, walking the element's MRO
3. TYPE_HELPER_REGISTRY by the element's ``type`` attribute
4. FormInput
"""

from typing import Any, Dict, Type
import logging

from markupsafe import Markup

from html_formgen.elements import (
    Button, Checkbox, Collection, Date, DateTimeLocal, Email, Fieldset, File, Hidden, Month,
    Number, Password, Select, Submit, Text, Textarea,
)
from html_formgen.protocols import get_form_config
from .abstract_helper import AbstractHelper
from .form_file import FormFile
from .form_input import (
    FormButton, FormCheckbox, FormDate, FormDateTimeLocal, FormEmail, FormHidden, FormInput,
    FormMonth, FormNumber, FormPassword, FormSubmit, FormText,
)
from .form_select import FormSelect
from .form_textarea import FormTextarea

logger = logging.getLogger(__name__)

# Maps element class -> helper class
CLASS_HELPER_REGISTRY: Dict[Type, Type[AbstractHelper]] = {
    Button: FormButton,
    Checkbox: FormCheckbox,
    Date: FormDate,
    DateTimeLocal: FormDateTimeLocal,
    Email: FormEmail,
    File: FormFile,
    Hidden: FormHidden,
    Month: FormMonth,
    Number: FormNumber,
    Password: FormPassword,
    Select: FormSelect,
    Submit: FormSubmit,
    Text: FormText,
    Textarea: FormTextarea,
}

# Maps type attribute -> helper class
TYPE_HELPER_REGISTRY: Dict[str, Type[AbstractHelper]] = {
    "checkbox": FormCheckbox,
    "file": FormFile,
    "hidden": FormHidden,
    "password": FormPassword,
    "select": FormSelect,
    "textarea": FormTextarea,
}


class FormElement(AbstractHelper):
    """Renders an element with the helper registered for its class or type."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._helpers: Dict[Type, AbstractHelper] = {}

    def add_class(self, element_class: Type, helper_class: Type[AbstractHelper]) -> "FormElement":
        CLASS_HELPER_REGISTRY[element_class] = helper_class
        return self

    def add_type(self, type_name: str, helper_class: Type[AbstractHelper]) -> "FormElement":
        TYPE_HELPER_REGISTRY[type_name] = helper_class
        return self

    def get_helper_class(self, element: Any) -> Type[AbstractHelper]:
        custom = get_form_config().custom_view_helpers
        for klass in type(element).__mro__:
            if klass in custom:
                return custom[klass]
        if isinstance(element, (Fieldset, Collection)):
            from .form_collection import FormCollection
            return FormCollection
        for klass in type(element).__mro__:
            if klass in CLASS_HELPER_REGISTRY:
                return CLASS_HELPER_REGISTRY[klass]
        element_type = element.get_attribute("type")
        if element_type in TYPE_HELPER_REGISTRY:
            return TYPE_HELPER_REGISTRY[element_type]
        return FormInput

    def get_helper(self, element: Any) -> AbstractHelper:
        helper_class = self.get_helper_class(element)
        if helper_class not in self._helpers:
            self._helpers[helper_class] = helper_class(doctype=self.doctype, escaper=self.escaper)
        return self._helpers[helper_class]

    def render(self, element: Any) -> Markup:
        helper = self.get_helper(element)
        logger.debug(f"FormElement: {type(element).__name__} -> {type(helper).__name__}")
        return helper.render(element)
