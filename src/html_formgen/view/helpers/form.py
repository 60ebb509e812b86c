"""<form> tag and whole-form helpers."""

from typing import Any, Dict, Set

from markupsafe import Markup

from html_formgen.elements import Fieldset
from .abstract_helper import AbstractHelper
from .form_collection import FormCollection
from .form_element import FormElement


class FormTag(AbstractHelper):
    """Renders the opening and closing ``<form>`` tags."""

    valid_tag_attributes: Set[str] = {
        "accept-charset", "action", "autocomplete", "enctype", "method", "name", "novalidate", "target",
    }
    default_attributes: Dict[str, Any] = {"action": "", "method": "get"}

    def open_tag(self, form: Any = None) -> Markup:
        attributes = dict(self.default_attributes)
        if form is not None:
            attributes.update(form.get_attributes())
        return Markup(f"<form {self.create_attributes_string(attributes)}>")

    def close_tag(self) -> Markup:
        return Markup("</form>")

    def render(self, form: Any) -> Markup:
        return self.open_tag(form)


class Form(AbstractHelper):
    """
    Renders a complete form: prepares it, then renders every child between
    the form tags.

    Example:
        html = Form()(form)
    """

    def render(self, form: Any) -> Markup:
        form.prepare()
        form_tag = FormTag(doctype=self.doctype, escaper=self.escaper)
        collection = FormCollection(doctype=self.doctype, escaper=self.escaper)
        element_helper = FormElement(doctype=self.doctype, escaper=self.escaper)

        parts = []
        for element in form:
            if isinstance(element, Fieldset):
                parts.append(collection.render(element))
            else:
                parts.append(collection.render_row(element, element_helper))
        return Markup(f"{form_tag.open_tag(form)}{''.join(parts)}{form_tag.close_tag()}")
