"""Fieldset / collection helper."""

from typing import Any, Set

from markupsafe import Markup

from html_formgen.elements import Button, Fieldset, Hidden, Submit
from .abstract_helper import AbstractHelper
from .form_label import FormLabel


class FormCollection(AbstractHelper):
    """
    Renders a fieldset (or collection) with its children.

    Labelled elements are rendered as label + control; nested fieldsets
    recurse. With ``should_wrap`` the output is wrapped in ``<fieldset>``
    and the fieldset label becomes a ``<legend>``.
    """

    valid_tag_attributes: Set[str] = {"disabled", "form"}

    def __init__(self, *args: Any, should_wrap: bool = True, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.should_wrap = should_wrap
        self._label_helper = FormLabel(doctype=self.doctype, escaper=self.escaper)

    def render(self, element: Any) -> Markup:
        from .form_element import FormElement
        element_helper = FormElement(doctype=self.doctype, escaper=self.escaper)

        parts = []
        for child in element:
            if isinstance(child, Fieldset):
                parts.append(self.render(child))
            else:
                parts.append(self.render_row(child, element_helper))
        markup = "".join(parts)

        if not self.should_wrap:
            return Markup(markup)
        legend = ""
        if element.get_label():
            legend = f"<legend>{self.escaper.escape_html(element.get_label())}</legend>"
        attributes = self.create_attributes_string(element.get_attributes())
        open_tag = f"<fieldset {attributes}>" if attributes else "<fieldset>"
        return Markup(f"{open_tag}{legend}{markup}</fieldset>")

    def render_row(self, element: Any, element_helper: Any) -> str:
        rendered = element_helper.render(element)
        if element.get_label() and not isinstance(element, (Hidden, Submit, Button)):
            return self._label_helper.render(element) + rendered
        return rendered
