"""<textarea> helper."""

from typing import Any, Set

from markupsafe import Markup

from .abstract_helper import AbstractHelper


class FormTextarea(AbstractHelper):
    valid_tag_attributes: Set[str] = {
        "name", "autocomplete", "autofocus", "cols", "dirname", "disabled", "form", "maxlength",
        "minlength", "placeholder", "readonly", "required", "rows", "wrap",
    }

    def render(self, element: Any) -> Markup:
        attributes = element.get_attributes()
        attributes["name"] = self.require_name(element)
        attributes.pop("value", None)
        content = element.get_value()
        content = "" if content is None else self.escaper.escape_html(content)
        return Markup(f"<textarea {self.create_attributes_string(attributes)}>{content}</textarea>")
