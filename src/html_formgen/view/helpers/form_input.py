"""
<input> helpers.

FormInput renders any element as an input using its ``type`` attribute;
the typed subclasses force their type.
"""

from typing import Any, Dict, Optional, Set

from markupsafe import Markup

from .abstract_helper import AbstractHelper


class FormInput(AbstractHelper):
    """Renders an element as ``<input>``."""

    valid_tag_attributes: Set[str] = {
        "name", "accept", "alt", "autocomplete", "autofocus", "checked", "dirname", "disabled",
        "form", "formaction", "formenctype", "formmethod", "formnovalidate", "formtarget",
        "height", "list", "max", "maxlength", "min", "minlength", "multiple", "pattern",
        "placeholder", "readonly", "required", "size", "src", "step", "type", "value", "width",
    }

    # Forced input type; None uses the element's type attribute
    input_type: Optional[str] = None

    def get_type(self, element: Any) -> str:
        if self.input_type is not None:
            return self.input_type
        return element.get_attribute("type") or "text"

    def get_value(self, element: Any) -> Any:
        return element.get_value()

    def build_attributes(self, element: Any) -> Dict[str, Any]:
        attributes = element.get_attributes()
        attributes["name"] = self.require_name(element)
        attributes["type"] = self.get_type(element)
        attributes["value"] = self.get_value(element)
        return attributes

    def render(self, element: Any) -> Markup:
        """
        Raises:
            DomainError: If the element has no name
        """
        attributes = self.build_attributes(element)
        return Markup(f"<input {self.create_attributes_string(attributes)}{self.get_inline_closing_bracket()}")


class FormText(FormInput):
    input_type = "text"


class FormHidden(FormInput):
    input_type = "hidden"


class FormPassword(FormInput):
    """Password input; the value is never rendered."""

    input_type = "password"

    def get_value(self, element: Any) -> Any:
        return ""


class FormEmail(FormInput):
    input_type = "email"


class FormNumber(FormInput):
    input_type = "number"


class FormDate(FormInput):
    input_type = "date"


class FormDateTimeLocal(FormInput):
    input_type = "datetime-local"


class FormMonth(FormInput):
    input_type = "month"


class FormSubmit(FormInput):
    input_type = "submit"


class FormButton(FormInput):
    input_type = "button"


class FormCheckbox(FormInput):
    """
    Checkbox preceded by a hidden input carrying the unchecked value,
    so unchecked boxes still submit a value.
    """

    input_type = "checkbox"

    def render(self, element: Any) -> Markup:
        name = self.require_name(element)
        attributes = element.get_attributes()
        attributes["name"] = name
        attributes["type"] = "checkbox"
        attributes["value"] = element.checked_value
        attributes["checked"] = element.is_checked()
        closing = self.get_inline_closing_bracket()

        rendered = f"<input {self.create_attributes_string(attributes)}{closing}"
        if element.use_hidden_element:
            hidden = {"type": "hidden", "name": name, "value": element.unchecked_value}
            if attributes.get("disabled"):
                hidden["disabled"] = True
            rendered = f"<input {self.create_attributes_string(hidden)}{closing}" + rendered
        return Markup(rendered)
