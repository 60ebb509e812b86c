"""File input helper."""

from typing import Any, Dict, Set

from .form_input import FormInput


class FormFile(FormInput):
    """
    Renders ``<input type="file">``.

    The type is always "file" and no value is ever rendered. With the
    ``multiple`` attribute the name gets a ``[]`` suffix.
    """

    valid_tag_attributes: Set[str] = {
        "name", "accept", "autofocus", "disabled", "form", "multiple", "required", "type",
    }
    input_type = "file"

    def build_attributes(self, element: Any) -> Dict[str, Any]:
        attributes = element.get_attributes()
        name = self.require_name(element)
        if attributes.get("multiple") and not name.endswith("[]"):
            name = f"{name}[]"
        attributes["name"] = name
        attributes["type"] = "file"
        attributes.pop("value", None)
        return attributes
