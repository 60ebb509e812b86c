"""<select> helper with options and option groups."""

from collections.abc import Mapping
from typing import Any, List, Set

from markupsafe import Markup

from .abstract_helper import AbstractHelper


class FormSelect(AbstractHelper):
    """
    Renders a Select element.

    Example:
        select = Select("color", {"value_options": {"r": "Red", "g": "Green"}, "empty_option": "Pick one"})
        select.set_value("g")
        FormSelect()(select)
        # <select name="color"><option value="">Pick one</option>
        # <option value="r">Red</option><option value="g" selected="selected">Green</option></select>
    """

    valid_tag_attributes: Set[str] = {
        "name", "autocomplete", "autofocus", "disabled", "form", "multiple", "required", "size",
    }
    valid_option_attributes: Set[str] = {"disabled", "selected", "label", "value"}
    valid_optgroup_attributes: Set[str] = {"disabled", "label"}

    def render(self, element: Any) -> Markup:
        """
        Raises:
            DomainError: If the element has no name
        """
        name = self.require_name(element)
        attributes = element.get_attributes()
        attributes.pop("value", None)
        if attributes.get("multiple") and not name.endswith("[]"):
            name = f"{name}[]"
        attributes["name"] = name

        options = list(self._normalize_options(element.get_value_options()))
        empty_option = element.get_empty_option()
        if empty_option is not None:
            if isinstance(empty_option, Mapping):
                options.insert(0, {"value": "", **empty_option})
            else:
                options.insert(0, {"value": "", "label": empty_option})

        selected = self._selected_values(element.get_value())
        return Markup(
            f"<select {self.create_attributes_string(attributes)}>"
            f"{self.render_options(options, selected)}</select>"
        )

    def _selected_values(self, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value]
        return [str(value)]

    def _normalize_options(self, options: Any) -> List[Any]:
        """Turn value_options into a list of option / optgroup mappings."""
        normalized = []
        items = options.items() if isinstance(options, Mapping) else enumerate(options or ())
        for key, option in items:
            if isinstance(option, Mapping):
                if "options" in option:
                    normalized.append({**option, "options": self._normalize_options(option["options"])})
                else:
                    normalized.append({"value": key, **option})
            elif isinstance(options, Mapping):
                normalized.append({"value": key, "label": option})
            else:
                normalized.append({"value": option, "label": option})
        return normalized

    def render_options(self, options: List[Any], selected: List[str]) -> str:
        rendered = []
        for option in options:
            if "options" in option:
                rendered.append(self.render_optgroup(option, selected))
                continue
            value = option.get("value")
            attributes = dict(option.get("attributes", {}))
            attributes["value"] = value
            attributes["selected"] = option.get("selected") or str(value) in selected
            if option.get("disabled"):
                attributes["disabled"] = True
            label = self.escaper.escape_html(option.get("label", value))
            rendered.append(
                f"<option {self.create_attributes_string(attributes, self.valid_option_attributes)}>{label}</option>"
            )
        return "".join(rendered)

    def render_optgroup(self, optgroup: Any, selected: List[str]) -> str:
        attributes = dict(optgroup.get("attributes", {}))
        attributes["label"] = optgroup.get("label")
        if optgroup.get("disabled"):
            attributes["disabled"] = True
        return (
            f"<optgroup {self.create_attributes_string(attributes, self.valid_optgroup_attributes)}>"
            f"{self.render_options(optgroup['options'], selected)}</optgroup>"
        )
