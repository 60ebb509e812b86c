"""<label> helper."""

from typing import Any, Optional, Set

from markupsafe import Markup

from html_formgen.exceptions import DomainError
from .abstract_helper import AbstractHelper

APPEND = "append"
PREPEND = "prepend"


class FormLabel(AbstractHelper):
    """
    Renders an element's label.

    The element's label_options may set ``disable_html_escape``; an ``id``
    attribute on the element becomes the label's ``for``.
    """

    valid_tag_attributes: Set[str] = {"for", "form"}

    def open_tag(self, element: Any = None) -> Markup:
        if element is None:
            return Markup("<label>")
        attributes = dict(element.get_label_attributes())
        element_id = element.get_attribute("id")
        if element_id and "for" not in attributes:
            attributes["for"] = element_id
        attributes_string = self.create_attributes_string(attributes)
        return Markup(f"<label {attributes_string}>" if attributes_string else "<label>")

    def close_tag(self) -> Markup:
        return Markup("</label>")

    def render(self, element: Any, content: Optional[str] = None, position: str = PREPEND) -> Markup:
        """
        Render ``<label>`` for an element.

        Args:
            element: Element with a label
            content: Optional markup placed inside the label next to the text
            position: Place the label text before (prepend) or after (append) content

        Raises:
            DomainError: If the element has no label and no content is given
        """
        label = element.get_label()
        if not label and content is None:
            raise DomainError(
                f"{type(self).__name__}.render expects either label content or an element "
                f"with an assigned label; none found"
            )
        text = ""
        if label:
            disable_escape = element.label_options.get("disable_html_escape", False)
            text = label if disable_escape else self.escaper.escape_html(label)
        if content is not None:
            text = f"{content}{text}" if position == APPEND else f"{text}{content}"
        return Markup(f"{self.open_tag(element)}{text}{self.close_tag()}")
