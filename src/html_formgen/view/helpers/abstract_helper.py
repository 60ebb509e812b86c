"""
Base view helper.

Handles doctype-dependent closing brackets and the attribute whitelist:
only global attributes, the helper's tag attributes and data-/aria-/x-
prefixed attributes are rendered. Everything else is dropped silently.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Set, Tuple
import logging

from markupsafe import Markup

from html_formgen.exceptions import DomainError
from html_formgen.protocols import get_form_config
from html_formgen.view.escaper import Escaper

logger = logging.getLogger(__name__)

DOCTYPE_HTML5 = "HTML5"
DOCTYPE_XHTML = "XHTML"

VALID_GLOBAL_ATTRIBUTES: Set[str] = {
    "accesskey", "autocapitalize", "autofocus", "class", "contenteditable", "contextmenu",
    "dir", "draggable", "dropzone", "hidden", "id", "inputmode", "is", "itemid", "itemprop",
    "itemref", "itemscope", "itemtype", "lang", "nonce", "role", "slot", "spellcheck",
    "style", "tabindex", "title", "translate", "xml:base", "xml:lang", "xml:space",
    "onabort", "onblur", "oncancel", "oncanplay", "oncanplaythrough", "onchange", "onclick",
    "onclose", "oncontextmenu", "oncuechange", "ondblclick", "ondrag", "ondragend",
    "ondragenter", "ondragleave", "ondragover", "ondragstart", "ondrop", "ondurationchange",
    "onemptied", "onended", "onerror", "onfocus", "oninput", "oninvalid", "onkeydown",
    "onkeypress", "onkeyup", "onload", "onloadeddata", "onloadedmetadata", "onloadstart",
    "onmousedown", "onmouseenter", "onmouseleave", "onmousemove", "onmouseout",
    "onmouseover", "onmouseup", "onmousewheel", "onpause", "onplay", "onplaying",
    "onprogress", "onratechange", "onreset", "onresize", "onscroll", "onseeked",
    "onseeking", "onselect", "onshow", "onstalled", "onsubmit", "onsuspend",
    "ontimeupdate", "ontoggle", "onvolumechange", "onwaiting",
}

VALID_ATTRIBUTE_PREFIXES: Tuple[str, ...] = ("data-", "aria-", "x-")

# Attribute -> (value when true, value when false or None to omit)
BOOLEAN_ATTRIBUTES: Dict[str, Tuple[str, Optional[str]]] = {
    "autofocus": ("autofocus", None),
    "checked": ("checked", None),
    "disabled": ("disabled", None),
    "formnovalidate": ("formnovalidate", None),
    "multiple": ("multiple", None),
    "novalidate": ("novalidate", None),
    "readonly": ("readonly", None),
    "required": ("required", None),
    "selected": ("selected", None),
    "autocomplete": ("on", "off"),
}


class AbstractHelper(ABC):
    """
    Base class for helpers rendering a single element.

    Calling a helper with an element renders it; calling it without one
    returns the helper so further methods can be chained.
    """

    valid_tag_attributes: Set[str] = set()

    def __init__(self, doctype: Optional[str] = None, escaper: Optional[Escaper] = None):
        self.doctype = doctype or get_form_config().doctype
        self.escaper = escaper or Escaper()

    def __call__(self, element: Any = None, *args: Any, **kwargs: Any) -> Any:
        if element is None:
            return self
        return self.render(element, *args, **kwargs)

    @abstractmethod
    def render(self, element: Any) -> Markup:
        pass

    # ==================== DOCTYPE ====================

    def set_doctype(self, doctype: str) -> "AbstractHelper":
        self.doctype = doctype
        return self

    def get_doctype(self) -> str:
        return self.doctype

    def is_xhtml(self) -> bool:
        return self.doctype.upper().startswith("XHTML")

    def get_inline_closing_bracket(self) -> str:
        return " />" if self.is_xhtml() else ">"

    # ==================== ATTRIBUTES ====================

    def is_valid_attribute(self, key: str, tag_attributes: Optional[Set[str]] = None) -> bool:
        tag_attributes = self.valid_tag_attributes if tag_attributes is None else tag_attributes
        return (
            key in VALID_GLOBAL_ATTRIBUTES
            or key in tag_attributes
            or key.startswith(VALID_ATTRIBUTE_PREFIXES)
        )

    def prepare_attributes(self, attributes: Dict[str, Any],
                           tag_attributes: Optional[Set[str]] = None) -> Dict[str, str]:
        """Lowercase keys, drop invalid and empty attributes and normalize boolean values."""
        prepared: Dict[str, str] = {}
        for key, value in attributes.items():
            key = str(key).lower()
            if not self.is_valid_attribute(key, tag_attributes):
                logger.debug(f"{type(self).__name__}: dropping attribute '{key}'")
                continue
            if key in BOOLEAN_ATTRIBUTES:
                on_value, off_value = BOOLEAN_ATTRIBUTES[key]
                # Enumerated attributes keep tokens such as autocomplete="email"
                if off_value is not None and isinstance(value, str) and value not in ("", on_value, off_value):
                    prepared[key] = value
                    continue
                if value and value != off_value:
                    prepared[key] = on_value
                elif off_value is not None and value is not None:
                    prepared[key] = off_value
                continue
            if value is None:
                continue
            if isinstance(value, (list, tuple, set)):
                value = " ".join(str(item) for item in value)
            prepared[key] = str(value)
        return prepared

    def create_attributes_string(self, attributes: Dict[str, Any],
                                 tag_attributes: Optional[Set[str]] = None) -> str:
        """
        Render attributes as ``key="value"`` pairs.

        Example:
            helper.create_attributes_string({"name": "foo[]", "disabled": True})
            # 'name="foo&#x5B;&#x5D;" disabled="disabled"'
        """
        prepared = self.prepare_attributes(attributes, tag_attributes)
        return " ".join(
            f'{self.escaper.escape_html(key)}="{self.escaper.escape_html_attr(value)}"'
            for key, value in prepared.items()
        )

    def require_name(self, element: Any) -> str:
        """
        Raises:
            DomainError: If the element has no name
        """
        name = element.get_name()
        if name is None or name == "":
            raise DomainError(
                f"{type(self).__name__}.render requires that the element has an assigned name; none discovered"
            )
        return name
