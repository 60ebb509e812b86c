"""
Escaping for HTML bodies and attribute values.

Attribute values use a stricter scheme than markupsafe: everything except
``[A-Za-z0-9,._-]`` is turned into an entity, so values are safe even in
unquoted attributes.
"""

import re
from typing import Any, Dict

from markupsafe import escape

_SAFE_ATTR = re.compile(r"^[a-zA-Z0-9,._-]*$")
_UNSAFE_ATTR_CHAR = re.compile(r"[^a-zA-Z0-9,._-]")

# Code point -> named entity
HTML_NAMED_ENTITIES: Dict[int, str] = {
    34: "quot",
    38: "amp",
    60: "lt",
    62: "gt",
}


def _attr_entity(match: "re.Match[str]") -> str:
    char = match.group(0)
    code = ord(char)

    # Undefined control characters have no valid entity
    if (code <= 0x1F and char not in "\t\n\r") or 0x7F <= code <= 0x9F:
        return "&#xFFFD;"
    if code in HTML_NAMED_ENTITIES:
        return f"&{HTML_NAMED_ENTITIES[code]};"
    if code > 255:
        return f"&#x{code:04X};"
    return f"&#x{code:02X};"


class Escaper:
    """
    Context-specific escaping.

    Example:
        >>> Escaper().escape_html_attr("foo[]")
        'foo&#x5B;&#x5D;'
    """

    def escape_html(self, value: Any) -> str:
        return str(escape(value))

    def escape_html_attr(self, value: Any) -> str:
        value = "" if value is None else str(value)
        if _SAFE_ATTR.match(value):
            return value
        return _UNSAFE_ATTR_CHAR.sub(_attr_entity, value)


_default_escaper = Escaper()


def escape_html(value: Any) -> str:
    return _default_escaper.escape_html(value)


def escape_html_attr(value: Any) -> str:
    return _default_escaper.escape_html_attr(value)
