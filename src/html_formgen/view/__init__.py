"""HTML rendering: escaping and form view helpers."""

from .escaper import Escaper, escape_html, escape_html_attr
from .helpers import *  # noqa: F401,F403
from .helpers import __all__ as _helpers_all

__all__ = ["Escaper", "escape_html", "escape_html_attr"] + list(_helpers_all)
