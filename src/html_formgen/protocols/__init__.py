"""
Component protocol definitions and configuration.

ABC-based contracts that eliminate duck typing in favor of
explicit, fail-loud inheritance-based architecture.
"""

from .element_protocols import (
    InputProvider,
    InputFilterProvider,
    ValidatorInterface,
    FilterInterface,
    HydratorInterface,
    ListenerAggregate,
)
from .form_config import FormGenConfig, set_form_config, get_form_config, configure_logging

__all__ = [
    "InputProvider",
    "InputFilterProvider",
    "ValidatorInterface",
    "FilterInterface",
    "HydratorInterface",
    "ListenerAggregate",
    "FormGenConfig",
    "set_form_config",
    "get_form_config",
    "configure_logging",
]
