"""Base configuration class for form generation.

Provides hooks for applications to customize form building and rendering.
"""

import logging
from typing import Any, Dict, Optional, Type
from dataclasses import dataclass, field


@dataclass
class FormGenConfig:
    """Base configuration for form generation behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        doctype: Doctype used by view helpers ("HTML5" or "XHTML")
        preserve_defined_order: Default for AnnotationBuilder - keep fieldsets in the
            element list so the definition order survives
        infer_types: Default for AnnotationBuilder - derive element types from
            Python type hints when no Type annotation is present
        custom_element_types: Extra Python type -> element type id mappings used
            by type inference
        custom_view_helpers: Extra element class -> view helper class mappings used
            by the FormElement helper
        log_level: Level applied to the package logger by configure_logging()
    """

    doctype: str = "HTML5"
    preserve_defined_order: bool = False
    infer_types: bool = False
    custom_element_types: Dict[Type, str] = field(default_factory=dict)
    custom_view_helpers: Dict[Type, Any] = field(default_factory=dict)
    log_level: Optional[int] = None


# Global config instance (set by application)
_form_config: Optional[FormGenConfig] = None


def set_form_config(config: FormGenConfig) -> None:
    """Set the global form generation configuration.

    Args:
        config: FormGenConfig instance
    """
    global _form_config
    _form_config = config


def get_form_config() -> FormGenConfig:
    """Get the current form generation configuration.

    Returns:
        Current FormGenConfig or default if not set
    """
    if _form_config is None:
        return FormGenConfig()
    return _form_config


def configure_logging(config: Optional[FormGenConfig] = None) -> logging.Logger:
    """Apply the configured log level to the package logger.

    Handlers are left to the application.

    Returns:
        The "html_formgen" logger
    """
    config = config or get_form_config()
    package_logger = logging.getLogger("html_formgen")
    if config.log_level is not None:
        package_logger.setLevel(config.log_level)
    return package_logger
