"""Exceptions raised by html-formgen."""


class FormGenError(Exception):
    """Base class for all html-formgen errors."""


class InvalidArgumentError(FormGenError, ValueError):
    """Raised when an argument passed to a form component is unusable."""


class DomainError(FormGenError, ValueError):
    """Raised when an object is in a state that cannot be rendered or processed."""


class InvalidElementError(FormGenError, LookupError):
    """Raised when a named element, fieldset or input does not exist."""
