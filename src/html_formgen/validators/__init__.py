"""
Validators.

Every validator registers under its ``_type_id`` and implements
ValidatorInterface (is_valid / get_messages).
"""

from .base import AbstractValidator, ValidatorChain, VALIDATOR_IMPLEMENTATIONS
from .standard import (
    NotEmpty,
    StringLength,
    Regex,
    GreaterThan,
    LessThan,
    Between,
    InArray,
    Digits,
    EmailAddress,
    Step,
    Callback,
    Explode,
    UploadFile,
)
from .date import Date, DateStep, parse_duration

__all__ = [
    "AbstractValidator",
    "ValidatorChain",
    "VALIDATOR_IMPLEMENTATIONS",
    "NotEmpty",
    "StringLength",
    "Regex",
    "GreaterThan",
    "LessThan",
    "Between",
    "InArray",
    "Digits",
    "EmailAddress",
    "Step",
    "Callback",
    "Explode",
    "UploadFile",
    "Date",
    "DateStep",
    "parse_duration",
]
