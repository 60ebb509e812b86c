"""
Input filtering and validation.

Inputs hold a value plus filter and validator chains; input filters group
inputs by name and validate whole data sets.
"""

from .input import Input, FileInput, INPUT_IMPLEMENTATIONS, is_empty_value
from .input_filter import InputFilter, CollectionInputFilter, INPUT_FILTER_IMPLEMENTATIONS
from .factory import InputFilterFactory

__all__ = [
    "Input",
    "FileInput",
    "INPUT_IMPLEMENTATIONS",
    "is_empty_value",
    "InputFilter",
    "CollectionInputFilter",
    "INPUT_FILTER_IMPLEMENTATIONS",
    "InputFilterFactory",
]
