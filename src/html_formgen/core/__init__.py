"""
Core utilities.

Pure helpers with no domain-specific logic.
"""

from .merge_utils import merge, next_index

__all__ = [
    "merge",
    "next_index",
]
