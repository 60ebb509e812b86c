"""Mapping merge utilities."""

from typing import Any, Dict, Mapping


def next_index(target: Mapping[Any, Any]) -> int:
    """Return the next free integer key of a mapping used as an ordered list."""
    int_keys = [key for key in target if isinstance(key, int) and not isinstance(key, bool)]
    return max(int_keys) + 1 if int_keys else 0


def merge(base: Mapping[Any, Any], override: Mapping[Any, Any]) -> Dict[Any, Any]:
    """
    Recursively merge two mappings.

    Nested mappings are merged, integer keys from ``override`` are appended
    after the integer keys of ``base``, and any other key in ``override`` wins.

    Example:
        >>> merge({"a": {"x": 1}, 0: "first"}, {"a": {"y": 2}, 0: "second"})
        {'a': {'x': 1, 'y': 2}, 0: 'first', 1: 'second'}
    """
    result: Dict[Any, Any] = dict(base)
    for key, value in override.items():
        if isinstance(key, int) and not isinstance(key, bool):
            result[next_index(result)] = value
        elif key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = merge(result[key], value)
        else:
            result[key] = value
    return result
