"""Deep merge utilities for layered configuration.

Configuration layers (bundled defaults, project file, environment, CLI) are
combined with :func:`deep_merge`. Lists follow override semantics:
  - Default: replace the list entirely
  - First element "+": append the remaining items to the existing list
  - First element "=": explicit replace (same as default)

The "+" form lets a project file add roots to ``content_base`` without
repeating the bundled ones.
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Example:
        >>> deep_merge({"port": 10001, "headers": {"A": "1"}}, {"headers": {"B": "2"}})
        {'port': 10001, 'headers': {'A': '1', 'B': '2'}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if key in result:
            if isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            elif isinstance(result[key], list) and isinstance(value, list):
                result[key] = merge_arrays(result[key], value)
            else:
                result[key] = value
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge lists with override semantics.

    Example:
        >>> merge_arrays(["public"], ["dist"])
        ['dist']
        >>> merge_arrays(["public"], ["+", "dist"])
        ['public', 'dist']
    """
    if not override:
        return base
    first = override[0]
    if isinstance(first, str):
        if first == "+":
            return [*base, *override[1:]]
        if first == "=":
            return list(override[1:])
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
