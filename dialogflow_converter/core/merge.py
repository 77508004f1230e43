"""Recursive merge for vendor override trees."""

from __future__ import annotations

import copy
from typing import Any


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge ``source`` into ``target`` in place and return ``target``.

    RULES:
    - dict onto dict merges key-wise, recursively
    - anything else (lists, scalars, None) replaces the target value
    - values taken from source are deep-copied, so later mutation of the
      result never reaches the caller's tree
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            deep_merge(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target
