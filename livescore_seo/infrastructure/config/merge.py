"""
Layer merge policy.

Configuration layers are JSON-shaped mappings merged strictly from lowest to
highest priority. The rules:

- mapping + mapping: union of keys, nested mappings merged recursively
- anything else: the patch value replaces the base value outright
- lists are replaced wholesale, never concatenated or de-duplicated
- a missing (None) layer leaves the base untouched

Inputs are never mutated; every merge returns fresh containers.
"""

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Iterable, Optional, Tuple


def deep_merge(base: Any, patch: Any) -> Any:
    """
    Merge ``patch`` on top of ``base``.

    Args:
        base: Lower-priority value
        patch: Higher-priority value; None means "layer absent"

    Returns:
        The merged value
    """
    if patch is None:
        return deepcopy(base)
    if isinstance(base, Mapping) and isinstance(patch, Mapping):
        return _merge_mapping(base, patch)
    return deepcopy(patch)


def _merge_mapping(base: Mapping, patch: Mapping) -> dict:
    out = {key: deepcopy(value) for key, value in base.items()}
    for key, value in patch.items():
        existing = out.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            out[key] = _merge_mapping(existing, value)
        else:
            out[key] = deepcopy(value)
    return out


def merge_layers(layers: Iterable[Tuple[str, Optional[Mapping]]]) -> dict:
    """Merge ``(name, payload)`` layers in the order given (lowest priority first)."""
    merged: dict = {}
    for _name, payload in layers:
        merged = deep_merge(merged, payload)
    return merged
