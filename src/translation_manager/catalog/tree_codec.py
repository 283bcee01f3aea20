"""Conversion between nested JSON documents and flat dotted-key pairs.

Leaves are strings, numbers, booleans, null and arrays. Arrays are stored
as-is under their key and never descended into.
"""

from __future__ import annotations

from typing import Any, Iterable, Union

from .exceptions import KeyConflictError, TreeShapeError

Leaf = Union[str, int, float, bool, None, list]
FlatPairs = list[tuple[str, Leaf]]

KEY_SEPARATOR = "."

_SCALAR_TYPES = (str, int, float, bool, type(None))


def is_leaf(value: Any) -> bool:
    return isinstance(value, _SCALAR_TYPES) or isinstance(value, list)


def flatten(tree: dict[str, Any], parent_key: str = "") -> FlatPairs:
    """Flatten a nested object into ``(dotted_key, leaf)`` pairs, depth first."""
    if not isinstance(tree, dict):
        raise TreeShapeError(f"Expected a JSON object, got {type(tree).__name__}")

    items: FlatPairs = []
    for key, value in tree.items():
        new_key = f"{parent_key}{KEY_SEPARATOR}{key}" if parent_key else str(key)
        if isinstance(value, dict):
            items.extend(flatten(value, new_key))
        elif is_leaf(value):
            items.append((new_key, value))
        else:
            raise TreeShapeError(f"Unsupported value of type {type(value).__name__} at '{new_key}'")
    return items


def _sort_key(pair: tuple[str, Leaf]) -> tuple[int, str]:
    key = pair[0]
    return len(key.split(KEY_SEPARATOR)), key


def unflatten(pairs: Iterable[tuple[str, Leaf]]) -> dict[str, Any]:
    """Rebuild a nested object from dotted-key pairs.

    Pairs are materialized shallowest first, then in key order, so the
    result does not depend on input order. A key that would need an object
    where a leaf was already placed (or the reverse) raises KeyConflictError.
    """
    result: dict[str, Any] = {}

    for flat_key, value in sorted(pairs, key=_sort_key):
        parts = flat_key.split(KEY_SEPARATOR)
        current = result
        for depth, part in enumerate(parts[:-1]):
            if part not in current:
                current[part] = {}
            elif not isinstance(current[part], dict):
                raise KeyConflictError(flat_key, KEY_SEPARATOR.join(parts[: depth + 1]))
            current = current[part]

        last = parts[-1]
        if isinstance(current.get(last), dict):
            raise KeyConflictError(flat_key, f"{flat_key}{KEY_SEPARATOR}*")
        current[last] = value

    return result


def find_conflicts(new_key: str, existing_keys: Iterable[str]) -> list[str]:
    """Return existing keys that are a dotted prefix of ``new_key`` or extend it."""
    prefix = new_key + KEY_SEPARATOR
    conflicts = []
    for key in existing_keys:
        if key == new_key:
            continue
        if key.startswith(prefix) or new_key.startswith(key + KEY_SEPARATOR):
            conflicts.append(key)
    return conflicts


__all__ = ["FlatPairs", "KEY_SEPARATOR", "Leaf", "find_conflicts", "flatten", "is_leaf", "unflatten"]
