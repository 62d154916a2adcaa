"""Utility functions for config-lens."""

from typing import Any


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries with overlay precedence.

    Recursively merges nested dictionaries. Non-dict values in overlay
    completely replace corresponding values in base.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        New merged dictionary (base and overlay are not modified)

    Examples:
        >>> base = {"project": "/src/app", "recent": {"target": "/src/app/api"}}
        >>> overlay = {"recent": {"target": "/src/app/web"}}
        >>> deep_merge(base, overlay)
        {'project': '/src/app', 'recent': {'target': '/src/app/web'}}
    """
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def is_plain_object(value: Any) -> bool:
    """Return True for JSON objects (dicts), False for arrays and scalars."""
    return isinstance(value, dict)


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality of two JSON values.

    Unlike ``==``, booleans never equal numbers (``True`` vs ``1``).
    Object key order is irrelevant, array order is significant.

    Examples:
        >>> json_equal({"a": [1, {"b": True}]}, {"a": [1, {"b": True}]})
        True
        >>> json_equal([True], [1])
        False
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, dict):
        if not isinstance(right, dict) or left.keys() != right.keys():
            return False
        return all(json_equal(left[key], right[key]) for key in left)
    if isinstance(left, list):
        if not isinstance(right, list) or len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(right, (dict, list)):
        return False
    return left == right


def concat_unique(existing: list[Any], incoming: list[Any]) -> list[Any]:
    """Concatenate two arrays, dropping structural duplicates.

    The first occurrence of each item wins, so the result equals the unique
    items of ``existing`` followed by the novel items of ``incoming``.
    Returns a new list; neither argument is modified.

    Examples:
        >>> concat_unique([{"matcher": "Bash"}], [{"matcher": "Bash"}, {"matcher": "Edit"}])
        [{'matcher': 'Bash'}, {'matcher': 'Edit'}]
    """
    result: list[Any] = []
    for item in [*existing, *incoming]:
        if not any(json_equal(item, present) for present in result):
            result.append(item)
    return result


def flatten_object(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    """Flatten an object into (dot-path, value) pairs.

    Nested objects are recorded at their own path and then recursed into.
    Arrays and scalars are leaves.

    Examples:
        >>> flatten_object({"a": {"b": 1}, "c": [1, 2]})
        [('a', {'b': 1}), ('a.b', 1), ('c', [1, 2])]
    """
    pairs: list[tuple[str, Any]] = []

    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else key
        pairs.append((path, value))
        if is_plain_object(value):
            pairs.extend(flatten_object(value, path))

    return pairs
