"""
Key normalization for generic attribute trees.

YAML allows non-string mapping keys (``1: a``, ``yes: b``, ``null: c``).
The Kubernetes API only accepts string keys, so every tree built from a
manifest goes through ``stringify_keys`` once, at construction time.
"""

from typing import Any


def _key_to_str(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def stringify_keys(node: Any) -> Any:
    """Recursively rebuilds maps and sequences with string keys only."""
    if isinstance(node, dict):
        return {_key_to_str(key): stringify_keys(value) for key, value in node.items()}
    if isinstance(node, (list, tuple)):
        return [stringify_keys(item) for item in node]
    return node
