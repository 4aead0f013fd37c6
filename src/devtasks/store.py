"""Global configuration store shared by all tasks of a build invocation."""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

ConfigPath = str | Sequence[str]


def split_path(path: ConfigPath) -> list[str]:
    """Split a dotted path (``"jshint.options.ignores"``) into keys."""
    if isinstance(path, str):
        keys = path.split(".")
    else:
        keys = [str(key) for key in path]
    if not keys or any(not key for key in keys):
        raise ValueError(f"invalid config path: {path!r}")
    return keys


def deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``source`` into ``target`` in place.

    Mappings merge key by key; any other value, sequences included, replaces
    what was there.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            deep_merge(existing, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


class ConfigStore:
    """Nested configuration addressed by dotted paths."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = {}
        if initial:
            deep_merge(self._data, initial)

    def get(self, path: ConfigPath, default: Any = None) -> Any:
        node: Any = self._data
        for key in split_path(path):
            if not isinstance(node, Mapping) or key not in node:
                return default
            node = node[key]
        return node

    def set(self, path: ConfigPath, value: Any) -> None:
        keys = split_path(path)
        node = self._data
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = {}
                node[key] = child
            node = child
        node[keys[-1]] = value

    def merge(self, partial: Mapping[str, Any]) -> None:
        deep_merge(self._data, partial)

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)
