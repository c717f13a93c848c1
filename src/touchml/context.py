"""
Data Context: read-only variable bindings available to expressions.

A DataContext is built once by the caller and never changes afterwards.
It behaves as a Mapping; there is no way to write through it.
"""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import yaml

from touchml.values import Value, is_value

_IDENTIFIER_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_$")


def _is_identifier(name: str) -> bool:
    return bool(name) and not name[0].isdigit() and all(c in _IDENTIFIER_CHARS for c in name)


class DataContext(Mapping[str, Value]):
    """
    Immutable mapping of variable name to scalar value.

    Raises:
        ValueError: If a key is not a valid identifier
        TypeError: If a value is not a bool, int, float or str
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        checked = {}
        for name, value in (data or {}).items():
            if not isinstance(name, str) or not _is_identifier(name):
                raise ValueError(f"Invalid variable name: {name!r}")
            if not is_value(value):
                raise TypeError(
                    f"Variable '{name}' has unsupported type {type(value).__name__}; "
                    "expected bool, int, float or str"
                )
            checked[name] = value
        self._data = MappingProxyType(checked)

    def __getitem__(self, name: str) -> Value:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"DataContext({dict(self._data)!r})"


def context_from_dict(data: Optional[Mapping[str, Any]]) -> DataContext:
    return DataContext(data or {})


def context_from_json(text: str) -> DataContext:
    data = json.loads(text)
    if data is not None and not isinstance(data, dict):
        raise TypeError("Data context document must be a mapping")
    return context_from_dict(data)


def context_from_yaml(text: str) -> DataContext:
    data = yaml.safe_load(text)
    if data is not None and not isinstance(data, dict):
        raise TypeError("Data context document must be a mapping")
    return context_from_dict(data)


__all__ = ["DataContext", "context_from_dict", "context_from_json", "context_from_yaml"]
