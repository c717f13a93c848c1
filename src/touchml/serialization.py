"""
Layout decoding and encoding (JSON / YAML <-> ElementDescriptor).

Payload shape:

    {
      "type": "Container",
      "visibleIf": "items > 0",
      "children": [
        {"type": "Text", "text": "Welcome, {{ username }}"},
        {"type": "Actionable", "text": "Greet", "actionId": "greetAction"}
      ]
    }

Legacy payloads are accepted too: "VStack" / "Label" / "Button" type tags,
"description" (label body), "title" (button label) and "action" keys.
Encoding always writes the canonical form.
"""
from __future__ import annotations

import json
import warnings
from typing import Any, Dict

import yaml

from touchml.errors import LayoutDecodeError
from touchml.model import ElementDescriptor, ElementType


_TYPE_ALIASES = {
    "Container": ElementType.CONTAINER,
    "VStack": ElementType.CONTAINER,
    "Text": ElementType.TEXT,
    "Label": ElementType.TEXT,
    "Actionable": ElementType.ACTIONABLE,
    "Button": ElementType.ACTIONABLE,
}

# First key present wins.
_TEXT_KEYS = ("text", "description", "title")
_ACTION_KEYS = ("actionId", "action_id", "action")
_VISIBLE_KEYS = ("visibleIf", "visible_if")

_KNOWN_KEYS = {"type", "children", "spacing", *_TEXT_KEYS, *_ACTION_KEYS, *_VISIBLE_KEYS}


def _first(d: Dict[str, Any], keys: tuple, path: str) -> Any:
    for key in keys:
        if key in d and d[key] is not None:
            value = d[key]
            if not isinstance(value, str):
                raise LayoutDecodeError(f"{path}: '{key}' must be a string, got {type(value).__name__}")
            return value
    return None


def element_from_dict(d: Any, path: str = "$") -> ElementDescriptor:
    """
    Decode one node (and its subtree) from a plain dict.

    Raises:
        LayoutDecodeError: On an unknown type tag or malformed fields
    """
    if not isinstance(d, dict):
        raise LayoutDecodeError(f"{path}: element must be a mapping, got {type(d).__name__}")

    tag = d.get("type")
    if tag not in _TYPE_ALIASES:
        raise LayoutDecodeError(f"{path}: unknown element type {tag!r}")

    unknown = set(d) - _KNOWN_KEYS
    if unknown:
        warnings.warn(f"{path}: ignoring unknown keys {sorted(unknown)}", UserWarning)

    raw_children = d.get("children") or []
    if not isinstance(raw_children, list):
        raise LayoutDecodeError(f"{path}: 'children' must be a list")

    spacing = d.get("spacing")
    if spacing is not None and (isinstance(spacing, bool) or not isinstance(spacing, int)):
        raise LayoutDecodeError(f"{path}: 'spacing' must be an integer")

    return ElementDescriptor(
        type=_TYPE_ALIASES[tag],
        text=_first(d, _TEXT_KEYS, path),
        action_id=_first(d, _ACTION_KEYS, path),
        visible_if=_first(d, _VISIBLE_KEYS, path),
        children=tuple(
            element_from_dict(child, f"{path}.children[{i}]")
            for i, child in enumerate(raw_children)
        ),
        spacing=spacing,
    )


def element_to_dict(e: ElementDescriptor) -> Dict[str, Any]:
    d: Dict[str, Any] = {"type": e.type.value}
    if e.text is not None:
        d["text"] = e.text
    if e.action_id is not None:
        d["actionId"] = e.action_id
    if e.visible_if is not None:
        d["visibleIf"] = e.visible_if
    if e.spacing is not None:
        d["spacing"] = e.spacing
    if e.children:
        d["children"] = [element_to_dict(child) for child in e.children]
    return d


def element_to_json(e: ElementDescriptor) -> str:
    return json.dumps(element_to_dict(e), sort_keys=True)


def element_from_json(s: str) -> ElementDescriptor:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise LayoutDecodeError(f"Invalid JSON layout: {e}") from e
    return element_from_dict(d)


def element_to_yaml(e: ElementDescriptor) -> str:
    return yaml.safe_dump(element_to_dict(e), sort_keys=False)


def element_from_yaml(s: str) -> ElementDescriptor:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise LayoutDecodeError(f"Invalid YAML layout: {e}") from e
    return element_from_dict(d)


def load_layout(filepath: str) -> ElementDescriptor:
    """
    Load a layout file. ``.json`` is parsed as JSON, anything else as YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist
        LayoutDecodeError: If the payload is not a valid layout
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        content = f.read()
    if filepath.lower().endswith(".json"):
        return element_from_json(content)
    return element_from_yaml(content)


__all__ = [
    "element_from_dict",
    "element_to_dict",
    "element_from_json",
    "element_to_json",
    "element_from_yaml",
    "element_to_yaml",
    "load_layout",
]
