"""
Render configuration.

Defaults reproduce the classic layout payload conventions: {{ }} template
markers and 12pt spacing between stacked children.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import yaml


@dataclass(frozen=True)
class RenderConfig:
    """
    Settings shared by the evaluator, interpolator and renderer.

    Properties:
        open_marker / close_marker:
            Two-character delimiters of a template span
        max_depth:
            Deepest tree level rendered; deeper nodes are omitted
        max_expression_length:
            Longer expressions are rejected before parsing
        default_spacing:
            Spacing for containers that do not set their own
    """

    open_marker: str = "{{"
    close_marker: str = "}}"
    max_depth: int = 64
    max_expression_length: int = 1000
    default_spacing: int = 12

    def __post_init__(self) -> None:
        if len(self.open_marker) != 2 or len(self.close_marker) != 2:
            raise ValueError("Template markers must be exactly two characters")
        if self.open_marker == self.close_marker:
            raise ValueError("Open and close template markers must differ")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if self.max_expression_length < 1:
            raise ValueError("max_expression_length must be at least 1")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RenderConfig":
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(filepath: str) -> RenderConfig:
    """
    Load a RenderConfig from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: On unknown keys or invalid values
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {filepath}")
    return RenderConfig.from_dict(data)


__all__ = ["RenderConfig", "load_config"]
