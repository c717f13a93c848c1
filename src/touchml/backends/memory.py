"""
In-memory view backend.

Builds plain ViewNode objects instead of platform widgets. Useful for tests,
previews and server-side inspection of what a layout would show.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from touchml.actions import Callback


class ViewKind(Enum):
    CONTAINER = "container"
    TEXT = "text"
    ACTIONABLE = "actionable"


@dataclass
class ViewNode:
    """
    A constructed view.

    Properties:
        kind: ViewKind
        text: Body (TEXT) or label (ACTIONABLE); None for containers
        spacing: Gap between children (CONTAINER)
        children: Arranged children in order (CONTAINER)
        on_activate: Bound callback (ACTIONABLE), None for a no-op
    """

    kind: ViewKind
    text: Optional[str] = None
    spacing: Optional[int] = None
    children: List["ViewNode"] = field(default_factory=list)
    on_activate: Optional[Callback] = field(default=None, compare=False, repr=False)

    def activate(self) -> None:
        """Simulate a tap. Unbound actionables do nothing."""
        if self.on_activate is not None:
            self.on_activate()

    def to_dict(self) -> Dict[str, Any]:
        """Structure-only snapshot, for comparing renders."""
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.kind is ViewKind.CONTAINER:
            data["spacing"] = self.spacing
            data["children"] = [child.to_dict() for child in self.children]
        else:
            data["text"] = self.text
        if self.kind is ViewKind.ACTIONABLE:
            data["bound"] = self.on_activate is not None
        return data


class MemoryViewFactory:
    """
    ViewFactory producing ViewNode trees.

    Every call is appended to ``calls`` as (method name, argument) for inspection.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def new_container(self, spacing: int) -> ViewNode:
        self.calls.append(("new_container", spacing))
        return ViewNode(ViewKind.CONTAINER, spacing=spacing)

    def new_text(self, text: str) -> ViewNode:
        self.calls.append(("new_text", text))
        return ViewNode(ViewKind.TEXT, text=text)

    def new_actionable(self, label: str, on_activate: Optional[Callback]) -> ViewNode:
        self.calls.append(("new_actionable", label))
        return ViewNode(ViewKind.ACTIONABLE, text=label, on_activate=on_activate)

    def attach_child(self, parent: ViewNode, child: ViewNode, index: int) -> None:
        self.calls.append(("attach_child", index))
        if index != len(parent.children):
            raise IndexError(f"Child index {index} out of order (have {len(parent.children)})")
        parent.children.append(child)


__all__ = ["ViewKind", "ViewNode", "MemoryViewFactory"]
