"""
View Factory interface.

The renderer decides what to show; a ViewFactory turns those decisions into
widgets. Handles are opaque to the renderer.
"""

from __future__ import annotations

from typing import Optional, Protocol, TypeVar

from touchml.actions import Callback

Handle = TypeVar("Handle")


class ViewFactory(Protocol[Handle]):
    """Constructs platform views for the TreeRenderer."""

    def new_container(self, spacing: int) -> Handle:
        """Create an empty vertical container."""
        ...

    def new_text(self, text: str) -> Handle:
        """Create a multi-line text view."""
        ...

    def new_actionable(self, label: str, on_activate: Optional[Callback]) -> Handle:
        """Create a tappable view. on_activate is None when nothing is bound."""
        ...

    def attach_child(self, parent: Handle, child: Handle, index: int) -> None:
        """Append child to parent as arranged child number ``index``."""
        ...


__all__ = ["Handle", "ViewFactory"]
