"""
Element Descriptor Model

Defines the declarative UI tree that the renderer walks.

These are pure data classes:
    - ElementType (closed set of node kinds)
    - ElementDescriptor (one node of the tree)

ARCHITECTURAL RULE:
    Descriptors:
        - Are immutable once decoded
        - Carry expressions as text, never as code
        - Know nothing about widgets or platforms
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple


class ElementType(Enum):
    """
    Closed set of node kinds.

    Adding a kind is a breaking schema change: the renderer, the decoder
    and every backend dispatch on this enum.
    """
    CONTAINER = "Container"
    TEXT = "Text"
    ACTIONABLE = "Actionable"


@dataclass(frozen=True)
class ElementDescriptor:
    """
    One node of the declarative UI tree.

    Properties:
        type:
            ElementType of the node

        text:
            Template string. Body for TEXT, label for ACTIONABLE.
            Example: "Welcome, {{ username }}"

        action_id:
            Opaque id looked up in the ActionRegistry (ACTIONABLE only)

        visible_if:
            Visibility predicate. If None: always visible.
            Example: "username.length > 0"

        children:
            Ordered child descriptors (CONTAINER only)

        spacing:
            Gap between stacked children (CONTAINER only).
            If None: RenderConfig.default_spacing applies.

    INVARIANT:
        The tree is finite and acyclic. Frozen dataclasses holding tuples
        cannot be made to reference themselves after construction.
    """

    type: ElementType
    text: Optional[str] = None
    action_id: Optional[str] = None
    visible_if: Optional[str] = None
    children: Tuple["ElementDescriptor", ...] = field(default_factory=tuple)
    spacing: Optional[int] = None

    def __post_init__(self) -> None:
        # Accept any sequence from callers but store an immutable tuple.
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    def walk(self) -> Iterator["ElementDescriptor"]:
        """Yield this node and all descendants, depth first, in document order."""
        for node, _ in self.walk_with_depth():
            yield node

    def walk_with_depth(self, depth: int = 1) -> Iterator[Tuple["ElementDescriptor", int]]:
        """Like walk(), paired with each node's depth (this node has ``depth``)."""
        stack = [(self, depth)]
        while stack:
            node, level = stack.pop()
            yield node, level
            stack.extend((child, level + 1) for child in reversed(node.children))


def container(*children: ElementDescriptor, visible_if: Optional[str] = None,
              spacing: Optional[int] = None) -> ElementDescriptor:
    return ElementDescriptor(ElementType.CONTAINER, visible_if=visible_if,
                             children=children, spacing=spacing)


def text(template: Optional[str], visible_if: Optional[str] = None) -> ElementDescriptor:
    return ElementDescriptor(ElementType.TEXT, text=template, visible_if=visible_if)


def actionable(label: Optional[str], action_id: Optional[str] = None,
               visible_if: Optional[str] = None) -> ElementDescriptor:
    return ElementDescriptor(ElementType.ACTIONABLE, text=label, action_id=action_id,
                             visible_if=visible_if)


__all__ = ["ElementType", "ElementDescriptor", "container", "text", "actionable"]
