"""
Graphviz DOT diagram generator for element descriptor trees.

Draws the layout as authored, before any data is applied, for reviewing
payloads.

Supports two modes:
    - SIMPLE: Node kinds and their text
    - DETAILED: Adds visibility predicates and action ids
"""

from enum import Enum
from typing import Dict, List

from touchml.model import ElementDescriptor, ElementType


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"        # Kinds and text
    DETAILED = "detailed"    # Include predicates, action ids


_NODE_STYLE: Dict[ElementType, str] = {
    ElementType.CONTAINER: "shape=folder, fillcolor=lightgrey",
    ElementType.TEXT: "shape=box, fillcolor=lightblue",
    ElementType.ACTIONABLE: "shape=box, style=\"rounded,filled\", fillcolor=lightgreen",
}


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    # Backslashes first, then quotes, then newlines
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _node_label(node: ElementDescriptor, mode: DotMode) -> str:
    parts = [node.type.value]
    if node.text:
        text = node.text if len(node.text) <= 40 else node.text[:37] + "..."
        parts.append(text)
    if mode == DotMode.DETAILED:
        if node.visible_if:
            parts.append(f"if: {node.visible_if}")
        if node.action_id:
            parts.append(f"action: {node.action_id}")
    return "\n".join(parts)


def generate_dot(root: ElementDescriptor, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a descriptor tree.

    Args:
        root: Root descriptor
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines: List[str] = []

    # Header
    lines.append("digraph layout {")
    lines.append("  rankdir=TB;")
    lines.append("  node [style=filled];")

    # Number nodes in document order; edges follow child order.
    stack = [(root, None)]
    counter = 0
    while stack:
        node, parent_id = stack.pop()
        node_id = f"n{counter}"
        counter += 1

        style = _NODE_STYLE[node.type]
        if mode == DotMode.DETAILED and node.visible_if:
            style += ", color=orange, penwidth=2"
        label = _escape_dot_string(_node_label(node, mode))
        lines.append(f"  {node_id} [{style}, label={label}];")

        if parent_id is not None:
            lines.append(f"  {parent_id} -> {node_id};")

        for child in reversed(node.children):
            stack.append((child, node_id))

    # Footer
    lines.append("}")

    return "\n".join(lines)


def save_dot_file(root: ElementDescriptor, filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        root: Layout to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(root, mode=mode)
    with open(filename, 'w') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]
