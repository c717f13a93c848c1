"""Plain-text outline of a rendered ViewNode tree, for terminals and logs."""

from typing import List, Optional

from touchml.backends.memory import ViewKind, ViewNode


def _format_node(node: ViewNode, depth: int, indent: str, lines: List[str]) -> None:
    pad = indent * depth
    if node.kind is ViewKind.CONTAINER:
        lines.append(f"{pad}[container spacing={node.spacing}]")
        for child in node.children:
            _format_node(child, depth + 1, indent, lines)
    elif node.kind is ViewKind.TEXT:
        body = (node.text or "").replace("\n", "\\n")
        lines.append(f'{pad}"{body}"')
    else:
        marker = "" if node.on_activate is not None else " (no action)"
        lines.append(f"{pad}<{node.text}>{marker}")


def format_outline(node: Optional[ViewNode], indent: str = "  ") -> str:
    """
    Render a view tree as indented text.

    Containers print as [container], text as "quoted", actionables as <label>.
    A fully hidden layout prints as "(nothing rendered)".
    """
    if node is None:
        return "(nothing rendered)"
    lines: List[str] = []
    _format_node(node, 0, indent, lines)
    return "\n".join(lines)


__all__ = ["format_outline"]
