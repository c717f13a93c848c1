"""
Tree Renderer: walks an ElementDescriptor tree and builds views.

Per node:
    1. Evaluate visible_if. False -> the node and its subtree are skipped
       entirely (no factory calls, no action lookups).
    2. Dispatch on type:
        CONTAINER  -> new_container, then render children in order and
                      attach the visible ones with consecutive indices
        TEXT       -> new_text(interpolated text)
        ACTIONABLE -> new_actionable(interpolated label, registry callback)
    3. Return the handle, or None.

DEPTH CONTRACT:
    Recursion is bounded by RenderConfig.max_depth (root is depth 1).
    Deeper nodes are omitted and logged, the rest of the tree still renders.

The renderer keeps no state between render() calls.
"""

from __future__ import annotations

from typing import Generic, Optional

from touchml.actions import ActionRegistry
from touchml.backends.base import Handle, ViewFactory
from touchml.engine import LogicEngine
from touchml.logging import get_logger
from touchml.model import ElementDescriptor, ElementType

log = get_logger(__name__)


class TreeRenderer(Generic[Handle]):
    """
    Renders descriptor trees through a ViewFactory.

    Args:
        engine: LogicEngine bound to the data context
        factory: ViewFactory that constructs the actual views
        actions: ActionRegistry consulted for ACTIONABLE nodes (optional)
    """

    def __init__(
        self,
        engine: LogicEngine,
        factory: ViewFactory[Handle],
        actions: Optional[ActionRegistry] = None,
    ) -> None:
        self.engine = engine
        self.factory = factory
        self.actions = actions if actions is not None else ActionRegistry()
        self.config = engine.config

    def render(self, node: ElementDescriptor) -> Optional[Handle]:
        """
        Render a descriptor tree.

        Returns:
            The root handle, or None if the root is hidden
        """
        return self._render_node(node, depth=1)

    def _render_node(self, node: ElementDescriptor, depth: int) -> Optional[Handle]:
        if depth > self.config.max_depth:
            log.warning("max_depth_exceeded", depth=depth, max_depth=self.config.max_depth,
                        type=node.type.value)
            return None

        if not self.engine.evaluate_predicate(node.visible_if):
            return None

        if node.type is ElementType.CONTAINER:
            return self._render_container(node, depth)
        if node.type is ElementType.TEXT:
            return self.factory.new_text(self.engine.interpolate(node.text))
        if node.type is ElementType.ACTIONABLE:
            return self._render_actionable(node)

        raise ValueError(f"Unsupported element type: {node.type!r}")

    def _render_container(self, node: ElementDescriptor, depth: int) -> Handle:
        spacing = node.spacing if node.spacing is not None else self.config.default_spacing
        handle = self.factory.new_container(spacing)
        index = 0
        for child in node.children:
            child_handle = self._render_node(child, depth + 1)
            if child_handle is None:
                continue
            self.factory.attach_child(handle, child_handle, index)
            index += 1
        return handle

    def _render_actionable(self, node: ElementDescriptor) -> Handle:
        label = self.engine.interpolate(node.text)
        callback = None
        if node.action_id is not None:
            callback = self.actions.lookup(node.action_id)
            if callback is None:
                log.debug("action_not_registered", action_id=node.action_id)
        return self.factory.new_actionable(label, callback)


def render(
    root: ElementDescriptor,
    engine: LogicEngine,
    factory: ViewFactory[Handle],
    actions: Optional[ActionRegistry] = None,
) -> Optional[Handle]:
    """One-shot convenience wrapper around TreeRenderer.render()."""
    return TreeRenderer(engine, factory, actions).render(root)


__all__ = ["TreeRenderer", "render"]
