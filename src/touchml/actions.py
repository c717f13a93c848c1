"""
Action Registry: caller-owned table of native callbacks.

Layouts name actions by id; only code holding the registry decides what
an id does. The expression evaluator never sees this table.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, Mapping, Optional

Callback = Callable[[], None]


class ActionRegistry:
    """
    Mapping of action id to a zero-argument callback.

    The renderer only calls lookup(); registering is the caller's job.
    """

    def __init__(self, actions: Optional[Mapping[str, Callback]] = None) -> None:
        self._actions: Dict[str, Callback] = {}
        for action_id, callback in (actions or {}).items():
            self.register(action_id, callback)

    def register(self, action_id: str, callback: Callback) -> None:
        if not callable(callback):
            raise TypeError(f"Action '{action_id}' must be callable")
        self._actions[action_id] = callback

    def unregister(self, action_id: str) -> None:
        self._actions.pop(action_id, None)

    def lookup(self, action_id: str) -> Optional[Callback]:
        return self._actions.get(action_id)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._actions

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)


__all__ = ["ActionRegistry", "Callback"]
