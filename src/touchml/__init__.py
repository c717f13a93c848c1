"""
TouchML: Data-Driven UI Rendering

Renders a user interface from a declarative element tree whose nodes carry
visibility predicates and text templates. Both are evaluated against a
read-only data context by a sandboxed expression language.

ARCHITECTURAL GUARANTEE:
------------------------
Layout payloads decide WHAT is shown, never WHAT RUNS.
    - Expressions can only read the data context
    - Tap behaviour is resolved through a caller-owned ActionRegistry
    - Widget construction is delegated to a ViewFactory backend

Typical use:

    engine = LogicEngine(DataContext({"username": "Ann"}))
    renderer = TreeRenderer(engine, MemoryViewFactory(), actions)
    view = renderer.render(root)
"""

from touchml.actions import ActionRegistry
from touchml.context import DataContext
from touchml.engine import LogicEngine
from touchml.errors import (
    DisallowedOperationError,
    ExpressionError,
    ExpressionSyntaxError,
    TouchMLError,
    TypeMismatchError,
    UnknownVariableError,
)
from touchml.model import ElementDescriptor, ElementType
from touchml.renderer import TreeRenderer

__version__ = "0.1.0"

__all__ = [
    "ActionRegistry",
    "DataContext",
    "DisallowedOperationError",
    "ElementDescriptor",
    "ElementType",
    "ExpressionError",
    "ExpressionSyntaxError",
    "LogicEngine",
    "TouchMLError",
    "TreeRenderer",
    "TypeMismatchError",
    "UnknownVariableError",
]
