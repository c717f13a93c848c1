"""View backends for TouchML (in-memory views, text outline, DOT)."""

from .base import ViewFactory
from .dot_generator import DotMode, generate_dot, save_dot_file
from .memory import MemoryViewFactory, ViewKind, ViewNode
from .outline import format_outline

__all__ = [
    "ViewFactory",
    "MemoryViewFactory",
    "ViewKind",
    "ViewNode",
    "format_outline",
    "DotMode",
    "generate_dot",
    "save_dot_file",
]
