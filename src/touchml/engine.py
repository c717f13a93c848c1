"""
Logic Engine: the facade the renderer talks to.

Binds an ExpressionEvaluator and a TemplateInterpolator to one immutable
DataContext. Every expression error stops here:

    evaluate_predicate  -> False on any failure (hide rather than crash)
    interpolate         -> "" for each failing span
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from touchml.config import RenderConfig
from touchml.context import DataContext
from touchml.errors import ExpressionError
from touchml.evaluator import ExpressionEvaluator
from touchml.logging import get_logger
from touchml.templates import TemplateInterpolator
from touchml.values import to_bool

log = get_logger(__name__)


class LogicEngine:
    """Evaluates visibility predicates and text templates for one data context."""

    def __init__(
        self,
        context: Union[DataContext, Mapping[str, Any], None] = None,
        config: Optional[RenderConfig] = None,
    ) -> None:
        if not isinstance(context, DataContext):
            context = DataContext(context)
        self.context = context
        self.config = config or RenderConfig()
        self.evaluator = ExpressionEvaluator(context, self.config)
        self.interpolator = TemplateInterpolator(self.evaluator, self.config)

    def evaluate_predicate(self, expression: Optional[str]) -> bool:
        """
        Decide a visibility predicate.

        Absent predicate means always visible. Failures mean hidden.
        """
        if expression is None:
            return True
        try:
            return to_bool(self.evaluator.evaluate(expression))
        except ExpressionError as e:
            log.debug(
                "predicate_failed",
                expression=expression,
                kind=e.kind.value,
                error=e.message,
            )
            return False

    def interpolate(self, template: Optional[str]) -> str:
        return self.interpolator.interpolate(template)


__all__ = ["LogicEngine"]
