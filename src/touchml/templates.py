"""
Template interpolation: replace {{ expr }} spans with evaluated text.

Spans do not nest. The first close marker after an open marker ends the
span, so "{{ a {{ b }}" is one span whose text contains an open marker;
that span is a syntax error and renders as "".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from touchml.config import RenderConfig
from touchml.errors import ExpressionError, ExpressionSyntaxError
from touchml.evaluator import ExpressionEvaluator
from touchml.logging import get_logger
from touchml.values import to_display_string

log = get_logger(__name__)


@dataclass(frozen=True)
class TemplateSpan:
    """
    One delimited expression inside a template.

    Properties:
        start / end: Offsets of the whole span, markers included
        expression: Enclosed text with surrounding whitespace trimmed
    """

    start: int
    end: int
    expression: str


def _span_pattern(config: RenderConfig) -> "re.Pattern[str]":
    return re.compile(re.escape(config.open_marker) + r"(.*?)" + re.escape(config.close_marker))


def find_spans(template: str, config: Optional[RenderConfig] = None) -> List[TemplateSpan]:
    """Locate every template span, left to right, against the original offsets."""
    config = config or RenderConfig()
    return [
        TemplateSpan(match.start(), match.end(), match.group(1).strip())
        for match in _span_pattern(config).finditer(template)
    ]


class TemplateInterpolator:
    """
    Substitutes evaluated span values into template strings.

    A failing span becomes "" on its own; the rest of the string is kept.
    """

    def __init__(self, evaluator: ExpressionEvaluator, config: Optional[RenderConfig] = None) -> None:
        self.evaluator = evaluator
        self.config = config or evaluator.config

    def evaluate_span(self, span: TemplateSpan) -> str:
        """
        Evaluate one span to display text.

        Raises:
            ExpressionError: If the span cannot be evaluated
        """
        if self.config.open_marker in span.expression:
            raise ExpressionSyntaxError("Nested template markers are not supported", span.expression)
        return to_display_string(self.evaluator.evaluate(span.expression))

    def interpolate(self, template: Optional[str]) -> str:
        if template is None:
            return ""

        spans = find_spans(template, self.config)
        if not spans:
            return template

        # Rightmost first so earlier offsets stay valid.
        result = template
        for span in reversed(spans):
            try:
                text = self.evaluate_span(span)
            except ExpressionError as e:
                log.debug(
                    "template_span_failed",
                    expression=span.expression,
                    kind=e.kind.value,
                    error=e.message,
                )
                text = ""
            result = result[:span.start] + text + result[span.end:]
        return result


__all__ = ["TemplateSpan", "TemplateInterpolator", "find_spans"]
