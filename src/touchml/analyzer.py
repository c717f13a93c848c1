"""
Layout Analyzer: static diagnostics for element descriptor trees.

Checks a layout before it ships, without rendering it:
    - Node inventory and tree depth
    - Variables referenced by predicates and templates
    - Expressions that fail to parse
    - Variables missing from a given data context
    - Action ids, and whether a given registry knows them

IMPORTANT: This module does NOT evaluate expressions or build views.
It only produces read-only reports.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set

from touchml.actions import ActionRegistry
from touchml.config import RenderConfig
from touchml.errors import (
    DisallowedOperationError,
    ExpressionError,
    ExpressionErrorInfo,
    ExpressionSyntaxError,
)
from touchml.expressions import (
    BinaryExpression,
    ConditionalExpression,
    Expression,
    Literal,
    MemberAccess,
    MethodCall,
    UnaryExpression,
    VariableReference,
)
from touchml.model import ElementDescriptor, ElementType
from touchml.parser import parse_expression
from touchml.templates import find_spans


@dataclass
class ExpressionMetrics:
    """Metrics about a single expression tree."""
    depth: int = 0
    node_count: int = 0
    variable_references: Set[str] = field(default_factory=set)


def _analyze_expression(expr: Expression) -> ExpressionMetrics:
    """Recursively analyze an expression tree."""
    metrics = ExpressionMetrics(node_count=1)

    if isinstance(expr, VariableReference):
        metrics.variable_references.add(expr.name)
        return metrics

    if isinstance(expr, Literal):
        return metrics

    if isinstance(expr, BinaryExpression):
        children = [expr.left, expr.right]
    elif isinstance(expr, UnaryExpression):
        children = [expr.operand]
    elif isinstance(expr, ConditionalExpression):
        children = [expr.condition, expr.when_true, expr.when_false]
    elif isinstance(expr, MemberAccess):
        children = [expr.target]
    elif isinstance(expr, MethodCall):
        children = [expr.target, *expr.arguments]
    else:
        children = []

    for child in children:
        sub = _analyze_expression(child)
        metrics.depth = max(metrics.depth, sub.depth + 1)
        metrics.node_count += sub.node_count
        metrics.variable_references.update(sub.variable_references)
    return metrics


@dataclass
class LayoutReport:
    """Analysis report for one layout."""

    total_nodes: int = 0
    nodes_by_type: Dict[str, int] = field(default_factory=dict)
    max_tree_depth: int = 0

    # Expressions
    total_expressions: int = 0
    max_expression_depth: int = 0
    expression_errors: List[ExpressionErrorInfo] = field(default_factory=list)

    # Variable usage
    variable_usage: Dict[str, int] = field(default_factory=dict)
    undefined_variables: Set[str] = field(default_factory=set)
    unused_variables: Set[str] = field(default_factory=set)

    # Actions
    action_ids: Set[str] = field(default_factory=set)
    actionables_without_action: int = 0
    unregistered_actions: Set[str] = field(default_factory=set)

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def ok(self) -> bool:
        return not self.warnings


def _record_expression(
    report: LayoutReport, usage: Dict[str, int], source: str, config: RenderConfig
) -> None:
    report.total_expressions += 1
    # The evaluator refuses these outright.
    if len(source) > config.max_expression_length:
        report.expression_errors.append(ExpressionErrorInfo.from_error(
            source[:80],
            DisallowedOperationError(
                f"Expression longer than {config.max_expression_length} characters",
                expression=source[:80],
            ),
        ))
        return
    try:
        metrics = _analyze_expression(parse_expression(source))
    except ExpressionError as e:
        report.expression_errors.append(ExpressionErrorInfo.from_error(source, e))
        return
    except RecursionError:
        report.expression_errors.append(ExpressionErrorInfo.from_error(
            source, DisallowedOperationError("Expression is too deeply nested", expression=source)))
        return
    report.max_expression_depth = max(report.max_expression_depth, metrics.depth)
    for name in metrics.variable_references:
        usage[name] += 1


def analyze_layout(
    root: ElementDescriptor,
    context: Optional[Mapping[str, object]] = None,
    actions: Optional[ActionRegistry] = None,
    config: Optional[RenderConfig] = None,
) -> LayoutReport:
    """
    Analyze a layout tree.

    Args:
        root: Layout to analyze
        context: If given, report variables the layout uses but the context lacks
        actions: If given, report action ids the registry does not know
        config: Template markers and depth limit (defaults apply)

    Returns:
        LayoutReport with metrics and warnings
    """
    config = config or RenderConfig()
    report = LayoutReport()
    usage: Dict[str, int] = defaultdict(int)
    by_type: Dict[str, int] = defaultdict(int)

    # =========================================================================
    # 1. TREE WALK
    # =========================================================================

    for node, depth in root.walk_with_depth():
        report.total_nodes += 1
        by_type[node.type.value] += 1
        report.max_tree_depth = max(report.max_tree_depth, depth)

        if node.visible_if is not None:
            _record_expression(report, usage, node.visible_if, config)

        if node.text is not None:
            for span in find_spans(node.text, config):
                if config.open_marker in span.expression:
                    report.total_expressions += 1
                    report.expression_errors.append(ExpressionErrorInfo.from_error(
                        span.expression,
                        ExpressionSyntaxError("Nested template markers are not supported",
                                              span.expression),
                    ))
                    continue
                _record_expression(report, usage, span.expression, config)

        if node.type is ElementType.ACTIONABLE:
            if node.action_id is None:
                report.actionables_without_action += 1
            else:
                report.action_ids.add(node.action_id)

    report.nodes_by_type = dict(by_type)
    report.variable_usage = dict(usage)

    # =========================================================================
    # 2. CROSS-CHECKS
    # =========================================================================

    referenced = set(usage)
    if context is not None:
        report.undefined_variables = referenced - set(context)
        report.unused_variables = set(context) - referenced

    if actions is not None:
        report.unregistered_actions = {a for a in report.action_ids if a not in actions}

    # =========================================================================
    # 3. WARNING FLAGS
    # =========================================================================

    for info in report.expression_errors:
        report.add_warning(f"Invalid expression ({info.kind.value}): {info.expression}")

    if report.undefined_variables:
        report.add_warning(
            f"Undefined variable references: {', '.join(sorted(report.undefined_variables))}"
        )

    if report.unregistered_actions:
        report.add_warning(
            f"Unregistered actions: {', '.join(sorted(report.unregistered_actions))}"
        )

    if report.actionables_without_action:
        report.add_warning(
            f"Actionables without an action id: {report.actionables_without_action}"
        )

    if report.max_tree_depth > config.max_depth:
        report.add_warning(
            f"Tree depth {report.max_tree_depth} exceeds render limit {config.max_depth}"
        )

    return report


__all__ = ["ExpressionMetrics", "LayoutReport", "analyze_layout"]
