"""
Command-line entry point.

    python -m touchml layout.json --context data.yaml
    python -m touchml layout.yaml --format dot --detailed
    python -m touchml layout.yaml --context data.yaml --format report
"""

import argparse
import logging
import sys
from typing import List, Optional

from touchml.actions import ActionRegistry
from touchml.analyzer import analyze_layout
from touchml.backends import DotMode, MemoryViewFactory, format_outline, generate_dot
from touchml.config import RenderConfig, load_config
from touchml.context import DataContext, context_from_json, context_from_yaml
from touchml.engine import LogicEngine
from touchml.errors import LayoutDecodeError
from touchml.logging import configure_logging
from touchml.renderer import TreeRenderer
from touchml.serialization import load_layout


def _load_context(filepath: Optional[str]) -> DataContext:
    if filepath is None:
        return DataContext()
    with open(filepath, 'r', encoding='utf-8') as f:
        content = f.read()
    if filepath.lower().endswith(".json"):
        return context_from_json(content)
    return context_from_yaml(content)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="touchml", description="Render a TouchML layout")
    parser.add_argument("layout", help="Layout file (.json, or YAML)")
    parser.add_argument("--context", help="Data context file (.json, or YAML)")
    parser.add_argument("--config", help="Render config YAML file")
    parser.add_argument("--format", choices=["outline", "dot", "report"], default="outline")
    parser.add_argument("--detailed", action="store_true", help="Detailed DOT output")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(force_json=args.json_logs, level=logging.DEBUG if args.verbose else None)

    try:
        config = load_config(args.config) if args.config else RenderConfig()
        root = load_layout(args.layout)
        context = _load_context(args.context)
    except (OSError, LayoutDecodeError, TypeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.format == "dot":
        mode = DotMode.DETAILED if args.detailed else DotMode.SIMPLE
        print(generate_dot(root, mode=mode))
        return 0

    if args.format == "report":
        report = analyze_layout(root, context=context if args.context else None, config=config)
        print(f"Nodes: {report.total_nodes} {report.nodes_by_type}")
        print(f"Tree depth: {report.max_tree_depth}")
        print(f"Expressions: {report.total_expressions}")
        print(f"Variables: {', '.join(sorted(report.variable_usage)) or '(none)'}")
        print(f"Actions: {', '.join(sorted(report.action_ids)) or '(none)'}")
        for warning in report.warnings:
            print(f"WARNING: {warning}")
        return 0 if report.ok else 1

    # Actions are native: the CLI has none, so every actionable renders unbound.
    renderer = TreeRenderer(LogicEngine(context, config), MemoryViewFactory(), ActionRegistry())
    print(format_outline(renderer.render(root)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
