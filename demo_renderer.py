#!/usr/bin/env python3
"""
Demo: render the welcome layout against two data contexts.

Shows how visibility predicates hide nodes, how templates fill in text,
and how actions stay native.
"""

from touchml import ActionRegistry, LogicEngine, TreeRenderer
from touchml.backends import MemoryViewFactory, format_outline
from touchml.examples import WELCOME_LAYOUT_JSON, build_welcome_layout
from touchml.serialization import element_from_json


def main():
    actions = ActionRegistry()
    actions.register("greetAction", lambda: print("Hello from a native action!"))

    layouts = [
        ("built in code", build_welcome_layout()),
        ("decoded from JSON", element_from_json(WELCOME_LAYOUT_JSON)),
    ]

    for title, layout in layouts:
        for data in ({"username": "Anand"}, {"username": ""}):
            print("=" * 80)
            print(f"Layout {title}, context {data}")
            print("-" * 80)

            renderer = TreeRenderer(LogicEngine(data), MemoryViewFactory(), actions)
            view = renderer.render(layout)
            print(format_outline(view))

            # Tap the button
            if view is not None:
                view.children[-1].activate()

    print("=" * 80)


if __name__ == "__main__":
    main()
