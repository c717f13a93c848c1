"""
Tests for the TreeRenderer.

These tests verify:
    - Visibility short-circuits whole subtrees with no factory calls
    - Container children keep order with no gaps
    - Text and labels are interpolated
    - Actions come from the registry, missing ones are no-ops
    - Renders are repeatable
"""

import pytest
from touchml.actions import ActionRegistry
from touchml.backends.memory import MemoryViewFactory, ViewKind
from touchml.config import RenderConfig
from touchml.engine import LogicEngine
from touchml.examples import build_welcome_layout
from touchml.model import ElementDescriptor, ElementType, actionable, container, text
from touchml.renderer import TreeRenderer, render


def make_renderer(data=None, actions=None, config=None):
    factory = MemoryViewFactory()
    engine = LogicEngine(data or {}, config)
    return TreeRenderer(engine, factory, actions), factory


class TestVisibility:

    def test_node_without_predicate_renders(self):
        renderer, _ = make_renderer()
        view = renderer.render(text("hello"))
        assert view.kind is ViewKind.TEXT
        assert view.text == "hello"

    def test_hidden_root_returns_none(self):
        renderer, factory = make_renderer({"show": False})
        assert renderer.render(text("x", visible_if="show")) is None
        assert factory.calls == []

    def test_hidden_container_skips_subtree(self):
        calls = []
        actions = ActionRegistry()
        actions.lookup = lambda action_id: calls.append(action_id)
        renderer, factory = make_renderer({"show": False}, actions)
        tree = container(
            text("a"),
            container(actionable("b", "tap")),
            visible_if="show",
        )
        assert renderer.render(tree) is None
        assert factory.calls == []
        assert calls == []

    def test_malformed_predicate_hides_only_that_node(self):
        renderer, _ = make_renderer()
        tree = container(text("a", visible_if="1 +"), text("b"))
        view = renderer.render(tree)
        assert [child.text for child in view.children] == ["b"]

    def test_overflowing_predicate_hides_only_that_node(self):
        renderer, _ = make_renderer({"n": 10 ** 400})
        tree = container(
            text("a"),
            text("b", visible_if="n % 7 == 0"),
            text("{{n}}"),
        )
        view = renderer.render(tree)
        assert [child.text for child in view.children] == ["a", "Infinity"]

    def test_predicate_evaluated_against_context(self):
        renderer, _ = make_renderer({"username": "Ann"})
        tree = container(
            text("has name", visible_if="username.length > 0"),
            text("anonymous", visible_if="username.length == 0"),
        )
        view = renderer.render(tree)
        assert [child.text for child in view.children] == ["has name"]


class TestContainer:

    def test_children_order_without_placeholders(self):
        renderer, factory = make_renderer()
        tree = container(
            text("A", visible_if="false"),
            text("B", visible_if="true"),
            text("C"),
        )
        view = renderer.render(tree)
        assert [child.text for child in view.children] == ["B", "C"]
        attach_indices = [arg for name, arg in factory.calls if name == "attach_child"]
        assert attach_indices == [0, 1]

    def test_default_spacing(self):
        renderer, _ = make_renderer()
        assert renderer.render(container()).spacing == 12

    def test_explicit_and_configured_spacing(self):
        renderer, _ = make_renderer(config=RenderConfig(default_spacing=4))
        view = renderer.render(container(container(spacing=20)))
        assert view.spacing == 4
        assert view.children[0].spacing == 20

    def test_empty_container_still_renders(self):
        renderer, _ = make_renderer()
        tree = container(text("x", visible_if="false"))
        view = renderer.render(tree)
        assert view.kind is ViewKind.CONTAINER
        assert view.children == []

    def test_nested_containers(self):
        renderer, _ = make_renderer({"n": 2})
        tree = container(container(text("{{ n * 2 }}")), text("end"))
        view = renderer.render(tree)
        assert view.children[0].children[0].text == "4"
        assert view.children[1].text == "end"


class TestText:

    def test_text_is_interpolated(self):
        renderer, _ = make_renderer({"name": "Ann"})
        assert renderer.render(text("Hello, {{ name }}")).text == "Hello, Ann"

    def test_missing_text_is_empty(self):
        renderer, _ = make_renderer()
        assert renderer.render(text(None)).text == ""

    def test_bad_span_renders_rest(self):
        renderer, _ = make_renderer({"name": "Ann"})
        view = renderer.render(text("{{ nope }}Hi {{ name }}"))
        assert view.text == "Hi Ann"


class TestActionable:

    def test_registered_action_is_bound(self):
        taps = []
        actions = ActionRegistry({"greet": lambda: taps.append("greet")})
        renderer, _ = make_renderer({"name": "Ann"}, actions)
        view = renderer.render(actionable("Greet {{ name }}", "greet"))
        assert view.text == "Greet Ann"
        view.activate()
        assert taps == ["greet"]

    def test_unregistered_action_is_noop(self):
        renderer, _ = make_renderer(actions=ActionRegistry())
        view = renderer.render(actionable("Tap", "unknown"))
        assert view.on_activate is None
        view.activate()

    def test_actionable_without_action_id(self):
        renderer, _ = make_renderer()
        view = renderer.render(actionable("Tap"))
        assert view.kind is ViewKind.ACTIONABLE
        assert view.on_activate is None

    def test_action_resolved_when_rendered(self):
        taps = []
        actions = ActionRegistry()
        renderer, _ = make_renderer(actions=actions)
        view = renderer.render(actionable("Tap", "later"))
        actions.register("later", lambda: taps.append(1))
        view.activate()
        assert taps == []

    def test_expressions_cannot_reach_actions(self):
        taps = []
        actions = ActionRegistry({"greet": lambda: taps.append(1)})
        renderer, _ = make_renderer({"name": "Ann"}, actions)
        tree = container(
            text("{{ greet() }}"),
            text("x", visible_if="greet()"),
        )
        view = renderer.render(tree)
        assert [child.text for child in view.children] == [""]
        assert taps == []


class TestDepthLimit:

    def test_nodes_beyond_max_depth_are_omitted(self):
        renderer, _ = make_renderer(config=RenderConfig(max_depth=2))
        tree = container(text("level 2"), container(text("level 3")))
        view = renderer.render(tree)
        assert view.children[0].text == "level 2"
        assert view.children[1].children == []


class TestRepeatability:

    def test_rendering_twice_gives_equal_structure(self):
        layout = build_welcome_layout()
        renderer, _ = make_renderer({"username": "Anand"}, ActionRegistry({"greetAction": lambda: None}))
        first = renderer.render(layout)
        second = renderer.render(layout)
        assert first is not second
        assert first.to_dict() == second.to_dict()

    def test_renderers_are_independent(self):
        layout = container(text("{{ name }}"))
        a, _ = make_renderer({"name": "A"})
        b, _ = make_renderer({"name": "B"})
        assert a.render(layout).children[0].text == "A"
        assert b.render(layout).children[0].text == "B"
        assert a.render(layout).children[0].text == "A"


class TestWelcomeLayout:

    def test_with_username(self):
        renderer, _ = make_renderer({"username": "Anand"}, ActionRegistry({"greetAction": lambda: None}))
        view = renderer.render(build_welcome_layout())
        assert [child.text for child in view.children] == ["Welcome, ANAND", "Click to Greet"]
        assert view.children[1].on_activate is not None

    def test_without_username(self):
        renderer, _ = make_renderer({"username": ""})
        view = renderer.render(build_welcome_layout())
        assert [child.text for child in view.children] == ["Click to Greet"]

    def test_render_function(self):
        view = render(build_welcome_layout(), LogicEngine({"username": "x"}), MemoryViewFactory())
        assert len(view.children) == 2


class TestCustomFactory:

    def test_handles_are_opaque(self):
        """Any object can serve as a handle; the renderer only passes them around."""

        class TupleFactory:
            def new_container(self, spacing):
                return ["stack"]

            def new_text(self, s):
                return ("text", s)

            def new_actionable(self, label, on_activate):
                return ("button", label)

            def attach_child(self, parent, child, index):
                parent.append(child)

        engine = LogicEngine({"n": 1})
        tree = ElementDescriptor(ElementType.CONTAINER, children=(
            text("n={{ n }}"), actionable("go"),
        ))
        assert TreeRenderer(engine, TupleFactory()).render(tree) == [
            "stack", ("text", "n=1"), ("button", "go"),
        ]
