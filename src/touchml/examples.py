"""
Example layout for demos and smoke tests.

The classic greeting screen: a container holding a welcome text that only
shows when a username is present, and a button bound to a native action.
"""
from touchml.model import ElementDescriptor, ElementType


def build_welcome_layout(action_id: str = "greetAction") -> ElementDescriptor:
    return ElementDescriptor(
        type=ElementType.CONTAINER,
        children=(
            ElementDescriptor(
                type=ElementType.TEXT,
                text="Welcome, {{ username.toUpperCase() }}",
                visible_if="username.length > 0",
            ),
            ElementDescriptor(
                type=ElementType.ACTIONABLE,
                text="Click to Greet",
                action_id=action_id,
            ),
        ),
    )


WELCOME_LAYOUT_JSON = """
{
  "type": "VStack",
  "children": [
    {
      "type": "Label",
      "description": "Welcome, {{username}}",
      "visibleIf": "username.length > 0"
    },
    {
      "type": "Button",
      "title": "Click to Greet",
      "action": "greetAction"
    }
  ]
}
"""
