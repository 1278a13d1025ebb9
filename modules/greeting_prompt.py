"""
Greeting Prompt Module: a personalized greeting in one of three styles.
"""

from core.registry import CapabilityModule
from models.models import Prompt, PromptArgument

DEFAULT_STYLE = "friendly"

GREETING_TEMPLATES = {
    "formal": "Good day, {name}. I trust you are well.",
    "casual": "Hey {name}! What's up?",
    "friendly": "Hi {name}! It's great to meet you!",
}


def render_greeting(arguments: dict):
    """Return ``(description, greeting)``; unknown styles use the friendly template."""
    name = arguments.get("name")
    style = arguments.get("style") or DEFAULT_STYLE
    template = GREETING_TEMPLATES.get(style, GREETING_TEMPLATES[DEFAULT_STYLE])
    return f"A {style} greeting for {name}", template.format(name=name)


class GreetingPromptModule(CapabilityModule):
    module_id = "greeting_prompt"

    def register_prompts(self):
        return [
            Prompt(
                name="greeting",
                description="Generate a personalized greeting",
                renderer=render_greeting,
                arguments=(
                    PromptArgument(
                        name="name",
                        description="Name of the person to greet",
                        required=True,
                    ),
                    PromptArgument(
                        name="style",
                        description="Style of greeting (formal, casual, friendly)",
                        required=False,
                    ),
                ),
            ),
        ]
