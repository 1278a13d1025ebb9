"""
Hello Module: greeting and clock tools.
"""

from datetime import datetime

from core.registry import CapabilityModule
from models.models import Tool

SERVER_TITLE = "MCP Hello World server"


class HelloModule(CapabilityModule):
    module_id = "hello"

    def __init__(self, clock=datetime.now):
        self._clock = clock

    def register_tools(self):
        return [
            Tool(
                name="hello",
                description="Returns a hello message",
                parameters={
                    "name": {
                        "type": "string",
                        "description": "Name to greet",
                    },
                },
                handler=self.hello,
                module_id=self.module_id,
            ),
            Tool(
                name="current_time",
                description="Returns the current time",
                parameters={},
                handler=self.current_time,
                module_id=self.module_id,
            ),
        ]

    # --- Handlers ---

    def hello(self, name: str) -> str:
        return f"Hello, {name}! Welcome to the {SERVER_TITLE}!"

    def current_time(self) -> str:
        # %c is the locale's date and time representation
        now = self._clock()
        return f"Current time: {now.strftime('%c')}"
