"""
Server Info Module: static text resources describing this server.
"""

from core.registry import CapabilityModule
from models.models import Resource

SERVER_INFO_TEXT = (
    "This is a Hello World MCP server built with Python. It demonstrates basic "
    "MCP capabilities including tools, resources, and prompts."
)
WELCOME_TEXT = (
    "Welcome to the MCP Hello World server! This server provides simple tools "
    "for greeting, time checking, and basic calculations."
)


class ServerInfoModule(CapabilityModule):
    module_id = "server_info"

    def register_resources(self):
        return [
            Resource(
                uri="info://server",
                name="Server Information",
                description="Information about this MCP server",
                reader=lambda: SERVER_INFO_TEXT,
                mime_type="text/plain",
            ),
            Resource(
                uri="greeting://welcome",
                name="Welcome Message",
                description="A welcome message for new users",
                reader=lambda: WELCOME_TEXT,
                mime_type="text/plain",
            ),
        ]
