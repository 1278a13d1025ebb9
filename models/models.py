"""Hello World MCP Server — Data Models

Descriptors for the three capability groups. Each descriptor is frozen and
validated on construction, and carries the callable that serves it so the
dispatcher can look handlers up by name instead of branching on literals.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
import copy
import re

TOOL_NAME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9_\-]*$')
URI_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*://\S+$')

ROLE_USER = "user"


def text_content(text: str) -> Dict[str, str]:
    return {"type": "text", "text": text}


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    parameters: Dict[str, Dict[str, Any]]
    handler: Callable
    module_id: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Tool name cannot be empty")
        if not self.module_id or not self.module_id.strip():
            raise ValueError("Tool module_id cannot be empty")
        if not TOOL_NAME_PATTERN.match(self.name):
            raise ValueError(f"Tool name {self.name!r} contains invalid characters")
        if not isinstance(self.parameters, dict):
            raise ValueError("Tool parameters must be a dict")
        if not callable(self.handler):
            raise ValueError(f"Tool {self.name!r} handler is not callable")

    @property
    def required(self) -> List[str]:
        """Parameters without optional=True, in declaration order."""
        return [
            pname for pname, pdef in self.parameters.items()
            if not pdef.get("optional", False)
        ]

    def input_schema(self) -> Dict[str, Any]:
        properties = {}
        for pname, pdef in self.parameters.items():
            properties[pname] = {k: copy.deepcopy(v) for k, v in pdef.items() if k != "optional"}
        schema = {
            "type": "object",
            "properties": properties,
        }
        if self.required:
            schema["required"] = self.required
        return schema

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


@dataclass(frozen=True)
class Resource:
    uri: str
    name: str
    description: str
    reader: Callable[[], str]
    mime_type: str = "text/plain"

    def __post_init__(self):
        if not self.uri or not URI_PATTERN.match(self.uri):
            raise ValueError(f"Resource uri {self.uri!r} must have the form scheme://path")
        if not self.name or not self.name.strip():
            raise ValueError("Resource name cannot be empty")
        if not self.mime_type:
            raise ValueError("Resource mime_type cannot be empty")

    def describe(self) -> Dict[str, str]:
        return {
            "uri": self.uri,
            "mimeType": self.mime_type,
            "name": self.name,
            "description": self.description,
        }

    def read(self) -> Dict[str, str]:
        return {
            "uri": self.uri,
            "mimeType": self.mime_type,
            "text": self.reader(),
        }


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Prompt argument name cannot be empty")

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }


@dataclass(frozen=True)
class Prompt:
    """A parameterized template.

    ``renderer`` receives the caller's arguments and returns a
    ``(description, text)`` pair; the text becomes a single user message.
    """
    name: str
    description: str
    renderer: Callable[[Dict[str, Any]], Tuple[str, str]]
    arguments: Tuple[PromptArgument, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Prompt name cannot be empty")
        names = [a.name for a in self.arguments]
        if len(names) != len(set(names)):
            raise ValueError(f"Prompt {self.name!r} declares duplicate arguments")

    def missing_arguments(self, arguments: Dict[str, Any]) -> List[str]:
        return [a.name for a in self.arguments if a.required and a.name not in arguments]

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [a.describe() for a in self.arguments],
        }

    def render(self, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        description, text = self.renderer(arguments or {})
        return {
            "description": description,
            "messages": [
                {"role": ROLE_USER, "content": text_content(text)},
            ],
        }
