"""Hello World MCP Server — Core Dispatcher

- Method name -> handler mapping (one handler per request kind)
- Tool, resource and prompt lookup by exact name/uri
- Tool argument validation against the tool's declared parameters
- tools/call failures are returned as error-flagged content; every other
  failure propagates to the transport as a DispatchError
"""

from __future__ import annotations
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from core.errors import (
    InvalidParamsError,
    MethodNotFoundError,
    ToolArgumentError,
    UnknownPromptError,
    UnknownResourceError,
)
from core.registry import CapabilityRegistry
from models.models import Tool, text_content

logger = logging.getLogger("hello.dispatcher")

Handler = Callable[[dict], Union[dict, Awaitable[dict]]]


class CoreDispatcher:
    def __init__(self, registry: CapabilityRegistry):
        self.registry = registry
        self._handlers: Dict[str, Handler] = {
            "tools/list": self.list_tools,
            "tools/call": self.call_tool,
            "resources/list": self.list_resources,
            "resources/read": self.read_resource,
            "prompts/list": self.list_prompts,
            "prompts/get": self.get_prompt,
        }

    @property
    def methods(self) -> tuple:
        return tuple(self._handlers)

    async def dispatch(self, method: str, params: Optional[dict] = None) -> dict:
        handler = self._handlers.get(method)
        if handler is None:
            raise MethodNotFoundError(f"Method not found: {method}")
        result = handler(params or {})
        if asyncio.iscoroutine(result):
            result = await result
        return result

    # --- Listing ---

    def list_tools(self, params: dict) -> dict:
        return {"tools": self.registry.tools.list_tools()}

    def list_resources(self, params: dict) -> dict:
        return {"resources": self.registry.resources.list_resources()}

    def list_prompts(self, params: dict) -> dict:
        return {"prompts": self.registry.prompts.list_prompts()}

    # --- Tools ---

    async def call_tool(self, params: dict) -> dict:
        """Run a tool; any failure comes back as ``isError`` content, never raised."""
        tool_name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}

        try:
            if not isinstance(arguments, dict):
                raise ToolArgumentError("arguments must be an object")

            if tool_name is None or tool_name == "":
                raise ToolArgumentError("Missing tool name")
            tool = self.registry.tools.get(tool_name) if isinstance(tool_name, str) else None
            if tool is None:
                raise ToolArgumentError(f"Unknown tool: {tool_name}")

            validation_error = self._validate_params(tool, arguments)
            if validation_error:
                raise ToolArgumentError(validation_error)

            # Undeclared arguments are ignored
            call_args = {k: v for k, v in arguments.items() if k in tool.parameters}
            handler = tool.handler
            if inspect.iscoroutinefunction(handler):
                result = await handler(**call_args)
            else:
                result = handler(**call_args)

        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning(f"Tool call failed: tool={tool_name!r}: {message}")
            return self._error_response(f"Error: {message}")

        if isinstance(result, dict) and "content" in result:
            return result
        return {"content": [text_content(str(result))]}

    def _validate_params(self, tool: Tool, params: dict) -> Optional[str]:
        """Validate params against the tool's parameter schema.

        Checks:
        - All required params are present
        - Basic type validation for declared types

        Params the tool does not declare are not checked.
        """
        schema = tool.parameters
        for param_name, param_def in schema.items():
            if param_name not in params:
                if param_def.get("optional", False):
                    continue
                return f"Missing required parameter: '{param_name}'"

            if "type" in param_def:
                expected_type = param_def["type"]
                value = params[param_name]
                if not self._check_type(value, expected_type):
                    return f"Parameter '{param_name}' expected type '{expected_type}', got '{type(value).__name__}'"

        return None

    @staticmethod
    def _check_type(value: Any, expected: str) -> bool:
        if expected == "integer":
            return isinstance(value, int) and not isinstance(value, bool)
        if expected == "number":
            return isinstance(value, (int, float)) and not isinstance(value, bool)

        type_map = {
            "string": str,
            "boolean": bool,
            "array": list,
            "object": dict,
        }
        expected_types = type_map.get(expected)
        if expected_types is None:
            return True  # Unknown type -> pass through
        return isinstance(value, expected_types)

    @staticmethod
    def _error_response(message: str) -> dict:
        return {"content": [text_content(message)], "isError": True}

    # --- Resources ---

    def read_resource(self, params: dict) -> dict:
        uri = params.get("uri")
        resource = self.registry.resources.get(uri) if isinstance(uri, str) else None
        if resource is None:
            raise UnknownResourceError(f"Unknown resource: {uri}")
        return {"contents": [resource.read()]}

    # --- Prompts ---

    def get_prompt(self, params: dict) -> dict:
        name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("arguments must be an object")

        prompt = self.registry.prompts.get(name) if isinstance(name, str) else None
        if prompt is None:
            raise UnknownPromptError(f"Unknown prompt: {name}")

        missing = prompt.missing_arguments(arguments)
        if missing:
            raise InvalidParamsError(f"Missing required argument: '{missing[0]}'")
        return prompt.render(arguments)
