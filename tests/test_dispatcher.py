import asyncio

import pytest

from core.dispatcher import CoreDispatcher
from core.errors import (
    INVALID_PARAMS,
    InvalidParamsError,
    MethodNotFoundError,
    RESOURCE_NOT_FOUND,
    UnknownPromptError,
    UnknownResourceError,
)
from core.registry import CapabilityModule, CapabilityRegistry
from hello_server import build_registry
from models.models import Tool


@pytest.fixture
def dispatcher():
    return CoreDispatcher(build_registry())


def _call(dispatcher, name, arguments=None):
    params = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return asyncio.run(dispatcher.dispatch("tools/call", params))


def _text(result):
    assert len(result["content"]) == 1
    assert result["content"][0]["type"] == "text"
    return result["content"][0]["text"]


def _make_tool(parameters):
    return Tool(
        name="demo_tool",
        description="Demo",
        parameters=parameters,
        handler=lambda **_: "ok",
        module_id="test",
    )


# --- Dispatch table ---

def test_methods_cover_the_six_request_kinds(dispatcher):
    assert set(dispatcher.methods) == {
        "tools/list", "tools/call",
        "resources/list", "resources/read",
        "prompts/list", "prompts/get",
    }


def test_unknown_method_raises(dispatcher):
    with pytest.raises(MethodNotFoundError, match="Method not found: tools/delete"):
        asyncio.run(dispatcher.dispatch("tools/delete", {}))


def test_listings_are_idempotent(dispatcher):
    for method, key, count in [
        ("tools/list", "tools", 3),
        ("resources/list", "resources", 2),
        ("prompts/list", "prompts", 1),
    ]:
        first = asyncio.run(dispatcher.dispatch(method))
        second = asyncio.run(dispatcher.dispatch(method, {"cursor": "ignored"}))
        assert len(first[key]) == count
        assert first == second


def test_list_tools_descriptors(dispatcher):
    tools = asyncio.run(dispatcher.dispatch("tools/list"))["tools"]
    assert tools[0] == {
        "name": "hello",
        "description": "Returns a hello message",
        "inputSchema": {
            "type": "object",
            "properties": {"name": {"type": "string", "description": "Name to greet"}},
            "required": ["name"],
        },
    }
    assert tools[1]["inputSchema"] == {"type": "object", "properties": {}}
    assert tools[2]["inputSchema"]["required"] == ["operation", "a", "b"]
    assert tools[2]["inputSchema"]["properties"]["operation"]["enum"] == [
        "add", "subtract", "multiply", "divide",
    ]


# --- tools/call ---

def test_hello(dispatcher):
    result = _call(dispatcher, "hello", {"name": "World"})
    assert "isError" not in result
    assert _text(result) == "Hello, World! Welcome to the MCP Hello World server!"


def test_hello_missing_name_is_content_error(dispatcher):
    result = _call(dispatcher, "hello", {})
    assert result["isError"] is True
    assert _text(result) == "Error: Missing required parameter: 'name'"


def test_current_time_prefix(dispatcher):
    assert _text(_call(dispatcher, "current_time")).startswith("Current time: ")


def test_calculate_through_dispatcher(dispatcher):
    result = _call(dispatcher, "calculate", {"operation": "multiply", "a": 6, "b": 7})
    assert _text(result) == "6 multiply 7 = 42"


def test_divide_by_zero_is_content_error(dispatcher):
    result = _call(dispatcher, "calculate", {"operation": "divide", "a": 5, "b": 0})
    assert result["isError"] is True
    assert _text(result) == "Error: Division by zero is not allowed"


def test_unknown_operation_is_content_error(dispatcher):
    result = _call(dispatcher, "calculate", {"operation": "modulo", "a": 5, "b": 2})
    assert result["isError"] is True
    assert _text(result) == "Error: Unknown operation: modulo"


def test_unknown_tool_is_content_error(dispatcher):
    result = _call(dispatcher, "Hello", {"name": "x"})
    assert result["isError"] is True
    assert _text(result) == "Error: Unknown tool: Hello"


def test_missing_tool_name_is_content_error(dispatcher):
    result = asyncio.run(dispatcher.dispatch("tools/call", {"arguments": {}}))
    assert result["isError"] is True
    assert _text(result) == "Error: Missing tool name"


def test_non_string_tool_name_is_content_error(dispatcher):
    result = _call(dispatcher, 7)
    assert _text(result) == "Error: Unknown tool: 7"


def test_non_object_arguments_is_content_error(dispatcher):
    result = _call(dispatcher, "hello", ["World"])
    assert result["isError"] is True
    assert _text(result) == "Error: arguments must be an object"


def test_wrong_argument_type_is_content_error(dispatcher):
    result = _call(dispatcher, "calculate", {"operation": "add", "a": "1", "b": 2})
    assert result["isError"] is True
    assert _text(result) == "Error: Parameter 'a' expected type 'number', got 'str'"


def test_async_tool_handler_is_awaited():
    class SlowEcho(CapabilityModule):
        module_id = "slow_echo"

        def register_tools(self):
            return [Tool(
                name="slow_echo",
                description="",
                parameters={"text": {"type": "string"}},
                handler=self.slow_echo,
                module_id=self.module_id,
            )]

        async def slow_echo(self, text):
            await asyncio.sleep(0)
            return text

    dispatcher = CoreDispatcher(CapabilityRegistry().load([SlowEcho()]))
    assert _text(_call(dispatcher, "slow_echo", {"text": "hi"})) == "hi"


# --- Parameter validation ---

def test_check_type_rejects_bool_for_integer_and_number():
    assert CoreDispatcher._check_type(5, "integer")
    assert not CoreDispatcher._check_type(True, "integer")

    assert CoreDispatcher._check_type(5, "number")
    assert CoreDispatcher._check_type(3.14, "number")
    assert not CoreDispatcher._check_type(True, "number")


def test_validate_params_optional_field_is_not_required(dispatcher):
    tool = _make_tool(
        {
            "path": {"type": "string"},
            "mode": {"type": "string", "optional": True},
        }
    )
    assert dispatcher._validate_params(tool, {"path": "notes.txt"}) is None


def test_validate_params_ignores_undeclared_param(dispatcher):
    tool = _make_tool({"path": {"type": "string"}})
    assert dispatcher._validate_params(tool, {"path": "a.txt", "extra": 1}) is None


def test_validate_params_ignores_params_for_parameterless_tool(dispatcher):
    assert dispatcher._validate_params(_make_tool({}), {"x": 1}) is None


def test_hello_ignores_extra_arguments(dispatcher):
    result = _call(dispatcher, "hello", {"name": "World", "lang": "en"})
    assert "isError" not in result
    assert _text(result) == "Hello, World! Welcome to the MCP Hello World server!"


def test_current_time_ignores_arguments(dispatcher):
    result = _call(dispatcher, "current_time", {"tz": "UTC"})
    assert "isError" not in result
    assert _text(result).startswith("Current time: ")


# --- Resources ---

def test_read_resource(dispatcher):
    result = asyncio.run(dispatcher.dispatch("resources/read", {"uri": "info://server"}))
    (content,) = result["contents"]
    assert content["uri"] == "info://server"
    assert content["mimeType"] == "text/plain"
    assert content["text"].startswith("This is a Hello World MCP server")


def test_unknown_resource_propagates(dispatcher):
    with pytest.raises(UnknownResourceError, match="Unknown resource: unknown://x") as exc:
        asyncio.run(dispatcher.dispatch("resources/read", {"uri": "unknown://x"}))
    assert exc.value.code == RESOURCE_NOT_FOUND


# --- Prompts ---

def test_get_prompt_defaults_to_friendly(dispatcher):
    result = asyncio.run(dispatcher.dispatch(
        "prompts/get", {"name": "greeting", "arguments": {"name": "Sam"}}
    ))
    assert result == {
        "description": "A friendly greeting for Sam",
        "messages": [
            {"role": "user", "content": {"type": "text", "text": "Hi Sam! It's great to meet you!"}},
        ],
    }


def test_unknown_prompt_propagates(dispatcher):
    with pytest.raises(UnknownPromptError, match="Unknown prompt: farewell") as exc:
        asyncio.run(dispatcher.dispatch("prompts/get", {"name": "farewell"}))
    assert exc.value.code == INVALID_PARAMS


def test_get_prompt_missing_required_argument(dispatcher):
    with pytest.raises(InvalidParamsError, match="Missing required argument: 'name'"):
        asyncio.run(dispatcher.dispatch("prompts/get", {"name": "greeting", "arguments": {}}))


def test_get_prompt_rejects_non_object_arguments(dispatcher):
    with pytest.raises(InvalidParamsError, match="arguments must be an object"):
        asyncio.run(dispatcher.dispatch("prompts/get", {"name": "greeting", "arguments": "Sam"}))
