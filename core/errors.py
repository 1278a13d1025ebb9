"""Hello World MCP Server — Error taxonomy

DispatchError and its subclasses are transport-level failures: the stdio
transport turns them into JSON-RPC error objects carrying ``code`` and the
exception message. ToolArgumentError never leaves the dispatcher; tool failures
are reported as content.
"""

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Custom error codes (MCP range)
RESOURCE_NOT_FOUND = -32002
REQUEST_TOO_LARGE = -32003


class DispatchError(Exception):
    code = INTERNAL_ERROR


class InvalidRequestError(DispatchError):
    code = INVALID_REQUEST


class MethodNotFoundError(DispatchError):
    code = METHOD_NOT_FOUND


class InvalidParamsError(DispatchError):
    code = INVALID_PARAMS


class UnknownResourceError(DispatchError):
    code = RESOURCE_NOT_FOUND


class UnknownPromptError(InvalidParamsError):
    pass


class ToolArgumentError(Exception):
    """Tool arguments failed validation against the tool's parameters."""
