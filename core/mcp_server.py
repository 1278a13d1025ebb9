"""Hello World MCP Server — MCP Protocol Handler

- JSON-RPC 2.0 over stdio, one message per line
- MCP initialize/initialized handshake with capability declaration
- Request size limits (prevent memory exhaustion)
- Notification support (no response required)
- Graceful shutdown signaling
"""

from __future__ import annotations
import asyncio
import json
import os
import sys
import logging
import threading
from typing import Any, Optional

from core.dispatcher import CoreDispatcher
from core.errors import (
    DispatchError,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    InvalidRequestError,
    PARSE_ERROR,
    REQUEST_TOO_LARGE,
)

logger = logging.getLogger("hello.mcp_server")

# Limits
MAX_REQUEST_LINE_BYTES = 10 * 1024 * 1024  # 10 MB max per JSON-RPC line
JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"


class HelloMCPServer:
    def __init__(
        self,
        dispatcher: CoreDispatcher,
        server_name: str = "hello-world-mcp",
        server_version: str = "1.0.0",
        stdin=None,
        stdout=None,
    ):
        self.dispatcher = dispatcher
        self.server_name = server_name
        self.server_version = server_version
        # Binary input and text output; default to the process streams at run time
        self._stdin = stdin
        self._stdout = stdout
        self._initialized = False
        self._shutting_down = False
        self._stop: Optional[asyncio.Event] = None
        self._closed = False
        self._reader_thread: Optional[threading.Thread] = None

    def _make_response(self, req_id: Any, result: Any) -> dict:
        return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "result": result}

    def _make_error(self, req_id: Any, code: int, message: str, data: Any = None) -> dict:
        error = {"code": code, "message": message}
        if data is not None:
            error["data"] = data
        return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "error": error}

    def handle_initialize(self, params: dict) -> dict:
        """MCP initialize handshake: declare server capabilities."""
        if self._initialized:
            logger.warning("Re-initialization attempt rejected")
            raise InvalidRequestError("Already initialized")

        self._initialized = True
        client_info = params.get("clientInfo")
        if not isinstance(client_info, dict):
            client_info = {}
        logger.info(
            "MCP initialize: client=%r version=%r",
            client_info.get("name", "unknown"),
            client_info.get("version", "unknown"),
        )
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {
                "tools": {},
                "resources": {},
                "prompts": {},
            },
            "serverInfo": {
                "name": self.server_name,
                "version": self.server_version,
            },
        }

    async def handle_line(self, line_bytes: bytes) -> Optional[dict]:
        """Turn one raw input line into a response, or None when no reply is due."""
        # Request size check (before decoding)
        if len(line_bytes) > MAX_REQUEST_LINE_BYTES:
            logger.warning(f"Request too large: {len(line_bytes)} bytes")
            return self._make_error(
                None, REQUEST_TOO_LARGE, f"Request exceeds {MAX_REQUEST_LINE_BYTES} byte limit"
            )

        line = line_bytes.decode("utf-8", errors="replace")
        if not line.strip():
            return None

        logger.debug(f"MCP RECV: {line.strip()[:200]}")

        try:
            request = json.loads(line)
        except RecursionError:
            logger.warning("JSON recursion limit exceeded (deeply nested payload)")
            return self._make_error(None, PARSE_ERROR, "JSON structure too deep")
        except ValueError as e:
            # JSONDecodeError, or an integer literal past the int conversion limit
            logger.warning(f"JSON parse error: {e}")
            return self._make_error(None, PARSE_ERROR, "Invalid JSON")

        return await self.handle_request(request)

    async def handle_request(self, request: Any) -> Optional[dict]:
        # Batch requests (arrays) are rejected outright
        if isinstance(request, list):
            return self._make_error(
                None, INVALID_REQUEST, "Batch requests are not supported. Send requests individually."
            )

        if not isinstance(request, dict):
            return self._make_error(None, INVALID_REQUEST, "Invalid request (not an object)")

        if request.get("jsonrpc") != JSONRPC_VERSION:
            return self._make_error(request.get("id"), INVALID_REQUEST, "Invalid jsonrpc version")

        method = request.get("method")
        if not isinstance(method, str) or not method:
            return self._make_error(request.get("id"), INVALID_REQUEST, "Invalid method")

        req_id = request.get("id", None)
        if "id" in request and isinstance(req_id, (dict, list)):
            return self._make_error(None, INVALID_REQUEST, "Invalid id type")

        params = request.get("params", {})
        if params is None:
            params = {}
        if not isinstance(params, dict):
            if "id" not in request:
                return None
            return self._make_error(req_id, INVALID_PARAMS, "params must be an object")

        # No id = notification, never answered
        if "id" not in request:
            self._handle_notification(method)
            return None

        # Lenient for clients that skip the initialize handshake
        if method not in ("initialize", "ping") and not self._initialized:
            logger.info("Auto-initializing (client skipped initialize handshake)")
            self._initialized = True

        try:
            if method == "initialize":
                result = self.handle_initialize(params)
            elif method == "ping":
                result = {}
            else:
                result = await self.dispatcher.dispatch(method, params)
            return self._make_response(req_id, result)

        except DispatchError as e:
            logger.info(f"Request failed: method={method} code={e.code}: {e}")
            return self._make_error(req_id, e.code, str(e))

        except Exception as e:
            logger.error(f"Handler error for method={method}: {e}", exc_info=True)
            return self._make_error(req_id, INTERNAL_ERROR, "Internal server error")

    def _handle_notification(self, method: str) -> None:
        if method == "notifications/initialized":
            logger.info("Client initialization confirmed")
        else:
            logger.debug(f"Ignoring notification: {method}")

    def _start_reader(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue) -> threading.Thread:
        """Read stdin lines on a daemon thread so shutdown never waits on a blocked read."""
        stdin = self._stdin
        owned = stdin is None
        if owned:
            # Private reader on a dup of fd 0: interpreter shutdown must not
            # contend with this thread for sys.stdin.buffer's lock
            stdin = open(os.dup(sys.stdin.fileno()), "rb")

        def _deliver(line: bytes) -> bool:
            try:
                loop.call_soon_threadsafe(queue.put_nowait, line)
            except RuntimeError:
                return False  # loop already closed
            return True

        def _drain_line():
            """Drain remainder of an oversized line to keep stream aligned."""
            while True:
                chunk = stdin.readline(1024 * 1024)
                if not chunk or chunk.endswith(b"\n"):
                    break

        def _reader():
            try:
                while True:
                    # Read at most MAX_REQUEST_LINE_BYTES + 1 to detect oversize
                    line = stdin.readline(MAX_REQUEST_LINE_BYTES + 1)
                    if len(line) > MAX_REQUEST_LINE_BYTES and not line.endswith(b"\n"):
                        _drain_line()
                    if not _deliver(line) or not line:
                        return
            except (OSError, ValueError) as e:
                logger.error(f"stdin read failed: {e}")
                _deliver(b"")
            finally:
                if owned:
                    stdin.close()

        thread = threading.Thread(target=_reader, name="stdio-reader", daemon=True)
        thread.start()
        self._reader_thread = thread
        return thread

    async def run_stdio(self) -> None:
        """Main stdio transport loop."""
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        self._stop = asyncio.Event()
        if self._shutting_down:
            self._stop.set()
        logger.info(f"{self.server_name} v{self.server_version} starting stdio transport")

        self._start_reader(loop, queue)
        try:
            while not self._shutting_down:
                next_line = asyncio.ensure_future(queue.get())
                stopped = asyncio.ensure_future(self._stop.wait())
                done, pending = await asyncio.wait(
                    {next_line, stopped}, return_when=asyncio.FIRST_COMPLETED
                )
                for task in pending:
                    task.cancel()
                if next_line not in done:
                    break

                line_bytes = next_line.result()
                if not line_bytes:
                    break  # EOF

                try:
                    response = await self.handle_line(line_bytes)
                except Exception as e:
                    logger.error(f"Unhandled error for input line: {e}", exc_info=True)
                    response = self._make_error(None, INTERNAL_ERROR, "Internal server error")
                if response is not None:
                    self._write_response(response)
        finally:
            self.close()

        logger.info("MCP server stdio loop ended")

    def _write_response(self, response: dict) -> None:
        if self._closed:
            logger.warning("Dropping response on closed transport")
            return
        stdout = self._stdout if self._stdout is not None else sys.stdout
        try:
            payload = json.dumps(response)
        except (TypeError, ValueError) as e:
            logger.error(f"JSON serialization failed: {e}")
            payload = json.dumps(
                self._make_error(response.get("id"), INTERNAL_ERROR, "Response serialization failed")
            )
        try:
            stdout.write(payload + "\n")
            stdout.flush()
        except (BrokenPipeError, OSError) as e:
            logger.error(f"Failed to write response: {e}")
            self.request_shutdown()

    def request_shutdown(self) -> None:
        if self._shutting_down:
            return
        self._shutting_down = True
        if self._stop is not None:
            self._stop.set()
        logger.info("Shutdown requested")

    def close(self) -> None:
        """Flush the output side of the transport; further responses are dropped."""
        if self._closed:
            return
        self._closed = True
        stdout = self._stdout if self._stdout is not None else sys.stdout
        try:
            stdout.flush()
        except (BrokenPipeError, OSError, ValueError) as e:
            logger.debug(f"stdout flush on close failed: {e}")
        logger.info("Transport closed")
