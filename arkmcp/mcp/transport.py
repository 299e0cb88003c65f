"""Transports that carry MCP JSON-RPC messages: stdin/stdout and HTTP."""

from __future__ import annotations

import json
import logging
import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import IO, Any, Optional
from urllib.parse import urlsplit

from arkmcp.mcp.types import ErrorCode, MCPError, MCPRequest, MCPResponse, to_jsonable

_log = logging.getLogger(__name__)

RequestHandler = Callable[[MCPRequest], Optional[MCPResponse]]

HEALTH_BODY = '{"status":"ok","server":"ark-mcp-server"}'

DOCUMENTATION_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>Ark MCP Server</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; }
        .endpoint { background: #f5f5f5; padding: 10px; margin: 10px 0; border-radius: 4px; }
        .method { font-weight: bold; color: #0066cc; }
    </style>
</head>
<body>
    <h1>Ark MCP Server</h1>
    <p>Model Context Protocol (MCP) server for file and directory analysis.</p>

    <h2>Available Endpoints</h2>

    <div class="endpoint">
        <div class="method">POST /mcp</div>
        <p>Main MCP JSON-RPC endpoint. Send MCP requests here.</p>
        <p>Content-Type: application/json</p>
    </div>

    <div class="endpoint">
        <div class="method">GET /health</div>
        <p>Health check endpoint.</p>
    </div>

    <div class="endpoint">
        <div class="method">GET /</div>
        <p>This documentation page.</p>
    </div>

    <h2>Example MCP Request</h2>
    <pre>
{
  "jsonrpc": "2.0",
  "id": "1",
  "method": "tools/list",
  "params": {}
}
    </pre>

    <h2>Available Tools</h2>
    <ul>
        <li>get_directory_tree - Get directory structure as JSON</li>
        <li>get_file_content - Get content of a single file</li>
        <li>list_files - List files with filtering options</li>
        <li>search_in_files - Search for text within files</li>
        <li>get_file_info - Get file metadata</li>
        <li>get_project_stats - Get project statistics</li>
        <li>get_files_arklite - Get multiple files in arklite format</li>
    </ul>
</body>
</html>
"""

_CORS_HEADERS = (
    ("Access-Control-Allow-Origin", "*"),
    ("Access-Control-Allow-Methods", "POST, OPTIONS"),
    ("Access-Control-Allow-Headers", "Content-Type"),
)


def _parse_error(exc: BaseException) -> MCPResponse:
    return MCPResponse(
        id=None,
        error=MCPError(code=ErrorCode.PARSE_ERROR, message="Parse error", data=str(exc)),
    )


def _decode_request(raw: str | bytes) -> MCPRequest:
    return MCPRequest.from_dict(json.loads(raw))


class Transport(ABC):
    """Carries requests to a handler and its responses back."""

    @abstractmethod
    def start(self, handler: RequestHandler) -> None:
        """Serve requests until the input ends or the transport is stopped."""

    @abstractmethod
    def stop(self) -> None:
        """Stop serving."""


class StdioTransport(Transport):
    """One JSON request per input line, one JSON response per output line."""

    def __init__(self, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout

    def start(self, handler: RequestHandler) -> None:
        _log.info("Starting MCP Server on stdin/stdout")
        stdin: Iterable[str] = self._stdin if self._stdin is not None else sys.stdin
        try:
            for raw in stdin:
                line = raw.strip()
                if not line:
                    continue
                try:
                    request = _decode_request(line)
                except ValueError as exc:
                    self.send_response(_parse_error(exc))
                    continue
                response = handler(request)
                if response is not None:
                    self.send_response(response)
        except OSError as exc:
            raise OSError(f"error reading from stdin: {exc}") from exc

    def stop(self) -> None:
        """Nothing to release for standard streams."""

    def send_response(self, response: MCPResponse) -> None:
        """Write ``response`` as one compact JSON line."""
        try:
            payload = json.dumps(
                to_jsonable(response), ensure_ascii=False, separators=(",", ":")
            )
        except (TypeError, ValueError) as exc:
            _log.error("Error marshaling response: %s", exc)
            return
        stdout = self._stdout if self._stdout is not None else sys.stdout
        print(payload, file=stdout, flush=True)


class _Server(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], handler: RequestHandler) -> None:
        super().__init__(address, _HTTPRequestHandler)
        self.mcp_handler = handler


class _HTTPRequestHandler(BaseHTTPRequestHandler):
    server: _Server

    def _send(self, status: int, body: str, content_type: str | None = None,
              headers: Iterable[tuple[str, str]] = ()) -> None:
        data = body.encode("utf-8")
        self.send_response(status)
        for name, value in headers:
            self.send_header(name, value)
        if content_type is not None:
            self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _send_error(self, status: int, message: str,
                    headers: Iterable[tuple[str, str]] = ()) -> None:
        self._send(status, message + "\n", "text/plain; charset=utf-8", headers)

    def _read_body(self) -> bytes:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = 0
        return self.rfile.read(length) if length > 0 else b""

    def _dispatch(self) -> None:
        path = urlsplit(self.path).path
        if path == "/mcp":
            self._handle_mcp()
        elif path == "/health":
            self._send(200, HEALTH_BODY, "application/json")
        elif path == "/":
            self._send(200, DOCUMENTATION_HTML, "text/html")
        else:
            self._send_error(404, "404 page not found")

    do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = do_OPTIONS = _dispatch

    def _handle_mcp(self) -> None:
        if self.command == "OPTIONS":
            self._send(200, "", headers=_CORS_HEADERS)
            return
        if self.command != "POST":
            self._send_error(405, "Method not allowed", _CORS_HEADERS)
            return
        try:
            request = _decode_request(self._read_body())
        except ValueError as exc:
            response: MCPResponse | None = _parse_error(exc)
        else:
            response = self.server.mcp_handler(request)
        try:
            payload = json.dumps(to_jsonable(response), ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            _log.error("Error encoding response: %s", exc)
            self._send_error(500, "Internal server error", _CORS_HEADERS)
            return
        self._send(200, payload, "application/json", _CORS_HEADERS)

    def log_message(self, format: str, *args: Any) -> None:
        _log.debug("%s - %s", self.address_string(), format % args)


class HttpTransport(Transport):
    """Serves ``POST /mcp``, ``/health`` and a documentation page over HTTP."""

    def __init__(self, host: str, port: str | int) -> None:
        self.host = host
        self.port = str(port)
        self._server: _Server | None = None
        self._lock = threading.Lock()

    def start(self, handler: RequestHandler) -> None:
        """Bind and serve until :meth:`stop` is called."""
        server = _Server((self.host, int(self.port)), handler)
        with self._lock:
            self._server = server
        _log.info("Starting MCP Server on HTTP %s:%s", self.host, self.port)
        try:
            server.serve_forever()
        finally:
            server.server_close()

    def stop(self) -> None:
        with self._lock:
            server, self._server = self._server, None
        if server is not None:
            server.shutdown()

    def server_address(self) -> tuple[str, int] | None:
        """The bound host and port while listening, otherwise None."""
        with self._lock:
            server = self._server
        if server is None:
            return None
        host, port = server.server_address[:2]
        return str(host), int(port)