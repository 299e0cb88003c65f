"""The MCP server: routes JSON-RPC methods to tools and resources."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from arkmcp.mcp.options import Option
from arkmcp.mcp.resources import ResourcesHandler
from arkmcp.mcp.tools import ToolsHandler
from arkmcp.mcp.transport import HttpTransport, StdioTransport, Transport
from arkmcp.mcp.types import (
    ErrorCode,
    InitializeResult,
    ListResourcesResult,
    ListToolsResult,
    MCPError,
    MCPRequest,
    MCPResponse,
    ResourcesCapability,
    ServerCapabilities,
    ServerInfo,
    ToolsCapability,
)
from arkmcp.model.mcp_server_type import McpServerType

_log = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "ark-mcp-server"
SERVER_VERSION = "0.1.0"


@dataclass
class ServeOption:
    """How and where the MCP server runs."""

    root_dir: str = "."
    http_port: str = "8522"
    mcp_server_type: McpServerType | str = McpServerType.STDIO
    general_option: Option = field(default_factory=Option)

    def __post_init__(self) -> None:
        if not isinstance(self.mcp_server_type, McpServerType):
            self.mcp_server_type = McpServerType.parse(self.mcp_server_type)
        self.http_port = str(self.http_port)


def _response(request: MCPRequest, result: Any) -> MCPResponse:
    return MCPResponse(id=request.id, result=result)


def _error(request: MCPRequest, code: ErrorCode, message: str,
           data: Any = None) -> MCPResponse:
    return MCPResponse(
        id=request.id, error=MCPError(code=code, message=message, data=data)
    )


def _call_tool_params(params: Any) -> tuple[str, dict[str, Any] | None]:
    if params is None:
        return "", None
    if not isinstance(params, Mapping):
        raise ValueError("params must be a JSON object")
    name = params.get("name")
    if name is None:
        name = ""
    elif not isinstance(name, str):
        raise ValueError("name must be a string")
    arguments = params.get("arguments")
    if arguments is not None and not isinstance(arguments, Mapping):
        raise ValueError("arguments must be a JSON object")
    return name, dict(arguments) if arguments is not None else None


def _read_resource_params(params: Any) -> str:
    if params is None:
        return ""
    if not isinstance(params, Mapping):
        raise ValueError("params must be a JSON object")
    uri = params.get("uri")
    if uri is None:
        return ""
    if not isinstance(uri, str):
        raise ValueError("uri must be a string")
    return uri


class MCPServer:
    """Answers MCP requests for files under ``root_dir``."""

    def __init__(self, root_dir: str, serve_option: ServeOption) -> None:
        self.root_dir = root_dir
        self.serve_option = serve_option
        self.tools = ToolsHandler(root_dir, serve_option.general_option)
        self.resources = ResourcesHandler(root_dir, serve_option.general_option)

    def process_request(self, request: MCPRequest) -> MCPResponse:
        """Route ``request`` to its method and return the response."""
        routes = {
            "initialize": self._initialize,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
        }
        route = routes.get(request.method)
        if route is None:
            return _error(
                request, ErrorCode.METHOD_NOT_FOUND, f"Method not found: {request.method}"
            )
        return route(request)

    def _initialize(self, request: MCPRequest) -> MCPResponse:
        result = InitializeResult(
            protocol_version=PROTOCOL_VERSION,
            capabilities=ServerCapabilities(
                tools=ToolsCapability(list_changed=False),
                resources=ResourcesCapability(subscribe=False, list_changed=False),
            ),
            server_info=ServerInfo(name=SERVER_NAME, version=SERVER_VERSION),
        )
        return _response(request, result)

    def _list_tools(self, request: MCPRequest) -> MCPResponse:
        return _response(request, ListToolsResult(tools=self.tools.list_tools()))

    def _call_tool(self, request: MCPRequest) -> MCPResponse:
        try:
            name, arguments = _call_tool_params(request.params)
        except ValueError as exc:
            return _error(request, ErrorCode.INVALID_PARAMS, "Invalid parameters", str(exc))
        try:
            result = self.tools.call_tool(name, arguments)
        except (ValueError, OSError) as exc:
            return _error(request, ErrorCode.INTERNAL_ERROR, "Tool execution error", str(exc))
        return _response(request, result)

    def _list_resources(self, request: MCPRequest) -> MCPResponse:
        return _response(
            request, ListResourcesResult(resources=self.resources.list_resources())
        )

    def _read_resource(self, request: MCPRequest) -> MCPResponse:
        try:
            uri = _read_resource_params(request.params)
        except ValueError as exc:
            return _error(request, ErrorCode.INVALID_PARAMS, "Invalid parameters", str(exc))
        try:
            result = self.resources.read_resource(uri)
        except (ValueError, OSError) as exc:
            return _error(request, ErrorCode.INTERNAL_ERROR, "Resource read error", str(exc))
        return _response(request, result)


def run_mcp_serve(root_dir: str, serve_option: ServeOption) -> None:
    """Run the MCP server on the transport ``serve_option`` names."""
    server = MCPServer(root_dir, serve_option)
    transport: Transport
    if serve_option.mcp_server_type is McpServerType.HTTP:
        transport = HttpTransport("localhost", serve_option.http_port)
    else:
        transport = StdioTransport()
    transport.start(server.process_request)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ark-mcp", description="Serve a directory over the Model Context Protocol."
    )
    parser.add_argument("root_dir", nargs="?", default=".", help="directory to serve")
    parser.add_argument("-t", "--mcp-server-type", default="stdio",
                        help="transport: stdio or http (default: stdio)")
    parser.add_argument("-p", "--http-port", default="8522",
                        help="port for the http transport (default: 8522)")
    parser.add_argument("--mask-secrets", default="on", help="on/off")
    parser.add_argument("--with-line-number", default="on", help="on/off")
    parser.add_argument("--ignore-dotfile", default="off", help="on/off")
    parser.add_argument("--allow-gitignore", default="on", help="on/off")
    parser.add_argument("--skip-non-utf8", action="store_true")
    parser.add_argument("--delete-comments", action="store_true")
    parser.add_argument("--include-ext", default="")
    parser.add_argument("--exclude-ext", default="")
    parser.add_argument("--exclude-dir", default="")
    parser.add_argument("--pattern-regex", default="")
    parser.add_argument("--exclude-file-regex", default="")
    parser.add_argument("--exclude-dir-regex", default="")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point; returns the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        general = Option(
            mask_secrets=args.mask_secrets,
            with_line_number=args.with_line_number,
            ignore_dotfile=args.ignore_dotfile,
            allow_gitignore=args.allow_gitignore,
            skip_non_utf8=args.skip_non_utf8,
            delete_comments=args.delete_comments,
            include_ext=args.include_ext,
            exclude_ext=args.exclude_ext,
            exclude_dir=args.exclude_dir,
            pattern_regex=args.pattern_regex,
            exclude_file_regex=args.exclude_file_regex,
            exclude_dir_regex=args.exclude_dir_regex,
        )
        serve_option = ServeOption(
            root_dir=args.root_dir,
            http_port=args.http_port,
            mcp_server_type=args.mcp_server_type,
            general_option=general,
        )
    except ValueError as exc:
        parser.error(str(exc))
    logging.basicConfig(level=logging.INFO, stream=sys.stderr,
                        format="%(asctime)s %(message)s")
    try:
        run_mcp_serve(serve_option.root_dir, serve_option)
    except KeyboardInterrupt:
        return 130
    except (OSError, ValueError) as exc:
        _log.error("Transport error: %s", exc)
        return 1
    return 0