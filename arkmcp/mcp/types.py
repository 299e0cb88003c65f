"""JSON-RPC 2.0 and Model Context Protocol message types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from enum import Enum, IntEnum
from typing import Any

# Omission modes for JSON output: drop only None, or drop any empty value.
_OMIT_NONE = "none"
_OMIT_EMPTY = "empty"


def _json(name: str, *, omit: str | None = None, default: Any = MISSING,
          default_factory: Any = MISSING) -> Any:
    metadata = {"json": name, "omit": omit}
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and containers into plain JSON values."""
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            omit = f.metadata.get("omit")
            if omit == _OMIT_NONE and item is None:
                continue
            if omit == _OMIT_EMPTY and _is_empty(item):
                continue
            out[f.metadata.get("json", f.name)] = to_jsonable(item)
        return out
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return value


class ErrorCode(IntEnum):
    """Standard JSON-RPC error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


@dataclass
class MCPError:
    code: int = _json("code")
    message: str = _json("message")
    data: Any = _json("data", omit=_OMIT_NONE, default=None)

    @classmethod
    def from_dict(cls, data: Any) -> MCPError:
        if not isinstance(data, Mapping):
            raise ValueError("error must be a JSON object")
        code = data.get("code", 0)
        message = data.get("message", "")
        if isinstance(code, bool) or not isinstance(code, (int, float)) or code != int(code):
            raise ValueError("error code must be an integer")
        if not isinstance(message, str):
            raise ValueError("error message must be a string")
        return cls(code=int(code), message=message, data=data.get("data"))


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


@dataclass
class MCPRequest:
    jsonrpc: str = _json("jsonrpc", default="2.0")
    id: Any = _json("id", default=None)
    method: str = _json("method", default="")
    params: Any = _json("params", omit=_OMIT_NONE, default=None)

    @classmethod
    def from_dict(cls, data: Any) -> MCPRequest:
        """Build a request from a decoded JSON object; raise ValueError if malformed."""
        if not isinstance(data, Mapping):
            raise ValueError("request must be a JSON object")
        return cls(
            jsonrpc=_string_field(data, "jsonrpc"),
            id=data.get("id"),
            method=_string_field(data, "method"),
            params=data.get("params"),
        )

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)


@dataclass
class MCPResponse:
    jsonrpc: str = _json("jsonrpc", default="2.0")
    id: Any = _json("id", default=None)
    result: Any = _json("result", omit=_OMIT_NONE, default=None)
    error: MCPError | None = _json("error", omit=_OMIT_NONE, default=None)

    @classmethod
    def from_dict(cls, data: Any) -> MCPResponse:
        """Build a response from a decoded JSON object; raise ValueError if malformed."""
        if not isinstance(data, Mapping):
            raise ValueError("response must be a JSON object")
        error = data.get("error")
        return cls(
            jsonrpc=_string_field(data, "jsonrpc"),
            id=data.get("id"),
            result=data.get("result"),
            error=MCPError.from_dict(error) if error is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)


@dataclass
class ToolsCapability:
    list_changed: bool = _json("listChanged", omit=_OMIT_EMPTY, default=False)


@dataclass
class ResourcesCapability:
    subscribe: bool = _json("subscribe", omit=_OMIT_EMPTY, default=False)
    list_changed: bool = _json("listChanged", omit=_OMIT_EMPTY, default=False)


@dataclass
class ServerInfo:
    name: str = _json("name")
    version: str = _json("version")


@dataclass
class ServerCapabilities:
    tools: ToolsCapability | None = _json("tools", omit=_OMIT_NONE, default=None)
    resources: ResourcesCapability | None = _json("resources", omit=_OMIT_NONE, default=None)


@dataclass
class InitializeResult:
    protocol_version: str = _json("protocolVersion")
    capabilities: ServerCapabilities = _json("capabilities")
    server_info: ServerInfo = _json("serverInfo")


@dataclass
class Tool:
    name: str = _json("name")
    description: str = _json("description", default="")
    input_schema: dict[str, Any] | None = _json("inputSchema", default=None)


@dataclass
class ListToolsResult:
    tools: list[Tool] = _json("tools", default_factory=list)


@dataclass
class Content:
    type: str = _json("type", default="text")
    text: str = _json("text", default="")


@dataclass
class CallToolResult:
    content: list[Content] = _json("content", default_factory=list)
    is_error: bool = _json("isError", omit=_OMIT_EMPTY, default=False)


@dataclass
class Resource:
    uri: str = _json("uri")
    name: str = _json("name")
    description: str = _json("description", omit=_OMIT_EMPTY, default="")
    mime_type: str = _json("mimeType", omit=_OMIT_EMPTY, default="")


@dataclass
class ListResourcesResult:
    resources: list[Resource] = _json("resources", default_factory=list)


@dataclass
class ResourceContent:
    uri: str = _json("uri")
    mime_type: str = _json("mimeType", omit=_OMIT_EMPTY, default="")
    text: str = _json("text", omit=_OMIT_EMPTY, default="")


@dataclass
class ReadResourceResult:
    contents: list[ResourceContent] = _json("contents", default_factory=list)