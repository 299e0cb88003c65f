import json

import pytest

from arkmcp.mcp.types import (
    CallToolResult,
    Content,
    ErrorCode,
    InitializeResult,
    ListResourcesResult,
    ListToolsResult,
    MCPError,
    MCPRequest,
    MCPResponse,
    ReadResourceResult,
    Resource,
    ResourceContent,
    ResourcesCapability,
    ServerCapabilities,
    ServerInfo,
    Tool,
    ToolsCapability,
    to_jsonable,
)


def test_request_json_round_trip():
    request = MCPRequest(
        jsonrpc="2.0",
        id="test-id",
        method="test/method",
        params={"param1": "value1", "param2": 42},
    )
    data = json.dumps(request.to_dict())
    restored = MCPRequest.from_dict(json.loads(data))
    assert restored.jsonrpc == request.jsonrpc
    assert restored.method == request.method
    assert restored.id == "test-id"
    assert restored.params == {"param1": "value1", "param2": 42}


def test_response_json_round_trip():
    response = MCPResponse(jsonrpc="2.0", id="test-id", result="test-result")
    data = json.dumps(response.to_dict())
    restored = MCPResponse.from_dict(json.loads(data))
    assert restored.jsonrpc == response.jsonrpc
    assert restored.id == "test-id"
    assert restored.result == "test-result"
    assert restored.error is None


def test_request_omits_missing_params():
    request = MCPRequest(jsonrpc="2.0", id=1, method="tools/list")
    assert request.to_dict() == {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}


def test_response_keeps_null_id_and_omits_result():
    response = MCPResponse(
        id=None,
        error=MCPError(code=ErrorCode.PARSE_ERROR, message="Parse error", data="bad"),
    )
    assert response.to_dict() == {
        "jsonrpc": "2.0",
        "id": None,
        "error": {"code": -32700, "message": "Parse error", "data": "bad"},
    }


def test_response_error_round_trip():
    response = MCPResponse(
        id=7, error=MCPError(code=ErrorCode.METHOD_NOT_FOUND, message="Method not found: x")
    )
    restored = MCPResponse.from_dict(json.loads(json.dumps(response.to_dict())))
    assert restored.error == MCPError(code=-32601, message="Method not found: x")


@pytest.mark.parametrize(
    ("code", "number"),
    [
        (ErrorCode.PARSE_ERROR, -32700),
        (ErrorCode.INVALID_REQUEST, -32600),
        (ErrorCode.METHOD_NOT_FOUND, -32601),
        (ErrorCode.INVALID_PARAMS, -32602),
        (ErrorCode.INTERNAL_ERROR, -32603),
    ],
)
def test_error_codes_serialise_as_numbers(code, number):
    response = MCPResponse(id=1, error=MCPError(code=code, message="m"))
    encoded = json.loads(json.dumps(response.to_dict()))
    assert encoded["error"]["code"] == number


@pytest.mark.parametrize(
    "payload",
    [[1, 2], "text", {"jsonrpc": 2, "method": "x"}, {"jsonrpc": "2.0", "method": 5}],
)
def test_request_from_dict_rejects_malformed(payload):
    with pytest.raises(ValueError):
        MCPRequest.from_dict(payload)


def test_response_from_dict_rejects_bad_error():
    with pytest.raises(ValueError):
        MCPResponse.from_dict({"jsonrpc": "2.0", "id": 1, "error": {"code": "x"}})


def test_initialize_result_shape():
    result = InitializeResult(
        protocol_version="2024-11-05",
        capabilities=ServerCapabilities(
            tools=ToolsCapability(), resources=ResourcesCapability()
        ),
        server_info=ServerInfo(name="ark-mcp-server", version="0.1.0"),
    )
    assert to_jsonable(result) == {
        "protocolVersion": "2024-11-05",
        "capabilities": {"tools": {}, "resources": {}},
        "serverInfo": {"name": "ark-mcp-server", "version": "0.1.0"},
    }


def test_call_tool_result_omits_false_is_error():
    ok = CallToolResult(content=[Content(type="text", text="hi")])
    failed = CallToolResult(content=[Content(type="text", text="Error: x")], is_error=True)
    assert to_jsonable(ok) == {"content": [{"type": "text", "text": "hi"}]}
    assert to_jsonable(failed) == {
        "content": [{"type": "text", "text": "Error: x"}],
        "isError": True,
    }


def test_tool_and_list_shapes():
    tools = ListToolsResult(tools=[Tool(name="t", description="d", input_schema={"type": "object"})])
    assert to_jsonable(tools) == {
        "tools": [{"name": "t", "description": "d", "inputSchema": {"type": "object"}}]
    }


def test_resource_shapes_omit_empty():
    listing = ListResourcesResult(resources=[Resource(uri="file://", name="File Access")])
    assert to_jsonable(listing) == {"resources": [{"uri": "file://", "name": "File Access"}]}
    read = ReadResourceResult(
        contents=[ResourceContent(uri="file://a", mime_type="text/plain", text="body")]
    )
    assert to_jsonable(read) == {
        "contents": [{"uri": "file://a", "mimeType": "text/plain", "text": "body"}]
    }


def test_response_with_nested_result_serialises():
    response = MCPResponse(id="1", result=ListToolsResult(tools=[]))
    assert json.loads(json.dumps(response.to_dict())) == {
        "jsonrpc": "2.0",
        "id": "1",
        "result": {"tools": []},
    }