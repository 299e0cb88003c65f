import json

import pytest

from arkmcp.mcp.options import Option
from arkmcp.mcp.tools import ToolsHandler

EXPECTED_TOOLS = [
    "get_directory_tree",
    "get_file_content",
    "list_files",
    "search_in_files",
    "get_file_info",
    "get_project_stats",
    "get_files_arklite",
]


@pytest.fixture
def handler(tmp_path):
    return ToolsHandler(str(tmp_path), Option())


def test_new_tools_handler_keeps_arguments():
    option = Option()
    handler = ToolsHandler("/test/path", option)
    assert handler.root_dir == "/test/path"
    assert handler.option is option


def test_list_tools(handler):
    tools = handler.list_tools()
    assert [tool.name for tool in tools] == EXPECTED_TOOLS
    for tool in tools:
        assert tool.description
        assert tool.input_schema["type"] == "object"
        assert isinstance(tool.input_schema["properties"], dict)
        assert tool.input_schema["properties"]


def test_search_schema_requires_path_and_query(handler):
    schemas = {tool.name: tool.input_schema for tool in handler.list_tools()}
    assert schemas["search_in_files"]["required"] == ["path", "query"]
    assert schemas["get_files_arklite"]["required"] == ["paths"]
    assert schemas["search_in_files"]["properties"]["maxResults"]["default"] == 100


def test_call_tool_unknown_tool(handler):
    with pytest.raises(ValueError, match="unknown tool"):
        handler.call_tool("unknown_tool", {})


def test_get_directory_tree(handler, tmp_path):
    (tmp_path / "file1.txt").write_text("content1")
    result = handler.call_tool("get_directory_tree", {"path": "."})
    assert result.is_error is False
    assert len(result.content) == 1
    text = result.content[0].text
    json.loads(text)
    assert "file1.txt" in text


def test_get_directory_tree_missing_directory(handler):
    result = handler.call_tool("get_directory_tree", {"path": "no_such_dir"})
    assert result.is_error is True
    assert result.content[0].text.startswith("Error:")


def test_get_file_info(handler, tmp_path):
    (tmp_path / "test_file_for_info.txt").write_text("test content")
    result = handler.call_tool("get_file_info", {"path": "test_file_for_info.txt"})
    assert result.is_error is False
    info = json.loads(result.content[0].text)
    for key in ("path", "size", "modTime", "isDir", "language", "extension", "basename"):
        assert key in info
    assert info["isDir"] is False
    assert info["size"] == 12
    assert info["language"] == "text"
    assert info["extension"] == ".txt"
    assert info["basename"] == "test_file_for_info.txt"
    assert info["path"] == "test_file_for_info.txt"


def test_get_file_info_missing_file(handler):
    result = handler.call_tool("get_file_info", {"path": "absent.txt"})
    assert result.is_error is True


def test_get_file_content_missing_path(handler):
    with pytest.raises(ValueError, match="path parameter is required"):
        handler.call_tool("get_file_content", {})


def test_get_file_content_options(handler, tmp_path):
    (tmp_path / "notes.txt").write_text("hello\nworld")
    plain = handler.call_tool(
        "get_file_content",
        {"path": "notes.txt", "withLineNumbers": False, "maskSecrets": False},
    )
    assert plain.content[0].text == "hello\nworld"
    numbered = handler.call_tool("get_file_content", {"path": "notes.txt"})
    assert numbered.content[0].text == "1: hello\n2: world"


def test_search_in_files_missing_query(handler):
    with pytest.raises(ValueError, match="query parameter is required"):
        handler.call_tool("search_in_files", {"path": "."})


def test_search_in_files_max_results(handler, tmp_path):
    (tmp_path / "a.txt").write_text("test one\ntest two\ntest three")
    result = handler.call_tool(
        "search_in_files", {"path": ".", "query": "test", "maxResults": 1}
    )
    assert result.content[0].text == "a.txt:1:test one"


def test_search_in_files_invalid_regex(handler, tmp_path):
    (tmp_path / "a.txt").write_text("x")
    result = handler.call_tool(
        "search_in_files", {"path": ".", "query": "(", "isRegex": True}
    )
    assert result.is_error is True


def test_list_files_include_ext(handler, tmp_path):
    for name in ("a.go", "b.go", "c.py"):
        (tmp_path / name).write_text("x")
    result = handler.call_tool("list_files", {"path": ".", "includeExt": "go"})
    assert result.content[0].text == "a.go\nb.go"


def test_get_files_arklite(handler, tmp_path):
    (tmp_path / "test1.txt").write_text("content1")
    (tmp_path / "test2.txt").write_text("content2")
    result = handler.call_tool("get_files_arklite", {"paths": ["test1.txt", "test2.txt"]})
    assert result.is_error is False
    content = result.content[0].text
    assert "# Arklite Format:" in content
    assert "## File Dump" in content
    assert "content1" in content
    assert "content2" in content


def test_get_files_arklite_max_files(handler, tmp_path):
    (tmp_path / "test1.txt").write_text("content1")
    (tmp_path / "test2.txt").write_text("content2")
    result = handler.call_tool(
        "get_files_arklite", {"paths": ["test1.txt", "test2.txt"], "maxFiles": 1}
    )
    content = result.content[0].text
    assert content.count("\n@") == 1
    assert "content2" not in content


def test_get_files_arklite_invalid_paths(handler):
    with pytest.raises(ValueError, match="paths must be an array"):
        handler.call_tool("get_files_arklite", {"paths": "not_an_array"})


def test_get_files_arklite_missing_paths(handler):
    with pytest.raises(ValueError, match="paths parameter is required"):
        handler.call_tool("get_files_arklite", {})


def test_get_project_stats(handler, tmp_path):
    (tmp_path / "main.go").write_text("package main")
    (tmp_path / "test.py").write_text("print('hello')")
    result = handler.call_tool("get_project_stats", {"path": "."})
    assert result.is_error is False
    stats = json.loads(result.content[0].text)
    for key in ("totalFiles", "totalDirectories", "totalSize", "languageStats", "extensionStats"):
        assert key in stats
    assert stats["totalFiles"] == 2
    assert stats["languageStats"] == {"go": 1, "python": 1}
    assert stats["extensionStats"] == {".go": 1, ".py": 1}