"""MCP resources: single files and directory trees addressed by URI."""

from __future__ import annotations

from arkmcp.mcp.options import Option
from arkmcp.mcp.tools import ToolsHandler
from arkmcp.mcp.types import ReadResourceResult, Resource, ResourceContent

FILE_SCHEME = "file://"
DIRECTORY_SCHEME = "directory://"


class ResourcesHandler:
    """Serves ``file://`` and ``directory://`` resources under ``root_dir``."""

    def __init__(self, root_dir: str, option: Option) -> None:
        self.root_dir = root_dir
        self.option = option

    def list_resources(self) -> list[Resource]:
        """Describe the resource schemes this handler understands."""
        return [
            Resource(
                uri=FILE_SCHEME,
                name="File Access",
                description="Access individual files using file:// scheme",
                mime_type="text/plain",
            ),
            Resource(
                uri=DIRECTORY_SCHEME,
                name="Directory Access",
                description="Access directory information using directory:// scheme",
                mime_type="application/json",
            ),
        ]

    def read_resource(self, uri: str) -> ReadResourceResult:
        """Read the resource named by ``uri``; raise ValueError on failure."""
        if uri.startswith(FILE_SCHEME):
            path = uri[len(FILE_SCHEME):]
            if not path:
                raise ValueError("file path is required")
            return self._read(uri, "get_file_content", path, "text/plain", "file")
        if uri.startswith(DIRECTORY_SCHEME):
            path = uri[len(DIRECTORY_SCHEME):] or "."
            return self._read(
                uri, "get_directory_tree", path, "application/json", "directory"
            )
        raise ValueError(f"unsupported resource URI scheme: {uri}")

    def _read(self, uri: str, tool: str, path: str, mime_type: str,
              what: str) -> ReadResourceResult:
        tools = ToolsHandler(self.root_dir, self.option)
        result = tools.call_tool(tool, {"path": path})
        text = result.content[0].text
        if result.is_error:
            raise ValueError(f"error reading {what}: {text}")
        return ReadResourceResult(
            contents=[ResourceContent(uri=uri, mime_type=mime_type, text=text)]
        )