"""The MCP tools: directory trees, file content, listing, search and stats."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from arkmcp.mcp.options import Option, _extension
from arkmcp.mcp.types import CallToolResult, Content, Tool
from arkmcp.mcp.utils import (
    detect_language,
    generate_arklite_for_files,
    generate_directory_tree_json,
    get_project_stats,
    list_filtered_files,
    read_and_process_file,
    search_in_files,
)
from arkmcp.model.output_format import OutputFormat


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _boolean(description: str, default: bool) -> dict[str, Any]:
    return {"type": "boolean", "description": description, "default": default}


def _integer(description: str, default: int) -> dict[str, Any]:
    return {"type": "integer", "description": description, "default": default}


def _schema(properties: dict[str, Any], *required: str) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": list(required)}


_FILTER_PROPERTIES = {
    "includeExt": _string("Include only these extensions (comma-separated)"),
    "excludeExt": _string("Exclude these extensions (comma-separated)"),
    "excludeDir": _string("Exclude these directories (comma-separated)"),
}

_WALK_PROPERTIES = {
    "ignoreDotfiles": _boolean("Ignore dotfiles", False),
    "allowGitignore": _boolean("Respect .gitignore rules", True),
}


def _tool_definitions() -> list[Tool]:
    return [
        Tool(
            name="get_directory_tree",
            description="Get directory tree structure as JSON",
            input_schema=_schema({"path": _string("Directory path to scan")}, "path"),
        ),
        Tool(
            name="get_file_content",
            description="Get content of a single file with optional filtering",
            input_schema=_schema(
                {
                    "path": _string("File path to read"),
                    "maskSecrets": _boolean("Mask secrets in output", True),
                    "deleteComments": _boolean("Remove code comments", False),
                    "withLineNumbers": _boolean("Include line numbers", True),
                },
                "path",
            ),
        ),
        Tool(
            name="list_files",
            description="List files in directory with filtering options",
            input_schema=_schema(
                {
                    "path": _string("Directory path to scan"),
                    **_FILTER_PROPERTIES,
                    "patternRegex": _string("Include files matching this regex pattern"),
                    "excludeFileRegex": _string("Exclude files matching this regex pattern"),
                    "excludeDirRegex": _string(
                        "Exclude directories matching this regex pattern"
                    ),
                    **_WALK_PROPERTIES,
                    "skipNonUTF8": _boolean("Skip non-UTF8 files", False),
                },
                "path",
            ),
        ),
        Tool(
            name="search_in_files",
            description="Search for text within files",
            input_schema=_schema(
                {
                    "path": _string("Directory path to search in"),
                    "query": _string("Search query"),
                    "isRegex": _boolean("Treat query as regex", False),
                    **_FILTER_PROPERTIES,
                    **_WALK_PROPERTIES,
                    "maxResults": _integer("Maximum number of results", 100),
                },
                "path",
                "query",
            ),
        ),
        Tool(
            name="get_file_info",
            description="Get metadata information about a file",
            input_schema=_schema({"path": _string("File path to analyze")}, "path"),
        ),
        Tool(
            name="get_project_stats",
            description="Get statistics about a project directory",
            input_schema=_schema(
                {"path": _string("Project directory path"), **_WALK_PROPERTIES},
                "path",
            ),
        ),
        Tool(
            name="get_files_arklite",
            description="Get multiple files in arklite format",
            input_schema=_schema(
                {
                    "paths": {
                        "type": "array",
                        "description": "Array of file paths to include",
                        "items": {"type": "string"},
                    },
                    "maskSecrets": _boolean("Mask secrets in output", True),
                    "deleteComments": _boolean("Remove code comments", False),
                    "maxFiles": _integer("Maximum number of files to process", 10),
                },
                "paths",
            ),
        ),
    ]


def _text(text: str) -> CallToolResult:
    return CallToolResult(content=[Content(type="text", text=text)])


def _failure(exc: BaseException) -> CallToolResult:
    return CallToolResult(content=[Content(type="text", text=f"Error: {exc}")], is_error=True)


def _bool_arg(args: Mapping[str, Any], key: str) -> bool | None:
    value = args.get(key)
    return value if isinstance(value, bool) else None


def _str_arg(args: Mapping[str, Any], key: str) -> str | None:
    value = args.get(key)
    return value if isinstance(value, str) else None


def _int_arg(args: Mapping[str, Any], key: str, default: int) -> int:
    value = args.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


def _required_path(args: Mapping[str, Any]) -> str:
    path = _str_arg(args, "path")
    if path is None:
        raise ValueError("path parameter is required")
    return path


def _overrides(args: Mapping[str, Any], mapping: Mapping[str, str],
               getter: Callable[[Mapping[str, Any], str], Any]) -> dict[str, Any]:
    found = {}
    for key, attribute in mapping.items():
        value = getter(args, key)
        if value is not None:
            found[attribute] = value
    return found


def _rfc3339(timestamp: float) -> str:
    stamp = datetime.fromtimestamp(int(timestamp)).astimezone().isoformat()
    return stamp[:-6] + "Z" if stamp.endswith("+00:00") else stamp


class ToolsHandler:
    """Runs the MCP tools against files under ``root_dir``."""

    def __init__(self, root_dir: str, option: Option) -> None:
        self.root_dir = root_dir
        self.option = option

    def list_tools(self) -> list[Tool]:
        """Describe every available tool with its input schema."""
        return _tool_definitions()

    def call_tool(self, name: str, arguments: Mapping[str, Any] | None) -> CallToolResult:
        """Run the named tool.

        Raise ValueError for an unknown tool or missing arguments; failures
        while running the tool come back as a result marked as an error.
        """
        handlers = {
            "get_directory_tree": self._get_directory_tree,
            "get_file_content": self._get_file_content,
            "list_files": self._list_files,
            "search_in_files": self._search_in_files,
            "get_file_info": self._get_file_info,
            "get_project_stats": self._get_project_stats,
            "get_files_arklite": self._get_files_arklite,
        }
        handler = handlers.get(name)
        if handler is None:
            raise ValueError(f"unknown tool: {name}")
        return handler(arguments or {})

    def _resolve(self, path: str) -> str:
        return os.path.normpath(os.path.join(self.root_dir, path.lstrip("/\\")))

    def _option_with(self, **changes: Any) -> Option:
        return replace(self.option, **changes) if changes else self.option

    def _get_directory_tree(self, args: Mapping[str, Any]) -> CallToolResult:
        full_path = self._resolve(_required_path(args))
        try:
            return _text(generate_directory_tree_json(full_path))
        except (OSError, ValueError) as exc:
            return _failure(exc)

    def _get_file_content(self, args: Mapping[str, Any]) -> CallToolResult:
        full_path = self._resolve(_required_path(args))
        changes = _overrides(
            args,
            {
                "maskSecrets": "mask_secrets",
                "deleteComments": "delete_comments",
                "withLineNumbers": "with_line_number",
            },
            _bool_arg,
        )
        try:
            return _text(read_and_process_file(full_path, self._option_with(**changes)))
        except (OSError, ValueError) as exc:
            return _failure(exc)

    def _list_files(self, args: Mapping[str, Any]) -> CallToolResult:
        full_path = self._resolve(_required_path(args))
        changes = _overrides(
            args,
            {
                "includeExt": "include_ext",
                "excludeExt": "exclude_ext",
                "excludeDir": "exclude_dir",
                "patternRegex": "pattern_regex",
                "excludeFileRegex": "exclude_file_regex",
                "excludeDirRegex": "exclude_dir_regex",
            },
            _str_arg,
        )
        changes.update(
            _overrides(
                args,
                {
                    "ignoreDotfiles": "ignore_dotfile",
                    "allowGitignore": "allow_gitignore",
                    "skipNonUTF8": "skip_non_utf8",
                },
                _bool_arg,
            )
        )
        try:
            files = list_filtered_files(full_path, self._option_with(**changes))
        except (OSError, ValueError) as exc:
            return _failure(exc)
        return _text("\n".join(files))

    def _search_in_files(self, args: Mapping[str, Any]) -> CallToolResult:
        full_path = self._resolve(_required_path(args))
        query = _str_arg(args, "query")
        if query is None:
            raise ValueError("query parameter is required")
        is_regex = bool(_bool_arg(args, "isRegex"))
        max_results = _int_arg(args, "maxResults", 100)
        changes = _overrides(
            args,
            {
                "includeExt": "include_ext",
                "excludeExt": "exclude_ext",
                "excludeDir": "exclude_dir",
            },
            _str_arg,
        )
        changes.update(
            _overrides(
                args,
                {"ignoreDotfiles": "ignore_dotfile", "allowGitignore": "allow_gitignore"},
                _bool_arg,
            )
        )
        try:
            results = search_in_files(
                full_path, query, is_regex, max_results, self._option_with(**changes)
            )
        except (OSError, ValueError) as exc:
            return _failure(exc)
        return _text(results)

    def _get_file_info(self, args: Mapping[str, Any]) -> CallToolResult:
        path = _required_path(args)
        full_path = self._resolve(path)
        try:
            info = os.stat(full_path)
        except OSError as exc:
            return _failure(exc)
        file_info = {
            "path": path,
            "size": info.st_size,
            "modTime": _rfc3339(info.st_mtime),
            "isDir": os.path.isdir(full_path),
            "language": detect_language(full_path),
            "extension": _extension(full_path),
            "basename": os.path.basename(full_path) or full_path,
        }
        return _text(json.dumps(file_info, indent=2, sort_keys=True, ensure_ascii=False))

    def _get_project_stats(self, args: Mapping[str, Any]) -> CallToolResult:
        full_path = self._resolve(_required_path(args))
        changes = _overrides(
            args,
            {"ignoreDotfiles": "ignore_dotfile", "allowGitignore": "allow_gitignore"},
            _bool_arg,
        )
        try:
            stats = get_project_stats(full_path, self._option_with(**changes))
        except (OSError, ValueError) as exc:
            return _failure(exc)
        return _text(json.dumps(stats, indent=2, sort_keys=True, ensure_ascii=False))

    def _get_files_arklite(self, args: Mapping[str, Any]) -> CallToolResult:
        if "paths" not in args:
            raise ValueError("paths parameter is required")
        raw_paths = args["paths"]
        if not isinstance(raw_paths, list):
            raise ValueError("paths must be an array")
        paths = [item for item in raw_paths if isinstance(item, str)]
        max_files = _int_arg(args, "maxFiles", 10)
        paths = paths[: max(max_files, 0)]

        changes: dict[str, Any] = {"output_format": OutputFormat.ARKLITE}
        changes.update(
            _overrides(
                args,
                {"maskSecrets": "mask_secrets", "deleteComments": "delete_comments"},
                _bool_arg,
            )
        )
        full_paths = [self._resolve(path) for path in paths]
        try:
            content = generate_arklite_for_files(full_paths, self._option_with(**changes))
        except (OSError, ValueError) as exc:
            return _failure(exc)
        return _text(content)