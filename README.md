# arkmcp

`arkmcp` is a small Model Context Protocol (MCP) server. It lets a client
look inside a project directory. It speaks JSON-RPC 2.0 in one of two ways:
one message per line over standard input and output, or over HTTP on
`localhost`. It uses only the standard library.

## Installing

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## Running the server

    arkmcp [ROOT_DIR] [options]

`ROOT_DIR` defaults to `.`. Each path that a tool or a resource receives is
taken relative to it. Log messages go to standard error.

| Option | Default | Meaning |
| --- | --- | --- |
| `-t`, `--mcp-server-type` | `stdio` | `stdio` or `http` |
| `-p`, `--http-port` | `8522` | port for the HTTP transport |
| `--mask-secrets` | `on` | mask secret-looking values in file content |
| `--with-line-number` | `on` | prefix each line of file content with `N: ` |
| `--ignore-dotfile` | `off` | skip files and directories whose names start with `.` |
| `--allow-gitignore` | `on` | apply the rules in the root directory's `.gitignore` |
| `--skip-non-utf8` | off | skip files that hold NUL bytes or are not valid UTF-8 |
| `--delete-comments` | off | remove code comments from file content |
| `--include-ext`, `--exclude-ext` | | comma-separated extensions |
| `--exclude-dir` | | comma-separated directory names |
| `--pattern-regex`, `--exclude-file-regex`, `--exclude-dir-regex` | | regular expressions matched against names |

On/off options accept `on`, `ON`, `yes`, `YES` and `y`, or `off`, `OFF`,
`no`, `NO` and `n`.

The server answers five MCP methods: `initialize`, `tools/list`,
`tools/call`, `resources/list` and `resources/read`. Any other method gets a
"Method not found" error (code -32601). Input that is not valid JSON gets a
parse error (code -32700).

The HTTP transport has these endpoints:

- `POST /mcp`: the JSON-RPC endpoint. It answers `OPTIONS` with CORS
  headers and answers other methods with 405.
- `GET /health`: returns `{"status":"ok","server":"ark-mcp-server"}`.
- `GET /`: a short HTML page that describes the endpoints.

## Tools

| Tool | What it returns |
| --- | --- |
| `get_directory_tree` | the directory tree as indented JSON |
| `get_file_content` | one file; takes `maskSecrets`, `deleteComments` and `withLineNumbers` |
| `list_files` | file paths relative to `path`, with the filters listed above |
| `search_in_files` | `file:line:text` matches for a plain or regex query, up to `maxResults` (default 100) |
| `get_file_info` | `path`, `size`, `modTime`, `isDir`, `language`, `extension` and `basename` as JSON |
| `get_project_stats` | `totalFiles`, `totalDirectories`, `totalSize`, `languageStats` and `extensionStats` as JSON |
| `get_files_arklite` | up to `maxFiles` (default 10) files in arklite form: one line per file, with newlines written as `␤` |

A tool that fails while it runs returns a result that has `isError` set. An
unknown tool, or a required argument that is missing, gives a JSON-RPC error
instead.

## Resources

- `file://<path>`: the content of a file, as `text/plain`.
- `directory://<path>`: the directory tree, as `application/json`. An empty
  path means the root.

## Using it as a library

This example sends one request to the server:

```python
from arkmcp.mcp.server import MCPServer, ServeOption
from arkmcp.mcp.types import MCPRequest

server = MCPServer(".", ServeOption())
response = server.process_request(MCPRequest(jsonrpc="2.0", id="1", method="tools/list"))
print([tool.name for tool in response.result.tools])
```

Other entry points:

- `arkmcp.mcp.options.Option` holds the filter and processing settings.
  `Option.allows(path, is_dir)` tells whether a path passes the filters.
- `arkmcp.mcp.tools.ToolsHandler(root_dir, option).call_tool(name, arguments)`
  runs a tool.
- `arkmcp.mcp.resources.ResourcesHandler(root_dir, option).read_resource(uri)`
  reads a resource.
- `arkmcp.mcp.utils` provides `detect_language`, `read_and_process_file`,
  `list_filtered_files`, `search_in_files`, `get_project_stats`,
  `generate_directory_tree_json` and `generate_arklite_for_files`.
- `arkmcp.mcp.transport` provides `StdioTransport`, which can take its own
  input and output streams, and `HttpTransport`.
- `arkmcp.mcp.types` provides the message dataclasses and `to_jsonable`.
- `arkmcp.model` provides `OnOffSwitch`, `OutputFormat` and `McpServerType`,
  each with a `parse` class method.
- `arkmcp.spinner.Spinner` draws a terminal spinner from a background thread.
  It can also be used as a context manager.

## What it does not do

- It has no command that writes a whole project into one output file. The
  only command is the MCP server. `OutputFormat` names markdown, plain text
  and XML, but the only rendering the package produces is arklite output for
  the files that `get_files_arklite` is given.
- It reads only the `.gitignore` in the directory being scanned. It does not
  read `.gitignore` files in subdirectories, and it does not read global
  ignore files.
- Secret masking and comment removal work by pattern matching. They are not
  full parsers.