"""The transport an MCP server listens on."""

from __future__ import annotations

from enum import Enum


class McpServerType(str, Enum):
    """Server transport kind: HTTP or standard input/output."""

    HTTP = "http"
    STDIO = "stdio"

    @classmethod
    def parse(cls, value: str) -> McpServerType:
        """Return the server type named by ``value``; raise ValueError if unknown."""
        try:
            return _ALIASES[value]
        except (KeyError, TypeError):
            raise ValueError(
                f"invalid value: \"{value}\". Allowed values are 'http', 'stdio'"
            ) from None

    def __str__(self) -> str:
        return self.value


_ALIASES: dict[str, McpServerType] = {
    "http": McpServerType.HTTP,
    "stdio": McpServerType.STDIO,
}