"""MCP server for exploring and dumping project directories, with option types and a terminal spinner."""

__version__ = "0.1.0"