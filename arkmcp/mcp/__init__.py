"""MCP message types, options, file helpers, tools, resources, transports and server."""