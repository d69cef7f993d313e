"""MCPal: native desktop notifications for MCP clients."""

__version__ = "0.1.0"
