"""MCP server package for mixrunner."""
