"""mixrunner - editor integration for Elixir's mix build tool.

Locates mix project roots (nearest or umbrella), lists the tasks reported by
``mix help``, and runs compiles, tasks, and interactive shells in the right
directory. Exposed as a CLI and as an MCP server.
"""

__version__ = "0.1.0"
