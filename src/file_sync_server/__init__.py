"""Path-mapping file synchronization engine with MCP and CLI front ends."""

__version__ = "0.3.0"
