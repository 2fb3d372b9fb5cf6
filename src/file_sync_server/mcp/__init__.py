"""MCP server exposing the sync engine as tools over stdio."""
