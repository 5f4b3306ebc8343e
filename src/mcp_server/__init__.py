"""MCP server for assistant access to the property catalogue."""
