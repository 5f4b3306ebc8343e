"""MCP tools package."""

from src.mcp_server.tools.listing import register_listing_tools

__all__ = ["register_listing_tools"]
