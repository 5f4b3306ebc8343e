"""MCP server exposing read-only property search to assistants."""

from collections.abc import Callable

from mcp.server.fastmcp import FastMCP

from src.config import get_settings
from src.config.settings import normalize_tool_names
from src.db.session import Database
from src.mcp_server.tools.listing import register_listing_tools

ToolRegistrar = Callable[[FastMCP, Database], None]

TOOL_REGISTRATIONS: tuple[tuple[ToolRegistrar, tuple[str, ...]], ...] = (
    (register_listing_tools, ("search_properties", "get_property")),
)

VALID_MCP_TOOL_NAMES = frozenset(
    name for _, names in TOOL_REGISTRATIONS for name in names
)


def _check_allowlist(allowlist: set[str]) -> None:
    unknown = sorted(allowlist - VALID_MCP_TOOL_NAMES)
    if unknown:
        raise ValueError(
            f"Invalid MCP_ENABLED_TOOLS entries: {', '.join(unknown)}. "
            f"Valid values are: {', '.join(sorted(VALID_MCP_TOOL_NAMES))}"
        )


def create_mcp_server(
    database: Database, enabled_tools: list[str] | None = None
) -> FastMCP:
    """Build the server around ``database``.

    ``enabled_tools`` overrides ``MCP_ENABLED_TOOLS``; an empty allow-list
    keeps every tool, and unknown names abort startup.
    """

    server = FastMCP(get_settings().app_name, json_response=True)
    for register_tools, _ in TOOL_REGISTRATIONS:
        register_tools(server, database)

    configured = (
        get_settings().mcp_enabled_tools if enabled_tools is None else enabled_tools
    )
    allowlist = set(normalize_tool_names(configured))
    if not allowlist:
        return server

    _check_allowlist(allowlist)
    for tool_name in sorted(VALID_MCP_TOOL_NAMES - allowlist):
        server.remove_tool(tool_name)
    return server


def main() -> None:
    """Run MCP server via stdio transport."""

    create_mcp_server(Database.from_settings()).run()


if __name__ == "__main__":
    main()
