"""MCP tools for property search."""

from decimal import Decimal

from mcp.server.fastmcp import FastMCP

from src.db.session import Database
from src.errors import EstateHubError
from src.schemas.listing import ListingSearchCriteria
from src.services.listing_service import ListingService

EMPTY_RESULTS_MESSAGE = "No active properties match these criteria."


def register_listing_tools(mcp: FastMCP, database: Database) -> None:
    """Register listing-related tools on a FastMCP server."""

    @mcp.tool(name="search_properties")
    async def search_properties(
        location: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        property_type: str | None = None,
        min_bedrooms: int | None = None,
        min_bathrooms: int | None = None,
        features: list[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, object]:
        query: dict[str, object] = {
            "location": location,
            "minPrice": str(min_price) if min_price is not None else None,
            "maxPrice": str(max_price) if max_price is not None else None,
            "propertyType": property_type,
            "minBedrooms": min_bedrooms,
            "minBathrooms": min_bathrooms,
            "features": features or [],
            "limit": limit,
            "offset": offset,
        }
        try:
            criteria = ListingSearchCriteria.from_query(query)
            async with database.session() as session:
                service = ListingService(session)
                results = await service.search_listings(criteria)
        except EstateHubError as exc:
            return {"query": query, "success": False, **exc.to_payload()}

        result: dict[str, object] = {
            "query": query,
            "count": len(results),
            "items": [item.model_dump(mode="json", by_alias=True) for item in results],
            "success": True,
        }
        if result["count"] == 0:
            result["message"] = EMPTY_RESULTS_MESSAGE
        return result

    @mcp.tool(name="get_property")
    async def get_property(property_id: int) -> dict[str, object]:
        try:
            async with database.session() as session:
                listing = await ListingService(session).get_listing(property_id)
        except EstateHubError as exc:
            return {"property_id": property_id, "success": False, **exc.to_payload()}

        return {
            "property_id": property_id,
            "item": listing.model_dump(mode="json", by_alias=True),
            "success": True,
        }
