"""JSON routes for the public catalogue and the agent dashboard."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import get_current_agent
from src.billing.client import BillingClient
from src.db.session import get_db_session
from src.models.user import User
from src.schemas.inquiry import InquiryCreate, InquiryOut
from src.schemas.listing import (
    ListingCreate,
    ListingOut,
    ListingSearchCriteria,
    ListingUpdate,
    ListingWithAgentOut,
)
from src.schemas.user import AgentAccountOut, SubscriptionCreate, SubscriptionOut
from src.services import (
    AgentService,
    InquiryService,
    ListingService,
    SubscriptionService,
)
from src.taskiq_app.tasks import enqueue_sync_agent_subscription

router = APIRouter(prefix="/api", tags=["api"])


def get_billing_client() -> BillingClient:
    """FastAPI dependency for the billing provider client."""

    return BillingClient()


@router.get("/properties", response_model=list[ListingWithAgentOut])
async def list_properties(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> list[ListingWithAgentOut]:
    """Search active listings."""

    params: dict[str, object] = dict(request.query_params)
    if "features" in request.query_params:
        params["features"] = request.query_params.getlist("features")
    criteria = ListingSearchCriteria.from_query(params)
    return await ListingService(session).search_listings(criteria)


@router.get("/properties/{property_id}", response_model=ListingWithAgentOut)
async def get_property(
    property_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> ListingWithAgentOut:
    return await ListingService(session).get_listing(property_id)


@router.post("/properties/{property_id}/inquire", response_model=InquiryOut)
async def submit_inquiry(
    property_id: int,
    payload: InquiryCreate,
    session: AsyncSession = Depends(get_db_session),
) -> InquiryOut:
    """Record a visitor's inquiry for the listing's agent."""

    return await InquiryService(session).create_inquiry(property_id, payload)


@router.get("/auth/user", response_model=AgentAccountOut)
async def current_user(agent: User = Depends(get_current_agent)) -> AgentAccountOut:
    return AgentService.account(agent)


@router.get("/agent/properties", response_model=list[ListingOut])
async def list_my_properties(
    agent: User = Depends(get_current_agent),
    session: AsyncSession = Depends(get_db_session),
) -> list[ListingOut]:
    return await ListingService(session).list_agent_listings(agent.id)


@router.post("/agent/properties", response_model=ListingOut)
async def create_property(
    payload: ListingCreate,
    agent: User = Depends(get_current_agent),
    session: AsyncSession = Depends(get_db_session),
) -> ListingOut:
    return await ListingService(session).create_listing(agent.id, payload)


@router.put("/agent/properties/{property_id}", response_model=ListingOut)
async def update_property(
    property_id: int,
    payload: ListingUpdate,
    agent: User = Depends(get_current_agent),
    session: AsyncSession = Depends(get_db_session),
) -> ListingOut:
    return await ListingService(session).update_listing(agent.id, property_id, payload)


@router.delete("/agent/properties/{property_id}")
async def delete_property(
    property_id: int,
    agent: User = Depends(get_current_agent),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, str]:
    await ListingService(session).delete_listing(agent.id, property_id)
    return {"message": "Property deleted successfully"}


@router.get("/agent/inquiries", response_model=list[InquiryOut])
async def list_my_inquiries(
    agent: User = Depends(get_current_agent),
    session: AsyncSession = Depends(get_db_session),
) -> list[InquiryOut]:
    return await InquiryService(session).list_agent_inquiries(agent.id)


@router.post("/create-subscription", response_model=SubscriptionOut)
async def create_subscription(
    payload: SubscriptionCreate,
    agent: User = Depends(get_current_agent),
    session: AsyncSession = Depends(get_db_session),
    billing: BillingClient = Depends(get_billing_client),
) -> SubscriptionOut:
    """Start (or resume) the agent's subscription checkout."""

    service = SubscriptionService(session, billing)
    result = await service.start_subscription(agent, payload.plan)
    await enqueue_sync_agent_subscription(agent.id)
    return result
