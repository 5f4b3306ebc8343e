"""Billing provider REST client (Stripe-compatible form API)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.config import Settings, get_settings
from src.errors import BillingError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BillingSubscription:
    """Subset of a provider subscription this service caches."""

    id: str
    status: str
    price_id: str | None
    client_secret: str | None


def _parse_subscription(payload: dict[str, Any]) -> BillingSubscription:
    items = (payload.get("items") or {}).get("data") or []
    price_id = None
    if items:
        price = items[0].get("price") or {}
        price_id = price.get("id") if isinstance(price, dict) else str(price)

    client_secret = None
    latest_invoice = payload.get("latest_invoice")
    if isinstance(latest_invoice, dict):
        payment_intent = latest_invoice.get("payment_intent")
        if isinstance(payment_intent, dict):
            client_secret = payment_intent.get("client_secret")

    return BillingSubscription(
        id=str(payload["id"]),
        status=str(payload.get("status", "")),
        price_id=price_id,
        client_secret=client_secret,
    )


class BillingClient:
    """Create customers and subscriptions at the billing provider."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._timeout = httpx.Timeout(self._settings.billing_request_timeout_seconds)
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        data: dict[str, str] | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> dict[str, Any]:
        if not self._settings.billing_api_key:
            logger.warning("Billing API key not configured, refusing request")
            raise BillingError("Billing provider is not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self._settings.billing_api_base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Authorization": f"Bearer {self._settings.billing_api_key}"},
            ) as client:
                response = await client.request(method, path, data=data, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            message = "Billing provider rejected the request"
            try:
                error = e.response.json().get("error") or {}
                message = error.get("message") or message
            except ValueError:
                pass
            logger.error(
                "Billing HTTP error: %s %s -> %s", method, path, e.response.status_code
            )
            raise BillingError(message) from e
        except httpx.HTTPError as e:
            logger.error("Billing request failed: %s %s (%s)", method, path, e)
            raise BillingError() from e

        if not isinstance(payload, dict):
            raise BillingError("Billing provider returned an unexpected payload")
        return payload

    async def create_customer(self, *, email: str, name: str | None = None) -> str:
        data = {"email": email}
        if name:
            data["name"] = name
        payload = await self._request("POST", "customers", data=data)
        return str(payload["id"])

    async def create_subscription(
        self, *, customer_id: str, price_id: str
    ) -> BillingSubscription:
        payload = await self._request(
            "POST",
            "subscriptions",
            data={
                "customer": customer_id,
                "items[0][price]": price_id,
                "payment_behavior": "default_incomplete",
                "expand[]": "latest_invoice.payment_intent",
            },
        )
        return _parse_subscription(payload)

    async def retrieve_subscription(self, subscription_id: str) -> BillingSubscription:
        payload = await self._request(
            "GET",
            f"subscriptions/{subscription_id}",
            params=[("expand[]", "latest_invoice.payment_intent")],
        )
        return _parse_subscription(payload)
