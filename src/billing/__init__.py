"""Billing provider integration."""

from src.billing.client import BillingClient, BillingSubscription

__all__ = ["BillingClient", "BillingSubscription"]
