"""Configuration package."""

from src.config.settings import VALID_SUBSCRIPTION_PLANS, Settings, get_settings

__all__ = ["VALID_SUBSCRIPTION_PLANS", "Settings", "get_settings"]
