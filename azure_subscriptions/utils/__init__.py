"""
Utility package for the Azure Subscriptions service
"""
from .logger import setup_logger, get_logger
from .config import config, ConfigManager, AzureConfig, AppConfig
from .models import SubscriptionRecord, SubscriptionOption
from .subscription_cache import SubscriptionCache, CacheEntry, make_cache_key
from .error_handlers import (
    SubscriptionServiceError,
    ConfigurationError,
    UpstreamUnavailable,
    UpstreamCallFailure,
    handle_api_errors,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "config",
    "ConfigManager",
    "AzureConfig",
    "AppConfig",
    "SubscriptionRecord",
    "SubscriptionOption",
    "SubscriptionCache",
    "CacheEntry",
    "make_cache_key",
    "SubscriptionServiceError",
    "ConfigurationError",
    "UpstreamUnavailable",
    "UpstreamCallFailure",
    "handle_api_errors",
]
