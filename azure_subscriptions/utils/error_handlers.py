"""
Error types for subscription resolution and the route error guard
"""
import functools
import logging
from typing import Any, Callable

from fastapi import HTTPException
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


class SubscriptionServiceError(Exception):
    """Base class for subscription resolution failures"""


class ConfigurationError(SubscriptionServiceError):
    """A required setting is missing or blank"""


class UpstreamUnavailable(SubscriptionServiceError):
    """The Azure credential or ARM clients could not be constructed"""


class UpstreamCallFailure(SubscriptionServiceError):
    """An Azure listing or lookup call failed at runtime"""


def handle_api_errors(context: str = "", log_errors: bool = True):
    """
    Decorator turning unexpected endpoint failures into a bare 500

    Args:
        context: Descriptive context for the operation (e.g., "Subscription listing")
        log_errors: Whether to log errors (default True)

    Usage:
        @router.get("/subscriptions")
        @handle_api_errors("Subscription listing")
        async def list_subscriptions():
            return await resolver.resolve_as_options()
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                if log_errors:
                    logger.error(
                        f"❌ {context} error: {e}",
                        exc_info=True,
                        extra={
                            "context": context,
                            "error_type": type(e).__name__,
                            "function": func.__name__
                        }
                    )
                return PlainTextResponse("Internal Server Error", status_code=500)

        return async_wrapper

    return decorator
