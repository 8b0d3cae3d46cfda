"""
Subscription API Endpoints

Endpoints:
    GET /subscriptions - Subscriptions under the root management group as select options
    GET /health - Liveness check with resolver availability

Usage:
    from azure_subscriptions.api.subscriptions import router
    app.include_router(router)
"""
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from ..utils import config, get_logger, handle_api_errors
from ..utils.models import SubscriptionOption
from ..utils.subscription_resolver import SubscriptionResolver

logger = get_logger(__name__)

router = APIRouter(tags=["Azure Subscriptions"])


def get_subscription_resolver(request: Request) -> SubscriptionResolver:
    """Resolver created at app startup, stored on ``app.state``"""
    return request.app.state.subscription_resolver


@router.get("/subscriptions", response_model=List[SubscriptionOption])
@handle_api_errors("Subscription listing")
async def list_subscriptions(
    resolver: SubscriptionResolver = Depends(get_subscription_resolver),
) -> List[SubscriptionOption]:
    """
    List the subscriptions under the configured management group.

    Returns a plain JSON array of ``{"label": <display name>, "value": <subscription id>}``
    suitable for a select box. An unconfigured service or an Azure outage yields
    an empty (or stale) list rather than an error.
    """
    return await resolver.resolve_as_options()


@router.get("/health")
async def health_check(
    resolver: SubscriptionResolver = Depends(get_subscription_resolver),
) -> Dict[str, Any]:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.app.version,
        "resolver_available": resolver.is_available,
    }
