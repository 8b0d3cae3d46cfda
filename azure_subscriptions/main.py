"""
Azure Subscriptions service - FastAPI application

Run locally with:
    uvicorn azure_subscriptions.main:app --reload
"""
from typing import Optional

from fastapi import FastAPI

from .api.subscriptions import router as subscriptions_router
from .utils import config, get_logger
from .utils.subscription_resolver import SubscriptionResolver

logger = get_logger(__name__, config.app.log_level)


def create_app(resolver: Optional[SubscriptionResolver] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        resolver: Resolver to serve from. When *None* one is built from the
            global configuration; a missing setting leaves it unavailable
            rather than failing startup.
    """
    application = FastAPI(
        title=config.app.title,
        version=config.app.version
    )

    for key, status in config.get_environment_summary().items():
        logger.info("%s: %s", key, status)

    application.state.subscription_resolver = resolver or SubscriptionResolver()
    application.include_router(subscriptions_router)

    logger.info("Azure Subscriptions plugin initialized")
    return application


app = create_app()
