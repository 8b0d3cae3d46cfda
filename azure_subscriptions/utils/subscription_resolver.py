"""
Subscription Resolver

Resolves the Azure subscriptions reachable under the configured root
management group and caches the result for an hour.

Resolution walks one level of the management group tree:

- list the direct child management groups of the root
  (the root itself is queried when it has no child groups)
- list the subscriptions registered under each of those groups
- look up every subscription's display name

Failures never reach the caller. A broken configuration or client setup makes
the resolver permanently unavailable (every call returns an empty list); a
failed refresh falls back to the last cached result, even an expired one.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

from azure.identity import ClientSecretCredential
from azure.mgmt.managementgroups import ManagementGroupsAPI
from azure.mgmt.resource import SubscriptionClient

from .config import AzureConfig, config
from .error_handlers import ConfigurationError, UpstreamCallFailure, UpstreamUnavailable
from .logger import get_logger
from .models import SubscriptionOption, SubscriptionRecord
from .subscription_cache import SubscriptionCache, make_cache_key

logger = get_logger(__name__)

MANAGEMENT_GROUP_TYPE = "Microsoft.Management/managementGroups"


def _subscription_id_from_resource_id(resource_id: Optional[str]) -> Optional[str]:
    """'/providers/.../subscriptions/<guid>' -> '<guid>'"""
    if not resource_id:
        return None
    return resource_id.split("/")[-1] or None


class SubscriptionResolver:
    """Lists the subscriptions under a management group, with caching.

    Usage::

        resolver = SubscriptionResolver()
        options = await resolver.resolve_as_options()
    """

    def __init__(
        self,
        azure_config: Optional[AzureConfig] = None,
        logger: Optional[logging.Logger] = None,
        cache: Optional[SubscriptionCache] = None,
    ):
        self._azure_config = azure_config or config.azure
        self._logger = logger if logger is not None else get_logger(__name__)
        self._cache = cache or SubscriptionCache(ttl_seconds=config.app.cache_ttl_seconds)

        self._credential: Optional[ClientSecretCredential] = None
        self._management_groups_client: Optional[ManagementGroupsAPI] = None
        self._subscription_client: Optional[SubscriptionClient] = None

        self._initialize_clients()

    # -- setup ---------------------------------------------------------------

    def _initialize_clients(self) -> None:
        try:
            self._check_settings()
            self._build_clients()
        except ConfigurationError as exc:
            self._logger.warning(
                "Azure clients not initialized: %s", exc,
                extra={"missing": self._azure_config.missing_settings()},
            )
        except UpstreamUnavailable as exc:
            self._logger.error(
                "%s", exc,
                extra={"error": str(exc.__cause__)},
            )
            self._credential = None
            self._management_groups_client = None
            self._subscription_client = None

    def _check_settings(self) -> None:
        missing = self._azure_config.missing_settings()
        if missing:
            raise ConfigurationError(f"missing settings: {', '.join(missing)}")

    def _build_clients(self) -> None:
        try:
            self._credential = ClientSecretCredential(
                tenant_id=self._azure_config.tenant_id.strip(),
                client_id=self._azure_config.client_id.strip(),
                client_secret=self._azure_config.client_secret.strip(),
            )
            self._management_groups_client = ManagementGroupsAPI(self._credential)
            self._subscription_client = SubscriptionClient(self._credential)
        except Exception as exc:
            raise UpstreamUnavailable(f"Error initializing Azure ARM clients: {exc}") from exc
        self._logger.info("Azure ARM clients initialized successfully.")

    @property
    def is_available(self) -> bool:
        return self._management_groups_client is not None and self._subscription_client is not None

    @property
    def management_group_id(self) -> str:
        return (self._azure_config.management_group_id or "").strip()

    @property
    def cache(self) -> SubscriptionCache:
        return self._cache

    # -- public API ------------------------------------------------------------

    async def resolve(self, group_id: Optional[str] = None) -> List[SubscriptionRecord]:
        """Return the subscriptions under *group_id* (default: the configured root).

        Never raises. Serves from cache while the entry is fresh; on a failed
        refresh returns the previous entry's data, or an empty list.
        """
        if not self.is_available:
            self._logger.warning("Azure clients not initialized. Cannot fetch subscriptions.")
            return []

        group_id = (group_id if group_id is not None else self.management_group_id).strip()
        cache_key = make_cache_key(group_id)
        cached = self._cache.get(cache_key)
        now = self._cache.now()

        if cached is not None and self._cache.is_fresh(cached, now):
            self._logger.info("Returning cached Azure subscriptions for management group: %s", group_id)
            return list(cached.data)

        try:
            subscriptions = await self._process_subscriptions(group_id)
        except Exception as exc:
            self._logger.error(
                "Failed to fetch Azure subscriptions: %s", exc,
                extra={"error": str(exc)},
            )
            return list(cached.data) if cached is not None else []

        self._cache.set(cache_key, subscriptions, timestamp=now)
        return subscriptions

    async def resolve_as_options(self) -> List[SubscriptionOption]:
        subscriptions = await self.resolve()
        return [subscription.to_option() for subscription in subscriptions]

    def get_status(self) -> Dict[str, Any]:
        return {
            "available": self.is_available,
            "management_group_id": self.management_group_id,
            "cache": self._cache.get_stats(),
        }

    # -- upstream listings -----------------------------------------------------

    def _iter_child_group_names(self, group_id: str) -> Iterator[str]:
        """Names of the direct child management groups of *group_id*."""
        group = self._management_groups_client.management_groups.get(group_id, expand="children")
        for child in getattr(group, "children", None) or []:
            if child.type == MANAGEMENT_GROUP_TYPE and child.name:
                yield child.name

    def _iter_subscription_ids(self, group_id: str) -> Iterator[str]:
        """Subscription ids registered directly under *group_id*, page by page."""
        pages = self._management_groups_client.management_group_subscriptions.get_subscriptions_under_management_group(
            group_id
        )
        for subscription in pages:
            subscription_id = _subscription_id_from_resource_id(getattr(subscription, "id", None))
            if subscription_id:
                yield subscription_id

    def _drain_subscription_ids(self, group_id: str, into: List[str]) -> None:
        # Appends one by one so ids read before a paging failure are kept
        for subscription_id in self._iter_subscription_ids(group_id):
            into.append(subscription_id)

    async def _call_upstream(self, description: str, func: Callable[[], Any]) -> Any:
        """Run a blocking SDK call off the event loop, classifying failures."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, func)
        except Exception as exc:
            raise UpstreamCallFailure(f"{description}: {exc}") from exc

    async def _list_subscription_ids(self, group_id: str) -> List[str]:
        subscription_ids: List[str] = []

        child_groups: List[str] = await self._call_upstream(
            f"listing child management groups of {group_id}",
            lambda: list(self._iter_child_group_names(group_id)),
        )

        if not child_groups:
            self._logger.info("No child management groups found under: %s", group_id)
            child_groups.append(group_id)

        # The first failing group ends the listing; later groups are not tried
        try:
            for child_group in child_groups:
                self._logger.info("Fetching subscriptions for child management group: %s", child_group)
                await self._call_upstream(
                    f"listing subscriptions under {child_group}",
                    lambda name=child_group: self._drain_subscription_ids(name, subscription_ids),
                )
            if not subscription_ids:
                self._logger.warning("No subscriptions found under management group: %s", group_id)
        except UpstreamCallFailure as exc:
            self._logger.error(
                "Error fetching subscriptions under management group: %s", exc,
                extra={"error": str(exc)},
            )

        return subscription_ids

    async def _process_subscriptions(self, group_id: str) -> List[SubscriptionRecord]:
        subscription_ids = await self._list_subscription_ids(group_id)
        subscription_details: List[SubscriptionRecord] = []

        for subscription_id in subscription_ids:
            try:
                subscription = await self._call_upstream(
                    f"fetching subscription {subscription_id}",
                    lambda sid=subscription_id: self._subscription_client.subscriptions.get(sid),
                )
            except UpstreamCallFailure as exc:
                self._logger.error(
                    "Error fetching subscription details: %s", exc,
                    extra={"error": str(exc)},
                )
                continue

            if subscription:
                subscription_details.append(SubscriptionRecord(
                    subscription_id=getattr(subscription, "subscription_id", None) or "",
                    subscription_name=getattr(subscription, "display_name", None) or "",
                ))

        return subscription_details
