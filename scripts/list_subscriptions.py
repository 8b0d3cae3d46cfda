#!/usr/bin/env python3
"""Manual check of subscription resolution against a real tenant.

Reads the same settings as the service (AZURE_TENANT_ID, AZURE_CLIENT_ID,
AZURE_CLIENT_SECRET, AZURE_MANAGEMENT_GROUP_ID or appsettings.json) and
prints what the /subscriptions endpoint would return.
"""
import asyncio
import sys
from pathlib import Path

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from azure_subscriptions.utils import config, setup_logger
from azure_subscriptions.utils.subscription_resolver import SubscriptionResolver


async def main() -> int:
    setup_logger("azure_subscriptions", config.app.log_level)

    validation = config.validate_config()
    for error in validation["errors"]:
        print(f"❌ {error}")

    resolver = SubscriptionResolver()
    if not resolver.is_available:
        print("❌ Resolver unavailable, check configuration")
        return 1

    print("=" * 60)
    print(f"Management group: {resolver.management_group_id}")
    print("=" * 60)

    subscriptions = await resolver.resolve()
    print(f"Subscriptions ({len(subscriptions)}):")
    for subscription in subscriptions:
        print(f"  {subscription.subscription_id}  {subscription.subscription_name}")

    options = await resolver.resolve_as_options()
    print(f"\nSubscription options ({len(options)}):")
    for option in options:
        print(f"  {option.model_dump()}")

    print(f"\nCache: {resolver.cache.get_stats()}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
