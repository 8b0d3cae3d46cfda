"""
Pytest Configuration and Fixtures for the Azure Subscriptions service
Provides shared fixtures and configuration for all test modules
"""
import os
from types import SimpleNamespace
from typing import AsyncGenerator, List
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Never pick up a developer's appsettings.json during tests
os.environ.setdefault("APPSETTINGS_PATH", os.path.join(os.path.dirname(__file__), "no-appsettings.json"))

from azure_subscriptions.utils.config import AzureConfig
from azure_subscriptions.utils.subscription_cache import SubscriptionCache
from tests.mock_azure import FakeClock, make_subscription, make_subscription_ref

RESOLVER_MODULE = "azure_subscriptions.utils.subscription_resolver"
ROOT_GROUP = "root-g"


@pytest.fixture(scope="session")
def anyio_backend():
    """Use asyncio backend for all async tests"""
    return "asyncio"


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def azure_config():
    return AzureConfig(
        tenant_id="tenant-1",
        client_id="client-1",
        client_secret="secret-1",
        management_group_id=ROOT_GROUP,
    )


@pytest.fixture
def azure_sdk():
    """Patch the Azure SDK classes where the resolver imports them"""
    with patch(f"{RESOLVER_MODULE}.ClientSecretCredential") as credential_cls, \
            patch(f"{RESOLVER_MODULE}.ManagementGroupsAPI") as management_groups_cls, \
            patch(f"{RESOLVER_MODULE}.SubscriptionClient") as subscription_client_cls:
        yield SimpleNamespace(
            credential_cls=credential_cls,
            management_groups_cls=management_groups_cls,
            subscription_client_cls=subscription_client_cls,
            mg_client=management_groups_cls.return_value,
            sub_client=subscription_client_cls.return_value,
        )


@pytest.fixture
def tenant(azure_sdk):
    """
    Configurable fake tenant behind the patched SDK clients.

    Set ``children``, ``subscriptions_by_group`` and ``subscriptions`` (id -> display
    name, or an Exception to raise) before calling the resolver.
    """
    state = SimpleNamespace(
        children=[],
        subscriptions_by_group={},
        subscriptions={},
    )

    def get_group(group_id, expand=None):
        return SimpleNamespace(children=list(state.children))

    def list_subscriptions(group_id) -> List[MagicMock]:
        return [make_subscription_ref(sid, group_id) for sid in state.subscriptions_by_group.get(group_id, [])]

    def get_subscription(subscription_id):
        outcome = state.subscriptions[subscription_id]
        if isinstance(outcome, Exception):
            raise outcome
        return make_subscription(subscription_id, outcome)

    azure_sdk.mg_client.management_groups.get.side_effect = get_group
    azure_sdk.mg_client.management_group_subscriptions.get_subscriptions_under_management_group.side_effect = list_subscriptions
    azure_sdk.sub_client.subscriptions.get.side_effect = get_subscription
    state.sdk = azure_sdk
    return state


@pytest.fixture
def resolver(azure_sdk, azure_config, fake_clock):
    from azure_subscriptions.utils.subscription_resolver import SubscriptionResolver
    return SubscriptionResolver(
        azure_config=azure_config,
        cache=SubscriptionCache(ttl_seconds=3600, clock=fake_clock),
    )


@pytest.fixture
def fake_resolver():
    """Stand-in resolver for endpoint tests"""
    resolver = MagicMock()
    resolver.is_available = True
    resolver.resolve_as_options = AsyncMock(return_value=[])
    return resolver


@pytest_asyncio.fixture
async def client(fake_resolver) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to an app serving ``fake_resolver``"""
    from azure_subscriptions.main import create_app
    application = create_app(resolver=fake_resolver)
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


def pytest_configure(config):
    """Register custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for API endpoints"
    )
    config.addinivalue_line(
        "markers", "api: API endpoint tests"
    )
    config.addinivalue_line(
        "markers", "cache: Tests related to caching functionality"
    )
