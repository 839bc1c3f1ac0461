"""
Pytest fixtures for testing
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from core.client_cache import ClientCache
from core.models import Page
from core.navigation import NavigationSession
from core.registry import DomainRegistry

CREDENTIALS_ENV = {
    "NINJAONE_CLIENT_ID": "a",
    "NINJAONE_CLIENT_SECRET": "b",
    "NINJAONE_REGION": "us",
}


class FakeNinjaOneClient:
    """Stand-in for NinjaOneClient: every API method is an AsyncMock."""

    def __init__(self, credentials=None):
        self.credentials = credentials
        self.closed = False
        self.devices = SimpleNamespace(
            list=AsyncMock(return_value=Page(items=[{"id": 1, "systemName": "srv-01"}], cursor="1")),
            get=AsyncMock(return_value={"id": 1, "systemName": "srv-01"}),
            reboot=AsyncMock(return_value=None),
            services=AsyncMock(return_value=[{"name": "Spooler", "state": "RUNNING"}]),
            alerts=AsyncMock(return_value=[]),
            activities=AsyncMock(return_value=Page(items=[{"id": 7}])),
        )
        self.organizations = SimpleNamespace(
            list=AsyncMock(return_value=Page(items=[{"id": 10, "name": "Acme"}])),
            get=AsyncMock(return_value={"id": 10, "name": "Acme"}),
            create=AsyncMock(return_value={"id": 11, "name": "New Org"}),
            locations=AsyncMock(return_value=[{"id": 1, "name": "HQ"}]),
            devices=AsyncMock(return_value=Page(items=[{"id": 1}])),
        )
        self.alerts = SimpleNamespace(
            list=AsyncMock(return_value=Page(items=[])),
            reset=AsyncMock(return_value=None),
            reset_many=AsyncMock(return_value=["u-1", "u-2"]),
        )
        self.tickets = SimpleNamespace(
            list=AsyncMock(return_value=Page(items=[{"id": 100, "subject": "Printer"}], cursor="100")),
            get=AsyncMock(return_value={"id": 100, "subject": "Printer"}),
            create=AsyncMock(return_value={"id": 101, "subject": "New"}),
            update=AsyncMock(return_value={"id": 100, "status": "CLOSED"}),
            add_comment=AsyncMock(return_value={"id": 5}),
            comments=AsyncMock(return_value=[{"body": "hello"}]),
        )

    async def aclose(self):
        self.closed = True


class RecordingFactory:
    """Client factory that remembers every client it built."""

    def __init__(self):
        self.clients = []

    def __call__(self, credentials):
        client = FakeNinjaOneClient(credentials)
        self.clients.append(client)
        return client


@pytest.fixture
def credentials_env():
    return dict(CREDENTIALS_ENV)


@pytest.fixture
def factory():
    return RecordingFactory()


@pytest.fixture
def client_cache(credentials_env, factory):
    return ClientCache(environ=credentials_env, client_factory=factory)


@pytest.fixture
def registry(client_cache):
    return DomainRegistry(client_cache=client_cache)


@pytest.fixture
def session(registry):
    return NavigationSession(registry)


@pytest.fixture
def unconfigured_session(factory):
    cache = ClientCache(environ={}, client_factory=factory)
    return NavigationSession(DomainRegistry(client_cache=cache))
