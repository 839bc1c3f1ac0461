"""
Unit tests for the backing-client cache
"""

import asyncio

import pytest

from core import client_cache as client_cache_module
from core.client_cache import ClientCache
from core.errors import NoCredentialsError
from core.models import Region
from core.ninjaone import NinjaOneClient


class TestGetClient:
    """Test ClientCache.get_client()"""

    @pytest.mark.asyncio
    async def test_same_instance_while_credentials_unchanged(self, client_cache, factory):
        first = await client_cache.get_client()
        second = await client_cache.get_client()

        assert first is second
        assert len(factory.clients) == 1

    @pytest.mark.asyncio
    async def test_client_built_from_resolved_credentials(self, client_cache):
        client = await client_cache.get_client()

        assert client.credentials.client_id == "a"
        assert client.credentials.region is Region.US
        assert client_cache.cached_credentials == client.credentials

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key, value", [
        ("NINJAONE_CLIENT_ID", "other-id"),
        ("NINJAONE_CLIENT_SECRET", "other-secret"),
        ("NINJAONE_REGION", "eu"),
    ])
    async def test_rotation_on_any_field_change(self, credentials_env, factory, key, value):
        cache = ClientCache(environ=credentials_env, client_factory=factory)
        first = await cache.get_client()

        credentials_env[key] = value
        second = await cache.get_client()

        assert second is not first
        assert first.closed
        assert len(factory.clients) == 2

    @pytest.mark.asyncio
    async def test_region_case_change_is_not_rotation(self, credentials_env, factory):
        cache = ClientCache(environ=credentials_env, client_factory=factory)
        first = await cache.get_client()

        credentials_env["NINJAONE_REGION"] = "US"

        assert await cache.get_client() is first

    @pytest.mark.asyncio
    async def test_no_credentials(self, factory):
        cache = ClientCache(environ={}, client_factory=factory)

        with pytest.raises(NoCredentialsError) as excinfo:
            await cache.get_client()

        assert "NINJAONE_CLIENT_ID" in str(excinfo.value)
        assert factory.clients == []

    @pytest.mark.asyncio
    async def test_invalid_region_is_no_credentials(self, factory):
        cache = ClientCache(
            environ={"NINJAONE_CLIENT_ID": "a", "NINJAONE_CLIENT_SECRET": "b", "NINJAONE_REGION": "zz"},
            client_factory=factory,
        )
        with pytest.raises(NoCredentialsError):
            await cache.get_client()

    @pytest.mark.asyncio
    async def test_credentials_removed_keeps_failing(self, credentials_env, factory):
        cache = ClientCache(environ=credentials_env, client_factory=factory)
        await cache.get_client()

        credentials_env.pop("NINJAONE_CLIENT_SECRET")
        with pytest.raises(NoCredentialsError):
            await cache.get_client()

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_one_construction(self, client_cache, factory):
        clients = await asyncio.gather(*(client_cache.get_client() for _ in range(10)))

        assert len(factory.clients) == 1
        assert all(c is clients[0] for c in clients)


class TestClear:
    """Test ClientCache.clear() and aclose()"""

    @pytest.mark.asyncio
    async def test_clear_forces_new_client(self, client_cache, factory):
        first = await client_cache.get_client()
        client_cache.clear()

        assert client_cache.cached_credentials is None
        assert await client_cache.get_client() is not first
        assert not first.closed

    @pytest.mark.asyncio
    async def test_aclose_closes_client(self, client_cache):
        client = await client_cache.get_client()
        await client_cache.aclose()

        assert client.closed
        assert client_cache.cached_credentials is None

    @pytest.mark.asyncio
    async def test_aclose_on_empty_cache(self, client_cache):
        await client_cache.aclose()


class TestConfigure:
    """Test ClientCache.configure()"""

    @pytest.mark.asyncio
    async def test_new_factory_used_for_next_client(self, client_cache, factory):
        other = type(factory)()
        first = await client_cache.get_client()

        client_cache.configure(other)
        assert await client_cache.get_client() is first

        client_cache.clear()
        second = await client_cache.get_client()
        assert other.clients == [second]
        assert len(factory.clients) == 1


class TestDefaultCache:
    """Test the process-wide cache helpers"""

    @pytest.mark.asyncio
    async def test_default_factory_builds_ninjaone_client(self, monkeypatch):
        monkeypatch.setenv("NINJAONE_CLIENT_ID", "a")
        monkeypatch.setenv("NINJAONE_CLIENT_SECRET", "b")
        monkeypatch.setenv("NINJAONE_REGION", "oc")
        client_cache_module.clear_client()
        try:
            client = await client_cache_module.get_client()
            assert isinstance(client, NinjaOneClient)
            assert client.base_url == "https://oc.ninjarmm.com"
            assert await client_cache_module.get_client() is client
        finally:
            await client_cache_module.default_cache().aclose()
