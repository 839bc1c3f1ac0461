"""
Unit tests for credential resolution and server settings
"""

import pytest

from core.config import ServerSettings
from core.credentials import describe_credentials, parse_region, resolve_credentials
from core.errors import CredentialsError, InvalidRegionError, MissingCredentialsError
from core.models import Credentials, Region


class TestResolveCredentials:
    """Test resolve_credentials()"""

    def test_resolves_complete_record(self):
        creds = resolve_credentials({
            "NINJAONE_CLIENT_ID": "id",
            "NINJAONE_CLIENT_SECRET": "secret",
            "NINJAONE_REGION": "eu",
        })

        assert creds.client_id == "id"
        assert creds.client_secret == "secret"
        assert creds.region is Region.EU
        assert creds.base_url == "https://eu.ninjarmm.com"

    def test_region_defaults_to_us(self):
        creds = resolve_credentials({"NINJAONE_CLIENT_ID": "id", "NINJAONE_CLIENT_SECRET": "s"})

        assert creds.region is Region.US
        assert creds.base_url == "https://app.ninjarmm.com"

    def test_blank_region_defaults_to_us(self):
        creds = resolve_credentials({
            "NINJAONE_CLIENT_ID": "id",
            "NINJAONE_CLIENT_SECRET": "s",
            "NINJAONE_REGION": "",
        })
        assert creds.region is Region.US

    def test_region_is_case_insensitive(self):
        creds = resolve_credentials({
            "NINJAONE_CLIENT_ID": "id",
            "NINJAONE_CLIENT_SECRET": "s",
            "NINJAONE_REGION": " OC ",
        })
        assert creds.region is Region.OC
        assert creds.base_url == "https://oc.ninjarmm.com"

    @pytest.mark.parametrize("env", [
        {},
        {"NINJAONE_CLIENT_ID": "id"},
        {"NINJAONE_CLIENT_SECRET": "s"},
        {"NINJAONE_CLIENT_ID": "", "NINJAONE_CLIENT_SECRET": "s"},
        {"NINJAONE_CLIENT_ID": "id", "NINJAONE_CLIENT_SECRET": "   "},
    ])
    def test_missing_identity_or_secret(self, env):
        with pytest.raises(MissingCredentialsError):
            resolve_credentials(env)

    def test_missing_lists_the_variables(self):
        with pytest.raises(MissingCredentialsError) as excinfo:
            resolve_credentials({})
        assert excinfo.value.missing == ["NINJAONE_CLIENT_ID", "NINJAONE_CLIENT_SECRET"]

    def test_invalid_region(self):
        with pytest.raises(InvalidRegionError) as excinfo:
            resolve_credentials({
                "NINJAONE_CLIENT_ID": "id",
                "NINJAONE_CLIENT_SECRET": "s",
                "NINJAONE_REGION": "mars",
            })
        assert "mars" in str(excinfo.value)
        assert isinstance(excinfo.value, CredentialsError)

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("NINJAONE_CLIENT_ID", "env-id")
        monkeypatch.setenv("NINJAONE_CLIENT_SECRET", "env-secret")
        monkeypatch.delenv("NINJAONE_REGION", raising=False)

        assert resolve_credentials().client_id == "env-id"

        monkeypatch.setenv("NINJAONE_CLIENT_ID", "rotated")
        assert resolve_credentials().client_id == "rotated"


class TestCredentialsRecord:
    """Test Credentials equality and repr"""

    def test_equal_when_id_secret_region_match(self):
        assert Credentials("a", "b", Region.US) == Credentials("a", "b", Region.US)

    @pytest.mark.parametrize("other", [
        Credentials("x", "b", Region.US),
        Credentials("a", "x", Region.US),
        Credentials("a", "b", Region.EU),
    ])
    def test_differs_on_any_field(self, other):
        assert Credentials("a", "b", Region.US) != other

    def test_secret_not_in_repr(self):
        assert "topsecret" not in repr(Credentials("a", "topsecret"))

    def test_immutable(self):
        creds = Credentials("a", "b")
        with pytest.raises(AttributeError):
            creds.client_id = "c"


class TestDescribeCredentials:
    """Test the status line used by ninjaone_status"""

    def test_configured(self):
        text = describe_credentials({"NINJAONE_CLIENT_ID": "a", "NINJAONE_CLIENT_SECRET": "b"})
        assert text == "Configured (region: us, base URL: https://app.ninjarmm.com)"

    def test_not_configured(self):
        assert describe_credentials({}).startswith("NOT CONFIGURED")

    def test_invalid_region_not_configured(self):
        text = describe_credentials({
            "NINJAONE_CLIENT_ID": "a",
            "NINJAONE_CLIENT_SECRET": "b",
            "NINJAONE_REGION": "xx",
        })
        assert text.startswith("NOT CONFIGURED")
        assert "xx" in text


class TestParseRegion:
    def test_none_is_default(self):
        assert parse_region(None) is Region.US


class TestServerSettings:
    """Test ServerSettings.from_env()"""

    def test_defaults(self):
        settings = ServerSettings.from_env({})
        assert settings.log_level == "info"
        assert settings.http_timeout == 30.0

    def test_warn_alias(self):
        assert ServerSettings.from_env({"LOG_LEVEL": "WARN"}).log_level == "warning"

    def test_unknown_level_falls_back_to_info(self):
        assert ServerSettings.from_env({"LOG_LEVEL": "verbose"}).log_level == "info"

    def test_timeout(self):
        assert ServerSettings.from_env({"NINJAONE_HTTP_TIMEOUT": "12.5"}).http_timeout == 12.5

    @pytest.mark.parametrize("value", ["0", "-3", "abc"])
    def test_bad_timeout(self, value):
        with pytest.raises(ValueError):
            ServerSettings.from_env({"NINJAONE_HTTP_TIMEOUT": value})
