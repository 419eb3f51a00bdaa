"""Tests for authentication handlers."""

import base64

import pytest

from gql_typegraph.core.auth import (
    ApiKeyAuth,
    Auth,
    BasicAuth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
    auth_from_settings,
)


class TestApiKeyAuth:
    """Tests for ApiKeyAuth."""

    def test_default_header_name(self):
        auth = ApiKeyAuth("my-secret-key")
        assert auth.get_headers() == {"Api-Key": "my-secret-key"}

    def test_custom_header_name(self):
        auth = ApiKeyAuth("my-key", header_name="x-api-key")
        assert auth.get_headers() == {"x-api-key": "my-key"}

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MY_KEY", "from-env")
        auth = ApiKeyAuth.from_env("MY_KEY", header_name="X-Key")
        assert auth.get_headers() == {"X-Key": "from-env"}

    def test_from_env_missing(self, monkeypatch):
        monkeypatch.delenv("MY_KEY", raising=False)
        with pytest.raises(ValueError, match="MY_KEY"):
            ApiKeyAuth.from_env("MY_KEY")


class TestOtherHandlers:
    def test_bearer(self):
        assert BearerAuth("tok").get_headers() == {"Authorization": "Bearer tok"}

    def test_basic(self):
        headers = BasicAuth("user", "pass").get_headers()
        encoded = headers["Authorization"].split(" ", 1)[1]
        assert base64.b64decode(encoded).decode() == "user:pass"

    def test_header_auth_returns_copy(self):
        original = {"X-Tenant": "t1"}
        auth = HeaderAuth(original)
        headers = auth.get_headers()
        headers["X-Other"] = "x"
        assert original == {"X-Tenant": "t1"}

    def test_no_auth(self):
        assert NoAuth().get_headers() == {}

    @pytest.mark.parametrize(
        "handler",
        [ApiKeyAuth("k"), BearerAuth("t"), BasicAuth("u", "p"), HeaderAuth({}), NoAuth()],
    )
    def test_protocol_compliance(self, handler):
        assert isinstance(handler, Auth)


class TestAuthFromSettings:
    def test_disabled(self):
        assert isinstance(auth_from_settings(disable=True), NoAuth)

    def test_enabled_reads_env(self, monkeypatch):
        monkeypatch.setenv("GQL_TYPEGRAPH_API_KEY", "abc")
        auth = auth_from_settings(disable=False)
        assert auth.get_headers() == {"Api-Key": "abc"}

    def test_none_type(self):
        assert isinstance(auth_from_settings(disable=False, auth_type="none"), NoAuth)

    def test_bearer_reads_token_env(self, monkeypatch):
        monkeypatch.setenv("MY_TOKEN", "tok")
        auth = auth_from_settings(disable=False, auth_type="bearer", api_key_env="MY_TOKEN")
        assert auth.get_headers() == {"Authorization": "Bearer tok"}

    def test_basic_reads_credentials_env(self, monkeypatch):
        monkeypatch.setenv("GQL_TYPEGRAPH_USERNAME", "user")
        monkeypatch.setenv("GQL_TYPEGRAPH_PASSWORD", "pass")
        auth = auth_from_settings(disable=False, auth_type="basic")
        assert isinstance(auth, BasicAuth)
        encoded = auth.get_headers()["Authorization"].split(" ", 1)[1]
        assert base64.b64decode(encoded).decode() == "user:pass"

    def test_basic_missing_password(self, monkeypatch):
        monkeypatch.setenv("GQL_TYPEGRAPH_USERNAME", "user")
        monkeypatch.delenv("GQL_TYPEGRAPH_PASSWORD", raising=False)
        with pytest.raises(ValueError, match="GQL_TYPEGRAPH_PASSWORD"):
            auth_from_settings(disable=False, auth_type="basic")

    def test_static_headers(self):
        auth = auth_from_settings(disable=False, auth_type="headers", headers={"X-Tenant": "t1"})
        assert auth.get_headers() == {"X-Tenant": "t1"}

    def test_static_headers_required(self):
        with pytest.raises(ValueError):
            auth_from_settings(disable=False, auth_type="headers")

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="unknown auth type"):
            auth_from_settings(disable=False, auth_type="oauth")
