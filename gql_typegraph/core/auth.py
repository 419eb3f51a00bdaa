"""Authentication handlers for schema introspection requests.

Provides pluggable authentication via the Auth protocol. The fetcher asks
the handler for headers once, when it opens its HTTP client.
"""

import base64
import logging
import os
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_AUTH_HEADER = "Api-Key"
DEFAULT_API_KEY_ENV = "GQL_TYPEGRAPH_API_KEY"
DEFAULT_USERNAME_ENV = "GQL_TYPEGRAPH_USERNAME"
DEFAULT_PASSWORD_ENV = "GQL_TYPEGRAPH_PASSWORD"

AUTH_TYPES = ("api_key", "bearer", "basic", "headers", "none")


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Example:
        class TenantAuth:
            def __init__(self, token: str, tenant: str):
                self.token = token
                self.tenant = tenant

            def get_headers(self) -> dict[str, str]:
                return {
                    "Authorization": f"Bearer {self.token}",
                    "X-Tenant-ID": self.tenant,
                }
    """

    def get_headers(self) -> dict[str, str]:
        """Return headers to include in requests."""
        ...


class ApiKeyAuth:
    """API key sent in a single header.

    Args:
        api_key: The API key value
        header_name: Header name (default: "Api-Key")
    """

    def __init__(self, api_key: str, header_name: str = DEFAULT_AUTH_HEADER):
        self.api_key = api_key
        self.header_name = header_name

    @classmethod
    def from_env(
        cls,
        env_var: str = DEFAULT_API_KEY_ENV,
        header_name: str = DEFAULT_AUTH_HEADER,
    ) -> "ApiKeyAuth":
        """Read the key from an environment variable.

        Raises:
            ValueError: If the variable is unset or empty
        """
        return cls(_require_env(env_var), header_name=header_name)

    def get_headers(self) -> dict[str, str]:
        return {self.header_name: self.api_key}


class BearerAuth:
    """Bearer token authentication."""

    def __init__(self, token: str):
        self.token = token

    def get_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class BasicAuth:
    """HTTP Basic authentication."""

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    def get_headers(self) -> dict[str, str]:
        credentials = f"{self.username}:{self.password}"
        encoded = base64.b64encode(credentials.encode()).decode()
        return {"Authorization": f"Basic {encoded}"}


class HeaderAuth:
    """Arbitrary static headers, e.g. an API key plus an account header."""

    def __init__(self, headers: dict[str, str]):
        self._headers = headers

    def get_headers(self) -> dict[str, str]:
        return self._headers.copy()


class NoAuth:
    """No authentication, for public endpoints."""

    def get_headers(self) -> dict[str, str]:
        return {}


def _require_env(env_var: str) -> str:
    value = os.environ.get(env_var)
    if not value:
        raise ValueError(f"environment variable {env_var} is not set")
    return value


def auth_from_settings(
    disable: bool,
    header: str = DEFAULT_AUTH_HEADER,
    api_key_env: str = DEFAULT_API_KEY_ENV,
    auth_type: str = "api_key",
    username_env: str = DEFAULT_USERNAME_ENV,
    password_env: str = DEFAULT_PASSWORD_ENV,
    headers: dict[str, str] | None = None,
) -> Auth:
    """Pick the auth handler described by the ``auth`` config section.

    Secrets are read from the environment: the API key or bearer token from
    ``api_key_env``, Basic credentials from ``username_env`` and
    ``password_env``. The ``headers`` type sends ``headers`` as given.

    Raises:
        ValueError: If the type is unknown or a required variable is unset
    """
    if disable or auth_type == "none":
        logger.debug("authentication disabled")
        return NoAuth()
    if auth_type == "api_key":
        return ApiKeyAuth.from_env(api_key_env, header_name=header)
    if auth_type == "bearer":
        return BearerAuth(_require_env(api_key_env))
    if auth_type == "basic":
        return BasicAuth(_require_env(username_env), _require_env(password_env))
    if auth_type == "headers":
        if not headers:
            raise ValueError("auth type 'headers' needs at least one header")
        return HeaderAuth(headers)
    raise ValueError(f"unknown auth type '{auth_type}', expected one of {', '.join(AUTH_TYPES)}")
