"""Schema fetcher for GraphQL endpoints.

Sends the standard introspection query over HTTP and loads the response
into the Schema IR, optionally caching it to a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from graphql import get_introspection_query

from .auth import Auth, NoAuth
from .ir import Schema
from .loader import schema_from_introspection

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_CACHE_FILE = "schema.json"


class GraphQLError(Exception):
    """Exception raised when a GraphQL response carries errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]]):
        self.message = message
        self.errors = errors
        super().__init__(message)


class SchemaFetcher:
    """Fetches the introspection schema of an endpoint.

    Examples:
        fetcher = SchemaFetcher(url, auth=ApiKeyAuth(key))
        schema = await fetcher.fetch()
        await fetcher.close()

        async with SchemaFetcher(url) as fetcher:
            data = await fetcher.fetch_introspection()
    """

    def __init__(
        self,
        url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            url: GraphQL endpoint URL
            auth: Authentication handler (defaults to NoAuth)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        if not url:
            raise ValueError("an endpoint URL is required to fetch the schema")
        self.url = url
        self.timeout = timeout
        self._auth = auth or NoAuth()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SchemaFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self._auth.get_headers())

            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_introspection(self) -> dict[str, Any]:
        """Run the introspection query and return the raw response body.

        Raises:
            httpx.HTTPStatusError: If the server answers with a non-2xx status
            GraphQLError: If the response contains errors
        """
        client = await self._get_client()

        logger.info("fetching schema from %s", self.url)
        response = await client.post(
            self.url,
            json={"query": get_introspection_query(descriptions=True)},
        )
        response.raise_for_status()

        result = response.json()

        if result.get("errors"):
            error_messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
            raise GraphQLError(f"GraphQL errors: {error_messages}", result["errors"])

        if not (result.get("data") or {}).get("__schema"):
            raise GraphQLError("response did not contain an introspection schema", [])

        return result

    async def fetch(self, skip_fields: dict[str, list[str]] | None = None) -> Schema:
        """Fetch the endpoint's schema and load it."""
        return schema_from_introspection(
            await self.fetch_introspection(),
            skip_fields=skip_fields,
        )


async def fetch_schema(
    url: str,
    schema_file: str | Path | None = DEFAULT_SCHEMA_CACHE_FILE,
    auth: Auth | None = None,
    refetch: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Schema:
    """Return the endpoint's schema, going to the network only when needed.

    The cached file is used when it exists unless ``refetch`` is set. A fresh
    response is written to ``schema_file`` as-is.
    """
    if schema_file and Path(schema_file).is_file() and not refetch:
        logger.info("using cached schema %s", schema_file)
        return Schema.load(schema_file)

    async with SchemaFetcher(url, auth=auth, transport=transport) as fetcher:
        data = await fetcher.fetch_introspection()

    if schema_file:
        logger.debug("saving schema to %s", schema_file)
        Path(schema_file).write_text(json.dumps(data, indent=1) + "\n")

    logger.info("successfully fetched schema from %s", url)
    return schema_from_introspection(data)
