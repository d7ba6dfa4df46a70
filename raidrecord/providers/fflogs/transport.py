"""HTTP transport for the FFLogs v2 GraphQL API.

Handles OAuth client-credentials tokens (cached in memory only) and query
execution over httpx. There is no retry logic here: a failed call surfaces
immediately as a TransportError.
"""

from __future__ import annotations

import re
import time
from typing import TYPE_CHECKING, Any

from loguru import logger

from raidrecord.core.constants import FFLOGS_GRANT_TYPE
from raidrecord.core.exceptions import AuthenticationError, TransportError

if TYPE_CHECKING:
    import httpx

    from raidrecord.core.config.fflogs_config import FFLogsConfig

RATE_LIMIT_SELECTION = (
    "rateLimitData {\n"
    "        limitPerHour\n"
    "        pointsSpentThisHour\n"
    "        pointsResetIn\n"
    "    }"
)

_QUERY_HEAD = re.compile(r"query\s*(\([^)]*\))?\s*\{")


def inject_rate_limit_selection(query: str) -> str:
    """Add the ``rateLimitData`` selection to the root of a query.

    Queries that already select it are returned unchanged.
    """
    if "rateLimitData" in query:
        return query

    def _replace(match: re.Match[str]) -> str:
        signature = match.group(1) or ""
        return f"query{signature} {{\n    {RATE_LIMIT_SELECTION}"

    injected, count = _QUERY_HEAD.subn(_replace, query, count=1)
    if count == 0:
        logger.warning("Could not locate query root; rate limit data not requested")
    return injected


class AccessTokenProvider:
    """OAuth client-credentials token, cached in memory until near expiry."""

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        token_url: str,
        refresh_margin: float = 3600.0,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._refresh_margin = refresh_margin

        self._access_token: str | None = None
        self._expires_at: float = 0.0

    @property
    def has_valid_token(self) -> bool:
        return (
            self._access_token is not None
            and self._expires_at - time.time() > self._refresh_margin
        )

    def invalidate(self) -> None:
        self._access_token = None
        self._expires_at = 0.0

    async def get_token(self, client: httpx.AsyncClient) -> str:
        """Return a cached token or request a new one.

        Raises:
            AuthenticationError: If credentials are missing or rejected
        """
        if self.has_valid_token:
            return self._access_token  # type: ignore[return-value]

        if not self._client_id or not self._client_secret:
            raise AuthenticationError(
                "FFLogs API credentials are not configured. Set "
                "RAIDRECORD_FFLOGS_CLIENT_ID and RAIDRECORD_FFLOGS_CLIENT_SECRET."
            )

        import httpx

        try:
            response = await client.post(
                self._token_url,
                auth=(self._client_id, self._client_secret),
                data={"grant_type": FFLOGS_GRANT_TYPE},
            )
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Token request failed: {e}") from e

        if response.status_code != 200:
            raise AuthenticationError(
                "Failed to obtain access token. Check your API credentials.",
                status_code=response.status_code,
                response=response.text,
            )

        try:
            payload = response.json()
            token = payload["access_token"]
            expires_in = float(payload.get("expires_in", 0))
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(f"Invalid token response: {e}") from e

        self._access_token = token
        self._expires_at = time.time() + expires_in
        logger.debug(f"Obtained FFLogs access token (expires in {expires_in:.0f}s)")
        return token


class FFLogsTransport:
    """Executes GraphQL queries against the FFLogs client API.

    Attributes:
        api_url: GraphQL endpoint
    """

    def __init__(
        self,
        config: FFLogsConfig,
        token_provider: AccessTokenProvider | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize transport.

        Args:
            config: FFLogs configuration (credentials, endpoints, timeout)
            token_provider: Optional token provider (built from config if omitted)
            client: Optional pre-built httpx client (tests inject a MockTransport here)
        """
        self.api_url = config.api_url
        self._timeout = config.timeout
        self._token_provider = token_provider or AccessTokenProvider(
            client_id=config.client_id,
            client_secret=config.get_client_secret(),
            token_url=config.token_url,
            refresh_margin=config.token_refresh_margin,
        )
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            import httpx

            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> FFLogsTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def execute_query(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        include_rate_limit: bool = False,
    ) -> dict[str, Any]:
        """Execute a GraphQL query and return its ``data`` object.

        Raises:
            TransportError: On connection failure, non-success status, invalid
                JSON, or a GraphQL error list without data
        """
        import httpx

        client = await self._get_client()
        token = await self._token_provider.get_token(client)

        final_query = inject_rate_limit_selection(query) if include_rate_limit else query

        try:
            response = await client.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                json={"query": final_query, "variables": variables or {}},
            )
        except httpx.HTTPError as e:
            logger.error(f"FFLogs request failed: {e}")
            raise TransportError(f"Connection error: {e}") from e

        if response.status_code == 401:
            # Token revoked or expired early; next call fetches a fresh one.
            self._token_provider.invalidate()

        if not response.is_success:
            logger.error(f"FFLogs query failed with HTTP {response.status_code}")
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                response=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise TransportError(f"Invalid JSON response: {e}") from e

        if not isinstance(payload, dict):
            raise TransportError("Invalid response: expected a JSON object")

        data = payload.get("data")
        errors = payload.get("errors") or []

        if errors and not data:
            message = _first_error_message(errors)
            logger.error(f"FFLogs query returned errors without data: {message}")
            raise TransportError(message, status_code=response.status_code)

        if errors:
            logger.warning(
                f"FFLogs query returned partial data with {len(errors)} error(s): "
                f"{_first_error_message(errors)}"
            )

        return data if isinstance(data, dict) else {}


def _first_error_message(errors: list[Any]) -> str:
    first = errors[0]
    if isinstance(first, dict) and first.get("message"):
        return str(first["message"])
    return str(first)
