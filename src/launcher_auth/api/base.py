"""Base class for the httpx-backed provider clients."""

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from launcher_auth.config import get_settings

logger = logging.getLogger(__name__)

USER_AGENT = "Launcher-Auth/0.1.0"


class BaseProviderAPI:
    """Base class for provider clients.

    Subclasses get:
    - A shared or per-request ``httpx.AsyncClient``
    - Retries on timeouts and connection errors
    - JSON body helpers that tolerate empty or malformed bodies
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: int | None = None):
        """Initialize the client.

        Args:
            client: Optional shared HTTP client. When omitted, every request
                opens and closes its own client.
            timeout: HTTP timeout in seconds (defaults to settings)
        """
        self._client = client
        self._timeout = timeout or get_settings().timeout

    @retry(
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make an HTTP request with retry logic."""
        headers = {"User-Agent": USER_AGENT, **kwargs.pop("headers", {})}
        if self._client is not None:
            return await self._client.request(method, url, headers=headers, **kwargs)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(method, url, headers=headers, **kwargs)

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        """Convenience method for GET requests."""
        return await self._request("GET", url, **kwargs)

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        """Convenience method for POST requests."""
        return await self._request("POST", url, **kwargs)

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body, returning {} when there is none."""
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            logger.debug(f"Non-JSON response body ({response.status_code})")
            return {}
        return data if isinstance(data, dict) else {}
