"""Moonraker print history client."""

import logging

import httpx
from pydantic import ValidationError

from backend.app.schemas.history import HistoryJob, HistoryResponse

logger = logging.getLogger(__name__)


class HistoryError(Exception):
    """Base error for the print history service."""


class HistoryTransportError(HistoryError):
    """The history service could not be reached or refused the request."""


class HistoryStatusError(HistoryTransportError):
    """The history service answered with a non-success status."""

    def __init__(self, status_code: int):
        super().__init__(f"History service returned HTTP {status_code}")
        self.status_code = status_code


class HistoryTimeoutError(HistoryTransportError):
    """The history service did not answer within the configured timeout."""


class MoonrakerHistoryClient:
    """Client for the Moonraker job history API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the history client.

        Args:
            base_url: Base URL of the printer's Moonraker server (e.g., http://192.168.1.8)
            timeout: Seconds to wait for the history service before giving up
            transport: Optional httpx transport, used to fake the service in tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=10,
                    keepalive_expiry=30.0,
                ),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_history_jobs(self, start: int = 108, order: str = "asc") -> list[HistoryJob]:
        """Fetch one page of print history.

        Args:
            start: Offset of the first job to return
            order: "asc" or "desc"

        Returns:
            Jobs in the order the service returned them. An empty list if the
            response body could not be parsed.

        Raises:
            HistoryTimeoutError: The service did not answer in time.
            HistoryStatusError: The service answered with a non-2xx status.
            HistoryTransportError: Any other network failure.
        """
        url = f"{self.base_url}/server/history/list"
        client = await self._get_client()
        try:
            response = await client.get(url, params={"start": start, "order": order})
        except httpx.TimeoutException as e:
            logger.error("History request to %s timed out after %.1fs", url, self.timeout)
            raise HistoryTimeoutError(f"History service timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error("History request to %s failed: %s", url, e)
            raise HistoryTransportError(f"History service unreachable: {e}") from e

        logger.info("History request returned %s", response.status_code)

        if not response.is_success:
            raise HistoryStatusError(response.status_code)

        try:
            parsed = HistoryResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Error parsing history response: %s", e)
            return []

        logger.debug("Parsed %d history jobs (count=%d)", len(parsed.result.jobs), parsed.result.count)
        return parsed.result.jobs


# Global client instance
_history_client: MoonrakerHistoryClient | None = None


async def get_history_client() -> MoonrakerHistoryClient | None:
    """Get the current history client instance."""
    return _history_client


async def init_history_client(base_url: str, timeout: float = 5.0) -> MoonrakerHistoryClient:
    """Initialize the history client with the given URL.

    Args:
        base_url: The Moonraker server URL
        timeout: Upstream timeout in seconds

    Returns:
        The initialized client.
    """
    global _history_client
    if _history_client:
        await _history_client.close()

    _history_client = MoonrakerHistoryClient(base_url, timeout=timeout)
    return _history_client


async def close_history_client():
    """Close the history client."""
    global _history_client
    if _history_client:
        await _history_client.close()
        _history_client = None
