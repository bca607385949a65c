"""Activity and directory fetcher for the ticket API."""

import asyncio
from typing import Any

import httpx
from loguru import logger
from rich.progress import Progress, SpinnerColumn, TextColumn
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .constants import (
    API_ACTIVITIES_ENDPOINT,
    API_AGENTS_ENDPOINT,
    API_MANAGERS_ENDPOINT,
    DEFAULT_FETCH_MAX_RETRIES,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    SERVER_ERROR_STATUS,
    ApiResponseKey,
    LogMessage,
)

NO_CACHE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def extract_records(payload: Any) -> list[dict[str, Any]]:
    """Pull the record list out of an API payload.

    Accepts a bare list or an object with a ``data`` list. Anything else
    yields an empty list.
    """
    if isinstance(payload, dict):
        payload = payload.get(ApiResponseKey.DATA, [])
    if not isinstance(payload, list):
        return []
    return [record for record in payload if isinstance(record, dict)]


def is_transient_error(error: BaseException) -> bool:
    """Whether a request failure is worth retrying: transport errors and 5xx only."""
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= SERVER_ERROR_STATUS
    return False


class ActivityFetcher:
    """Handles fetching activities and the agent/manager directory from the API.

    Attributes:
        base_url: Base URL for the API.
        max_retries: Attempts per request before the error is raised.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        *,
        base_url: str,
        max_retries: int = DEFAULT_FETCH_MAX_RETRIES,
        timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the ActivityFetcher.

        Args:
            base_url: Base URL for the API.
            max_retries: Attempts per request before giving up.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, used to stub the API.
        """
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=NO_CACHE_HEADERS,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _get_json(self, client: httpx.AsyncClient, endpoint: str) -> Any:
        """GET an endpoint and decode its JSON body, retrying transient failures."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception(is_transient_error),
            reraise=True,
        ):
            with attempt:
                response = await client.get(endpoint)
                response.raise_for_status()
                return response.json()

    async def fetch_activities(self, client: httpx.AsyncClient) -> list[dict[str, Any]]:
        """Fetch raw activity records."""
        logger.info(LogMessage.FETCHING_ACTIVITIES.format(self.base_url))
        records = extract_records(await self._get_json(client, API_ACTIVITIES_ENDPOINT))
        logger.success(LogMessage.FETCHED_ACTIVITIES.format(len(records)))
        return records

    async def fetch_people(
        self, client: httpx.AsyncClient, endpoint: str
    ) -> list[dict[str, Any]]:
        """Fetch raw directory entries from ``endpoint``."""
        records = extract_records(await self._get_json(client, endpoint))
        logger.debug(LogMessage.FETCHED_PEOPLE.format(len(records), endpoint))
        return records

    async def fetch_all(self) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Fetch activities, agents and managers concurrently.

        Shows a spinner while the requests are in flight.

        Returns:
            tuple: Raw activity records and the combined agent/manager entries.
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task("Fetching activities and directory...", total=None)

            async with self._client() as client:
                activities, agents, managers = await asyncio.gather(
                    self.fetch_activities(client),
                    self.fetch_people(client, API_AGENTS_ENDPOINT),
                    self.fetch_people(client, API_MANAGERS_ENDPOINT),
                )

        return activities, agents + managers
