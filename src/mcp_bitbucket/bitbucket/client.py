"""Base client module for Bitbucket Cloud API interactions."""

import logging
from typing import Any

import httpx

from ..constants import MAX_PAGE_SIZE
from ..exceptions import BitbucketApiError
from ..models.bitbucket import BitbucketPage
from ..utils.logging import mask_sensitive
from .config import BitbucketConfig

logger = logging.getLogger("mcp-bitbucket.client")


class BitbucketClient:
    """Base client for Bitbucket Cloud API interactions."""

    config: BitbucketConfig
    session: httpx.AsyncClient

    def __init__(
        self,
        config: BitbucketConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Bitbucket client with configuration options.

        Args:
            config: Optional configuration object (will use env vars if not provided)
            transport: Optional httpx transport, used to simulate the API in tests

        Raises:
            MissingCredentialsError: If the email or API token is missing
        """
        self.config = config or BitbucketConfig.from_env()
        self.session = self._create_session(transport)

        logger.debug(
            f"Initialized Bitbucket client with Basic authentication. "
            f"URL: {self.config.url}, Email: {self.config.email}, "
            f"Token (masked): {mask_sensitive(self.config.api_token)}"
        )

    def _create_session(
        self, transport: httpx.AsyncBaseTransport | None
    ) -> httpx.AsyncClient:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.config.custom_headers:
            headers.update(self.config.custom_headers)

        return httpx.AsyncClient(
            auth=httpx.BasicAuth(self.config.email, self.config.api_token),
            headers=headers,
            verify=self.config.ssl_verify,
            timeout=self.config.timeout,
            transport=transport,
        )

    def _url(self, path: str) -> str:
        # Pagination cursors are absolute URLs.
        if path.startswith("http"):
            return path
        return f"{self.config.url}{path}"

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = self._url(path)
        logger.debug(f"{method} {url}")

        response = await self.session.request(
            method, url, json=json_data, params=params, headers=headers
        )
        if not response.is_success:
            raise BitbucketApiError(
                response.status_code,
                response.reason_phrase,
                response.text,
                f"{method} {path}",
            )
        return response

    async def request(
        self,
        path: str,
        method: str = "GET",
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a request to the Bitbucket API and decode the JSON response.

        Args:
            path: API path relative to the base URL, or an absolute URL
            method: HTTP method
            json_data: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded response data (usually a dict), None for an empty body

        Raises:
            BitbucketApiError: If the API answers with a non-success status
            httpx.TransportError: If the API cannot be reached
        """
        response = await self._send(method, path, json_data=json_data, params=params)
        if not response.content:
            return None
        return response.json()

    async def request_text(self, path: str) -> str:
        """Make a GET request and return the unparsed response body.

        Used for endpoints that do not return JSON, such as unified diffs.

        Raises:
            BitbucketApiError: If the API answers with a non-success status
            httpx.TransportError: If the API cannot be reached
        """
        response = await self._send("GET", path, headers={"Accept": "text/plain"})
        return response.text

    async def paginate(
        self, path: str, limit: int = 50, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Collect up to `limit` items from a cursor-paginated listing.

        The first page is requested with `pagelen=min(limit, 100)`; later pages
        follow the `next` cursor verbatim until it is absent or enough items
        have been collected.

        Args:
            path: Listing path relative to the base URL
            limit: Maximum number of items to return
            params: Extra query parameters for the first page

        Returns:
            At most `limit` raw item payloads, in API order
        """
        if limit <= 0:
            return []

        results: list[dict[str, Any]] = []
        next_path: str | None = path
        page_params: dict[str, Any] | None = {
            **(params or {}),
            "pagelen": min(limit, MAX_PAGE_SIZE),
        }

        while next_path and len(results) < limit:
            page = BitbucketPage.from_api_response(
                await self.request(next_path, params=page_params)
            )
            results.extend(page.values)
            next_path = page.next_url
            # The cursor already carries every query parameter.
            page_params = None

        return results[:limit]

    async def aclose(self) -> None:
        """Close the underlying HTTP session."""
        await self.session.aclose()
