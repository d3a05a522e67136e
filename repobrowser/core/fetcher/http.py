"""
HTTP document fetcher using httpx.
"""

import asyncio

import httpx

from repobrowser.core.fetcher.base import DocumentFetcher
from repobrowser.utils.exceptions import FetchError
from repobrowser.utils.logger import escape_newlines, get_logger

logger = get_logger(__name__)


class HttpDocumentFetcher(DocumentFetcher):
    """
    Fetcher for repository documents served over HTTP(S).

    Uses one shared httpx.AsyncClient and bounds the number of requests in
    flight with a semaphore, since a crawl fans out over whole subtrees.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_connections: int = 10,
        user_agent: str = "repobrowser-crawler/1.0",
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize HTTP fetcher.

        Args:
            timeout: Request timeout in seconds
            max_connections: Maximum number of concurrent requests
            user_agent: User-Agent header sent with every request
            follow_redirects: Follow redirects on GET requests
            transport: Optional custom transport (e.g. httpx.MockTransport)
        """
        self.timeout = timeout
        self.max_connections = max_connections
        self.user_agent = user_agent
        self.follow_redirects = follow_redirects

        self._semaphore = asyncio.Semaphore(max_connections)
        self.client = httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            limits=httpx.Limits(max_connections=max_connections),
            transport=transport,
        )

    async def fetch(self, url: str) -> bytes:
        """
        GET a document.

        Raises:
            FetchError: On transport errors, timeouts and non-success status codes
        """
        try:
            async with self._semaphore:
                response = await self.client.get(url, follow_redirects=self.follow_redirects)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"GET {url} returned status {e.response.status_code}",
                context={"url": url, "status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(
                f"GET {url} failed: {e}",
                context={"url": url, "error_type": type(e).__name__},
            ) from e

    async def exists(self, url: str) -> bool:
        """HEAD request; 2xx and 3xx count as existing, redirects are not followed."""
        try:
            async with self._semaphore:
                response = await self.client.head(url, follow_redirects=False)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("HEAD {} failed: {}", escape_newlines(url), escape_newlines(e))
            return False

        return 200 <= response.status_code < 400

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
