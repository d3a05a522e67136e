"""
Factory for creating document fetchers.
"""

import httpx

from repobrowser.config import HttpConfig
from repobrowser.core.fetcher.base import DocumentFetcher
from repobrowser.core.fetcher.http import HttpDocumentFetcher


class FetcherFactory:
    """Factory for creating document fetchers from configuration."""

    @staticmethod
    def create(
        config: HttpConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> DocumentFetcher:
        """
        Create fetcher from configuration.

        Args:
            config: HTTP configuration
            transport: Optional custom httpx transport

        Returns:
            Document fetcher instance

        Raises:
            ValueError: If the configuration is not usable
        """
        if config.max_connections < 1:
            raise ValueError(f"max_connections must be positive: {config.max_connections}")

        return HttpDocumentFetcher(
            timeout=config.timeout,
            max_connections=config.max_connections,
            user_agent=config.user_agent,
            follow_redirects=config.follow_redirects,
            transport=transport,
        )
