"""
Repository Update Service - one full crawl run.

Runs the crawler from the configured root and then resolves model file
hashes across the whole graph. The returned snapshot is meant to replace
the previously stored one atomically; storing it is up to the caller.
"""

import asyncio
from collections.abc import Iterable, Mapping

from repobrowser.config import Config
from repobrowser.core.factory import FetcherFactory
from repobrowser.core.fetcher.base import DocumentFetcher
from repobrowser.models.interlis_file import InterlisFile
from repobrowser.models.repository import RepositorySnapshot
from repobrowser.services.file_resolver import ContentHashResolver
from repobrowser.services.repository_crawler import RepositoryCrawler
from repobrowser.utils.logger import escape_newlines, get_logger

logger = get_logger(__name__)


class RepositoryUpdateService:
    """
    Unified entry point for a crawl run.

    Usage:
        async with RepositoryUpdateService.from_config(config) as service:
            snapshot = await service.update()
    """

    def __init__(self, fetcher: DocumentFetcher, config: Config | None = None):
        """
        Initialize update service.

        Args:
            fetcher: Fetcher shared by crawler and hash resolver
            config: Configuration (defaults if omitted)
        """
        self.config = config or Config()
        self.fetcher = fetcher
        self.crawler = RepositoryCrawler(fetcher)
        self.resolver = ContentHashResolver(fetcher)

    @classmethod
    def from_config(cls, config: Config) -> "RepositoryUpdateService":
        """Create the service with an HTTP fetcher built from configuration."""
        return cls(FetcherFactory.create(config.http), config)

    async def update(
        self,
        root_uri: str | None = None,
        ignore_list: list[str] | None = None,
        known_files: Mapping[str, InterlisFile] | Iterable[InterlisFile] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> RepositorySnapshot:
        """
        Crawl all repositories and resolve model file hashes.

        Args:
            root_uri: Root repository (configured root if omitted)
            ignore_list: Ignored locations (configured list if omitted)
            known_files: Files stored by a previous run, reused by hash
            cancel_event: Optional cancellation signal

        Returns:
            Snapshot of the repository graph and all known model files
        """
        root_uri = root_uri or self.config.crawler.root_repository_uri
        if ignore_list is None:
            ignore_list = self.config.crawler.repository_ignore_list

        repositories = await self.crawler.crawl(root_uri, ignore_list, cancel_event)
        if not repositories:
            logger.warning("No repository could be analysed from {}", escape_newlines(root_uri))
            return RepositorySnapshot(root_uri=root_uri)

        files = await self.resolver.resolve_hashes(known_files or [], repositories, cancel_event)
        return RepositorySnapshot(root_uri=root_uri, repositories=repositories, files=files)

    async def close(self) -> None:
        await self.fetcher.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
