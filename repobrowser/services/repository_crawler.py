"""
Repository Crawler - Builds the repository graph from a root location.

Handles:
- Recursive discovery of subsidiary repositories
- HTTPS upgrade, decided once per repository
- Memoization so every repository is analysed exactly once per crawl,
  even when it has several parents or sits on a cycle
- Failure containment per repository
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from repobrowser.core.documents import (
    ILIDATA_FILE,
    ILIMODELS_FILE,
    ILISITE_FILE,
    DatasetMetadata,
    Site,
    parse_ilidata,
    parse_ilimodels,
    parse_ilisite,
)
from repobrowser.core.fetcher.base import DocumentFetcher
from repobrowser.models.model import Model
from repobrowser.models.repository import Repository
from repobrowser.services.catalog_resolver import remove_precursor_catalog_versions
from repobrowser.utils.exceptions import RepoBrowserError, ValidationError
from repobrowser.utils.logger import escape_newlines, get_logger
from repobrowser.utils.uri import (
    append,
    canonical_location,
    host_of,
    https_variant,
    is_https,
    matches_any,
)

logger = get_logger(__name__)

Analysis = tuple[Repository | None, list[str]]


@dataclass
class CrawlContext:
    """
    State of one crawl invocation.

    repositories is the memoization map and the single source of truth for
    repository identity. The task maps share in-flight work between
    concurrent visitors of the same location.
    """

    ignore_list: list[str] = field(default_factory=list)
    cancel_event: asyncio.Event | None = None
    repositories: dict[str, Repository] = field(default_factory=dict)
    upgrades: dict[str, asyncio.Task] = field(default_factory=dict)
    analyses: dict[str, asyncio.Task] = field(default_factory=dict)

    def get_or_add(self, repository: Repository) -> tuple[Repository, bool]:
        """
        Insert a repository unless its location is already known.

        Returns:
            The stored repository and whether this call inserted it
        """
        existing = self.repositories.get(repository.uri)
        if existing is not None:
            return existing, False
        self.repositories[repository.uri] = repository
        return repository, True

    async def once(
        self, tasks: dict[str, asyncio.Task], key: str, factory: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Run factory at most once per key; concurrent callers share the result."""
        task = tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            tasks[key] = task
        return await asyncio.shield(task)

    def is_ignored(self, *locations: str) -> bool:
        return any(matches_any(location, self.ignore_list) for location in locations)

    def cancel_pending(self) -> None:
        for task in [*self.upgrades.values(), *self.analyses.values()]:
            if not task.done():
                task.cancel()


class RepositoryCrawler:
    """
    Crawls a tree of model repositories starting from a root location.

    Every repository publishes ilisite.xml, ilimodels.xml and ilidata.xml.
    The site descriptor names subsidiary repositories, which are crawled
    recursively and concurrently.

    Failure policy:
    - site or model index unavailable/unparseable: repository omitted (error)
    - data index unavailable/unparseable: repository kept without catalogs (warning)
    - losing a memoization race: silently attach to the winning node
    """

    def __init__(self, fetcher: DocumentFetcher):
        """
        Initialize repository crawler.

        Args:
            fetcher: Fetcher used for descriptor documents and HTTPS checks
        """
        self.fetcher = fetcher

    async def crawl(
        self,
        root_uri: str,
        ignore_list: list[str] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> dict[str, Repository]:
        """
        Crawl the repository graph below root_uri.

        Args:
            root_uri: Location of the root repository
            ignore_list: Locations whose subtrees are excluded
            cancel_event: Optional cancellation signal; pending fetches fail
                like transport errors once it is set

        Returns:
            Every successfully analysed repository keyed by canonical location;
            empty if the root itself cannot be analysed
        """
        context = CrawlContext(ignore_list=list(ignore_list or []), cancel_event=cancel_event)

        logger.info("Crawling model repositories from {}", escape_newlines(root_uri))
        try:
            await self._crawl_repository(context, root_uri, parent=None)
        finally:
            context.cancel_pending()

        logger.info(
            "Crawl of {} finished with {} repositories",
            escape_newlines(root_uri),
            len(context.repositories),
        )
        return dict(context.repositories)

    async def _crawl_repository(
        self, context: CrawlContext, uri: str, parent: Repository | None
    ) -> Repository | None:
        try:
            declared = canonical_location(uri)
        except ValidationError as e:
            logger.warning("Skipping invalid repository location: {}", escape_newlines(e.message))
            return None

        location = await context.once(
            context.upgrades, declared, lambda: self._prefer_https(context, declared)
        )

        if context.is_ignored(location, declared):
            logger.info("Skipping ignored repository {}", escape_newlines(location))
            return None

        parent_uri = parent.uri if parent else None

        existing = context.repositories.get(location)
        if existing is not None:
            existing.add_parent(parent_uri)
            return existing

        repository, subsidiaries = await context.once(
            context.analyses, location, lambda: self._analyse_repository(context, location)
        )
        if repository is None:
            return None

        repository, added = context.get_or_add(repository)
        repository.add_parent(parent_uri)
        if not added:
            return repository

        children = await asyncio.gather(
            *(self._crawl_repository(context, subsidiary, repository) for subsidiary in subsidiaries)
        )
        repository.subsidiary_sites.update(child.uri for child in children if child is not None)
        return repository

    async def _prefer_https(self, context: CrawlContext, location: str) -> str:
        """Use the HTTPS variant of an HTTP location if it answers a HEAD request."""
        if is_https(location):
            return location

        try:
            https_location = https_variant(location)
        except ValidationError:
            return location

        if await self.fetcher.exists_cancellable(https_location, context.cancel_event):
            logger.debug("Upgraded {} to HTTPS", escape_newlines(location))
            return https_location
        return location

    async def _analyse_repository(self, context: CrawlContext, location: str) -> Analysis:
        """
        Fetch and map the three descriptor documents of one repository.

        Returns:
            The repository node (None if unreachable) and its declared subsidiaries
        """
        site, models, catalogs = await asyncio.gather(
            self._fetch_site(context, location),
            self._fetch_models(context, location),
            self._fetch_catalogs(context, location),
            return_exceptions=True,
        )

        for result in (site, models, catalogs):
            if isinstance(result, RepoBrowserError):
                logger.error(
                    "Analysis of {} failed: {}",
                    escape_newlines(location),
                    escape_newlines(result.message),
                )
                return None, []
            if isinstance(result, BaseException):
                raise result

        if site is None:
            logger.error(
                "Analysis of {} failed: {} declares no site", escape_newlines(location), ILISITE_FILE
            )
            return None, []

        repository = Repository(
            uri=location,
            name=site.name or host_of(location),
            title=site.title,
            short_description=site.short_description,
            owner=site.owner,
            technical_contact=site.technical_contact,
            models=models,
            catalogs=remove_precursor_catalog_versions(
                dataset.to_catalog(location) for dataset in catalogs
            ),
        )
        logger.debug(
            "Analysed {}: {} models, {} catalogs, {} subsidiary sites",
            escape_newlines(location),
            len(repository.models),
            len(repository.catalogs),
            len(site.subsidiary_sites),
        )
        return repository, site.subsidiary_sites

    async def _fetch_site(self, context: CrawlContext, location: str) -> Site | None:
        content = await self.fetcher.fetch_cancellable(
            append(location, ILISITE_FILE), context.cancel_event
        )
        return parse_ilisite(content)

    async def _fetch_models(self, context: CrawlContext, location: str) -> list[Model]:
        content = await self.fetcher.fetch_cancellable(
            append(location, ILIMODELS_FILE), context.cancel_event
        )
        return [metadata.to_model() for metadata in parse_ilimodels(content)]

    async def _fetch_catalogs(self, context: CrawlContext, location: str) -> list[DatasetMetadata]:
        """The data index is best effort: failures leave the repository without catalogs."""
        url = append(location, ILIDATA_FILE)
        try:
            content = await self.fetcher.fetch_cancellable(url, context.cancel_event)
            return parse_ilidata(content)
        except RepoBrowserError as e:
            logger.warning("Could not analyse {}: {}", escape_newlines(url), escape_newlines(e.message))
            return []
