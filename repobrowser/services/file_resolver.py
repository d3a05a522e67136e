"""
Content hash resolution for model files.

Runs once over the whole crawled graph: every model without a content hash
gets one computed from its file, each distinct file location is fetched at
most once per pass, and already known content is reused by hash.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from repobrowser.core.fetcher.base import DocumentFetcher
from repobrowser.models.interlis_file import InterlisFile
from repobrowser.models.model import Model
from repobrowser.models.repository import Repository
from repobrowser.utils.exceptions import RepoBrowserError
from repobrowser.utils.logger import escape_newlines, get_logger

logger = get_logger(__name__)


@dataclass
class ResolutionPass:
    """State of one resolution pass: files by hash and fetches by location."""

    files: dict[str, InterlisFile] = field(default_factory=dict)
    fetches: dict[str, asyncio.Task] = field(default_factory=dict)
    cancel_event: asyncio.Event | None = None


class ContentHashResolver:
    """
    Fills in missing content hashes of crawled models.

    - A model whose declared hash is already known is enriched with the
      cached content, without any fetch.
    - Any other model with a file has that file fetched and hashed (MD5).
      Concurrent requests for the same location share a single fetch.
    - A failed fetch leaves the affected models without hash; all other
      models are still resolved.
    """

    def __init__(self, fetcher: DocumentFetcher):
        """
        Initialize content hash resolver.

        Args:
            fetcher: Fetcher used for model files
        """
        self.fetcher = fetcher

    async def resolve_hashes(
        self,
        known_files: Mapping[str, InterlisFile] | Iterable[InterlisFile],
        repositories: Mapping[str, Repository] | Iterable[Repository],
        cancel_event: asyncio.Event | None = None,
    ) -> dict[str, InterlisFile]:
        """
        Resolve content hashes of all models in place.

        Args:
            known_files: Previously stored files (by hash, or as plain collection)
            repositories: Crawled repositories
            cancel_event: Optional cancellation signal

        Returns:
            Known files plus every file discovered during this pass, by hash
        """
        if isinstance(known_files, Mapping):
            known_files = known_files.values()
        if isinstance(repositories, Mapping):
            repositories = repositories.values()

        resolution = ResolutionPass(
            files={file.md5.lower(): file for file in known_files},
            cancel_event=cancel_event,
        )
        known_count = len(resolution.files)

        pending = []
        for repository in repositories:
            for model in repository.models:
                if model.md5 and model.md5 in resolution.files:
                    model.interlis_file = resolution.files[model.md5]
                    continue

                location = model.file_uri(repository.uri)
                if location is None:
                    logger.debug("Model {} declares no file", escape_newlines(model.name))
                    continue
                pending.append(self._resolve_model(resolution, model, location))

        try:
            await asyncio.gather(*pending)
        finally:
            for task in resolution.fetches.values():
                if not task.done():
                    task.cancel()

        logger.info(
            "Resolved model files: {} fetched, {} new",
            len(resolution.fetches),
            len(resolution.files) - known_count,
        )
        return resolution.files

    async def _resolve_model(self, resolution: ResolutionPass, model: Model, location: str) -> None:
        task = resolution.fetches.get(location)
        if task is None:
            task = asyncio.ensure_future(self._fetch_file(resolution, location))
            resolution.fetches[location] = task

        file = await asyncio.shield(task)
        if file is None:
            return

        file = resolution.files.setdefault(file.md5, file)
        if model.md5 and model.md5 != file.md5:
            logger.warning(
                "Model {} declares hash {} but {} hashes to {}",
                escape_newlines(model.name),
                escape_newlines(model.md5),
                escape_newlines(location),
                file.md5,
            )
        model.md5 = file.md5
        model.interlis_file = file

    async def _fetch_file(self, resolution: ResolutionPass, location: str) -> InterlisFile | None:
        try:
            content = await self.fetcher.fetch_cancellable(location, resolution.cancel_event)
        except RepoBrowserError as e:
            logger.warning(
                "Could not fetch model file {}: {}",
                escape_newlines(location),
                escape_newlines(e.message),
            )
            return None
        return InterlisFile.from_bytes(content)
