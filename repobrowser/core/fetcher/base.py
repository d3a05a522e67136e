"""
Abstract base class for document fetchers.
Retrieves repository descriptor documents and model files.
"""

import asyncio
import contextlib
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import TypeVar

from repobrowser.utils.exceptions import FetchCancelledError

T = TypeVar("T")


class DocumentFetcher(ABC):
    """
    Abstract base for document fetchers.

    Responsibilities:
    - Retrieve raw bytes of a remote document
    - Answer lightweight existence checks (used for the HTTPS upgrade)
    - Honour a caller supplied cancellation signal
    """

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """
        Retrieve the content of a remote document.

        Args:
            url: Absolute document location

        Returns:
            Raw document bytes

        Raises:
            FetchError: If the document cannot be retrieved
        """
        pass

    @abstractmethod
    async def exists(self, url: str) -> bool:
        """
        Check whether a location answers successfully, without its body.

        Never raises for transport problems; any failure means False.

        Args:
            url: Absolute location to check

        Returns:
            True if the location responded with a 2xx or 3xx status
        """
        pass

    async def fetch_cancellable(
        self, url: str, cancel_event: asyncio.Event | None = None
    ) -> bytes:
        """
        Retrieve a document, giving up when the cancellation signal fires.

        Raises:
            FetchCancelledError: If cancel_event is set before the fetch completes
            FetchError: If the document cannot be retrieved
        """
        return await self._race(self.fetch(url), cancel_event, url)

    async def exists_cancellable(
        self, url: str, cancel_event: asyncio.Event | None = None
    ) -> bool:
        """Existence check that reports False once cancelled."""
        try:
            return await self._race(self.exists(url), cancel_event, url)
        except FetchCancelledError:
            return False

    @staticmethod
    async def _race(awaitable: Awaitable[T], cancel_event: asyncio.Event | None, url: str) -> T:
        if cancel_event is None:
            return await awaitable

        fetch_task = asyncio.ensure_future(awaitable)
        if cancel_event.is_set():
            fetch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await fetch_task
            raise FetchCancelledError(f"Fetch of {url} cancelled", context={"url": url})

        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({fetch_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not fetch_task.done():
                fetch_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await fetch_task

        if fetch_task.cancelled():
            raise FetchCancelledError(f"Fetch of {url} cancelled", context={"url": url})
        return fetch_task.result()

    async def close(self) -> None:
        """Release underlying resources."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
