"""
Factory modules for creating crawler components.
"""

from repobrowser.core.factory.fetcher_factory import FetcherFactory

__all__ = [
    "FetcherFactory",
]
