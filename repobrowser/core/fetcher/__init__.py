"""
Fetcher abstraction layer for repository documents and model files.

Supported transports:
- HTTP(S) (httpx)
"""
from repobrowser.core.fetcher.base import DocumentFetcher
from repobrowser.core.fetcher.http import HttpDocumentFetcher

__all__ = [
    "DocumentFetcher",
    "HttpDocumentFetcher",
]
