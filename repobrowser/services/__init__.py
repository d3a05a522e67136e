"""
Services for the repository browser.

High-level crawl pipeline:
- RepositoryCrawler: Builds the deduplicated repository graph
- remove_precursor_catalog_versions: Keeps only the head of each catalog version chain
- ContentHashResolver: Fills in missing model file hashes, one fetch per file
- RepositoryUpdateService: One full crawl run producing a snapshot
"""

from repobrowser.services.catalog_resolver import remove_precursor_catalog_versions
from repobrowser.services.file_resolver import ContentHashResolver
from repobrowser.services.repository_crawler import CrawlContext, RepositoryCrawler
from repobrowser.services.repository_update import RepositoryUpdateService

__all__ = [
    "RepositoryCrawler",
    "CrawlContext",
    "remove_precursor_catalog_versions",
    "ContentHashResolver",
    "RepositoryUpdateService",
]
