"""
Data models for the repository browser.

Core models:
- Repository: Node of the crawled repository graph
- Model: Schema/model entry of a repository
- Catalog: Reference-data catalog entry
- InterlisFile: Content-addressed model file
- RepositorySnapshot: Result of one full crawl run
"""

from repobrowser.models.catalog import Catalog
from repobrowser.models.interlis_file import InterlisFile, compute_md5
from repobrowser.models.model import Model
from repobrowser.models.repository import Repository, RepositorySnapshot

__all__ = [
    "Repository",
    "RepositorySnapshot",
    "Model",
    "Catalog",
    "InterlisFile",
    "compute_md5",
]
