"""
Repository node of the crawled metadata graph.
"""

from collections.abc import Iterator
from datetime import datetime

from pydantic import BaseModel, Field

from repobrowser.models.catalog import Catalog
from repobrowser.models.interlis_file import InterlisFile
from repobrowser.models.model import Model
from repobrowser.utils.uri import host_of


class Repository(BaseModel):
    """
    One metadata site in the repository graph.

    Identity is the canonical location (uri). Edges are sets of
    canonical locations; a node may have several parents and the graph may
    contain cycles.
    """

    uri: str = Field(..., description="Canonical location (HTTPS-preferred)")
    name: str = Field(..., description="Display name (host if undeclared)")
    title: str | None = None
    short_description: str | None = None
    owner: str | None = None
    technical_contact: str | None = None

    subsidiary_sites: set[str] = Field(default_factory=set, description="Child locations")
    parent_sites: set[str] = Field(default_factory=set, description="Parent locations")

    models: list[Model] = Field(default_factory=list)
    catalogs: list[Catalog] = Field(default_factory=list)

    @property
    def host_name(self) -> str:
        """Host part of the repository location."""
        return host_of(self.uri)

    def add_parent(self, parent_uri: str | None) -> None:
        """Register an additional parent edge (no-op for the root)."""
        if parent_uri:
            self.parent_sites.add(parent_uri)


class RepositorySnapshot(BaseModel):
    """
    Result of one full crawl run.

    Handed to the caller for atomic persistence; never updated afterwards.
    """

    root_uri: str
    repositories: dict[str, Repository] = Field(default_factory=dict)
    files: dict[str, InterlisFile] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)

    def models(self) -> Iterator[tuple[Repository, Model]]:
        """Iterate every model of every repository together with its repository."""
        for repository in self.repositories.values():
            for model in repository.models:
                yield repository, model

    @property
    def is_empty(self) -> bool:
        return not self.repositories
