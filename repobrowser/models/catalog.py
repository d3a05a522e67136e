"""Reference-data catalog model."""

from datetime import date

from pydantic import BaseModel, Field


class Catalog(BaseModel):
    """
    Catalog entry of a repository's data index.

    Several versions of the same identifier may form a chain through
    precursor_version; only the chain head survives resolution.
    """

    identifier: str = Field(..., description="Dataset identifier")
    version: str | None = Field(default=None, description="Dataset version")
    precursor_version: str | None = Field(default=None, description="Direct predecessor version")
    publishing_date: date | None = None
    owner: str | None = None
    title: str = ""
    files: list[str] = Field(default_factory=list, description="Absolute file locations")
    referenced_models: list[str] = Field(default_factory=list, description="Referenced models")
