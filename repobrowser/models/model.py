"""
Model entry declared in a repository's model index.
"""

from datetime import date

from pydantic import BaseModel, Field

from repobrowser.models.interlis_file import InterlisFile
from repobrowser.utils.uri import append


class Model(BaseModel):
    """
    One schema/model unit of a repository.

    The content hash (md5) is the canonical identity of the file content:
    two models may share a file without being otherwise related.
    It is filled in by the content hash resolver when the index omits it.
    """

    name: str = Field(..., description="Model name")
    schema_language: str | None = Field(default=None, description="Schema language tag")
    file: str | None = Field(default=None, description="File path relative to the repository")
    version: str | None = Field(default=None, description="Model version string")
    publishing_date: date | None = Field(default=None, description="Publishing date")
    depends_on_model: list[str] = Field(default_factory=list, description="Depended-on models")
    tags: list[str] = Field(default_factory=list, description="Tags")
    short_description: str | None = None
    issuer: str | None = None
    technical_contact: str | None = None
    further_information: str | None = None
    md5: str | None = Field(default=None, description="Content hash of the model file")

    interlis_file: InterlisFile | None = Field(
        default=None, exclude=True, description="Cached file content"
    )

    def file_uri(self, repository_uri: str) -> str | None:
        """
        Absolute location of the model file.

        Args:
            repository_uri: Base location of the owning repository

        Returns:
            Absolute file location, or None if the model declares no file
        """
        if not self.file:
            return None
        return append(repository_uri, self.file)
