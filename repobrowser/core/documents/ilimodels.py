"""
Model index (ilimodels.xml) mapping.

Two historical schema generations exist for the same document,
IliRepository09 and IliRepository20. They are a closed set of tagged
variants sharing one projection to the internal Model.
"""

from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from repobrowser.core.documents.xml_support import (
    distinct,
    load_datasection,
    map_fields,
    texts,
    validate,
)
from repobrowser.models.model import Model
from repobrowser.utils.logger import escape_newlines, get_logger

logger = get_logger(__name__)

ILIMODELS_FILE = "ilimodels.xml"

_MODEL_FIELDS = {
    "Name": "name",
    "SchemaLanguage": "schema_language",
    "File": "file",
    "Version": "version",
    "publishingDate": "publishing_date",
    "Tags": "tags",
    "shortDescription": "short_description",
    "Issuer": "issuer",
    "technicalContact": "technical_contact",
    "furtherInformation": "further_information",
    "md5": "md5",
}


class _ModelMetadataBase(BaseModel):
    """Fields common to every model index generation."""

    name: str
    schema_language: str | None = None
    file: str | None = None
    version: str | None = None
    publishing_date: date | None = None
    depends_on_model: list[str] = Field(default_factory=list)
    tags: str | None = None
    short_description: str | None = None
    issuer: str | None = None
    technical_contact: str | None = None
    further_information: str | None = None
    md5: str | None = None

    def to_model(self) -> Model:
        """Project the document entry onto the internal Model."""
        tags = [tag.strip() for tag in (self.tags or "").split(",") if tag.strip()]
        return Model(
            name=self.name,
            schema_language=self.schema_language,
            file=self.file,
            version=self.version,
            publishing_date=self.publishing_date,
            depends_on_model=distinct(self.depends_on_model),
            tags=distinct(tags),
            short_description=self.short_description,
            issuer=self.issuer,
            technical_contact=self.technical_contact,
            further_information=self.further_information,
            md5=self.md5.lower() if self.md5 else None,
        )


class ModelMetadata09(_ModelMetadataBase):
    schema_version: Literal["IliRepository09"] = "IliRepository09"


class ModelMetadata20(_ModelMetadataBase):
    schema_version: Literal["IliRepository20"] = "IliRepository20"


ModelMetadata = Annotated[
    ModelMetadata09 | ModelMetadata20, Field(discriminator="schema_version")
]

SCHEMA_VERSIONS = ("IliRepository09", "IliRepository20")


class _ModelIndex(BaseModel):
    entries: list[ModelMetadata] = Field(default_factory=list)


def parse_ilimodels(xml: bytes | str) -> list[ModelMetadata09 | ModelMetadata20]:
    """
    Parse an ilimodels.xml document.

    Returns:
        Flat list of every model entry of every repository index

    Raises:
        DocumentParseError: If the document is malformed or an entry is invalid
    """
    section = load_datasection(xml, ILIMODELS_FILE)
    if section is None:
        return []

    entries = []
    for index in section:
        if not isinstance(index.tag, str) or not index.tag.endswith(".RepositoryIndex"):
            continue

        schema_version = index.tag.split(".", 1)[0]
        if schema_version not in SCHEMA_VERSIONS:
            logger.debug("Skipping unknown repository index {}", escape_newlines(index.tag))
            continue

        for metadata in index.findall(f"{schema_version}.RepositoryIndex.ModelMetadata"):
            data = map_fields(metadata, _MODEL_FIELDS)
            data["depends_on_model"] = texts(metadata, "dependsOnModel/*/value")
            data["schema_version"] = schema_version
            entries.append(data)

    return validate(_ModelIndex, {"entries": entries}, ILIMODELS_FILE).entries
