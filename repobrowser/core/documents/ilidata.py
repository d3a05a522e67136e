"""
Data index (ilidata.xml) mapping.

Only datasets categorised as reference data are catalogs; everything else
in the index is ignored.
"""

from datetime import date

from pydantic import BaseModel, Field

from repobrowser.core.documents.xml_support import (
    distinct,
    load_datasection,
    map_fields,
    text,
    texts,
    validate,
)
from repobrowser.models.catalog import Catalog
from repobrowser.utils.uri import append

ILIDATA_FILE = "ilidata.xml"

CATALOG_CODE = "http://codes.interlis.ch/type/referenceData"
MODEL_CODE = "http://codes.interlis.ch/model/"

_DATASET_PATH = "DatasetIdx16.DataIndex/DatasetIdx16.DataIndex.DatasetMetadata"

_DATASET_FIELDS = {
    "id": "id",
    "version": "version",
    "precursorVersion": "precursor_version",
    "publishingDate": "publishing_date",
    "owner": "owner",
}


class LocalisedText(BaseModel):
    language: str | None = None
    text: str | None = None


class DatasetMetadata(BaseModel):
    """One dataset entry of a data index."""

    id: str
    version: str | None = None
    precursor_version: str | None = None
    publishing_date: date | None = None
    owner: str | None = None
    title: list[LocalisedText] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    file_paths: list[str] = Field(default_factory=list)
    basket_models: list[str] = Field(default_factory=list)

    @property
    def is_catalog(self) -> bool:
        return CATALOG_CODE in self.categories

    def referenced_models(self) -> list[str]:
        """
        Models referenced by category codes and by basket model links.

        Basket links name a topic (Model.Topic); only the model part counts.
        """
        from_codes = [
            code[len(MODEL_CODE) :]
            for code in self.categories
            if code.startswith(MODEL_CODE) and len(code) > len(MODEL_CODE)
        ]
        from_baskets = [link.split(".", 1)[0] for link in self.basket_models]
        return distinct([name for name in from_codes + from_baskets if name.strip()])

    def title_text(self) -> str:
        """The language-neutral title, falling back to the first localised one."""
        for localised in self.title:
            if not localised.language and localised.text:
                return localised.text
        for localised in self.title:
            if localised.text:
                return localised.text
        return ""

    def to_catalog(self, repository_uri: str) -> Catalog:
        """Project the dataset onto a Catalog with absolute file locations."""
        return Catalog(
            identifier=self.id,
            version=self.version,
            precursor_version=self.precursor_version,
            publishing_date=self.publishing_date,
            owner=self.owner,
            title=self.title_text(),
            files=[append(repository_uri, path) for path in self.file_paths],
            referenced_models=self.referenced_models(),
        )


class _DataIndex(BaseModel):
    datasets: list[DatasetMetadata] = Field(default_factory=list)


def parse_ilidata(xml: bytes | str) -> list[DatasetMetadata]:
    """
    Parse an ilidata.xml document.

    Returns:
        Flat list of every catalog dataset

    Raises:
        DocumentParseError: If the document is malformed or a catalog entry is invalid
    """
    section = load_datasection(xml, ILIDATA_FILE)
    if section is None:
        return []

    datasets = []
    for metadata in section.findall(_DATASET_PATH):
        data = map_fields(metadata, _DATASET_FIELDS)
        data["title"] = [
            {"language": text(localised, "Language"), "text": text(localised, "Text")}
            for localised in metadata.findall(
                "title/DatasetIdx16.MultilingualText/LocalisedText/DatasetIdx16.LocalisedText"
            )
        ]
        data["categories"] = texts(metadata, "categories/DatasetIdx16.Code_/value")
        if CATALOG_CODE not in data["categories"]:
            continue
        data["file_paths"] = texts(metadata, "files/DatasetIdx16.DataFile/file/DatasetIdx16.File/path")
        data["basket_models"] = texts(
            metadata,
            "baskets/DatasetIdx16.DataIndex.BasketMetadata/model/DatasetIdx16.ModelLink/name",
        )
        datasets.append(data)

    return validate(_DataIndex, {"datasets": datasets}, ILIDATA_FILE).datasets
