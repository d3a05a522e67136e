"""Site descriptor (ilisite.xml) mapping."""

from pydantic import BaseModel, Field

from repobrowser.core.documents.xml_support import load_datasection, map_fields, texts, validate

ILISITE_FILE = "ilisite.xml"

_SITE_PATH = "IliSite09.SiteMetadata/IliSite09.SiteMetadata.Site"
_LOCATION = "IliSite09.RepositoryLocation_/value"

_SITE_FIELDS = {
    "Name": "name",
    "Title": "title",
    "shortDescription": "short_description",
    "Owner": "owner",
    "technicalContact": "technical_contact",
}


class Site(BaseModel):
    """Site metadata of one repository."""

    name: str | None = None
    title: str | None = None
    short_description: str | None = None
    owner: str | None = None
    technical_contact: str | None = None
    # Parent sites are informational; the crawler derives the real edges
    parent_sites: list[str] = Field(default_factory=list)
    subsidiary_sites: list[str] = Field(default_factory=list)


def parse_ilisite(xml: bytes | str) -> Site | None:
    """
    Parse an ilisite.xml document.

    Returns:
        The declared Site, or None if the document declares none

    Raises:
        DocumentParseError: If the document is malformed
    """
    section = load_datasection(xml, ILISITE_FILE)
    if section is None:
        return None

    site = section.find(_SITE_PATH)
    if site is None:
        return None

    data = map_fields(site, _SITE_FIELDS)
    data["parent_sites"] = texts(site, f"parentSite/{_LOCATION}")
    data["subsidiary_sites"] = texts(site, f"subsidiarySite/{_LOCATION}")
    return validate(Site, data, ILISITE_FILE)
