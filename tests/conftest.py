"""
Shared fixtures for crawler tests.

Repositories are served by an in-memory HTTP server plugged into the real
HttpDocumentFetcher through httpx.MockTransport.
"""

from collections import Counter
from collections.abc import AsyncGenerator

import httpx
import pytest

from repobrowser.core.fetcher.http import HttpDocumentFetcher

TRANSFER_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<TRANSFER xmlns="http://www.interlis.ch/INTERLIS2.3">
  <HEADERSECTION SENDER="tests" VERSION="2.3"/>
  <DATASECTION>
"""

TRANSFER_FOOTER = """  </DATASECTION>
</TRANSFER>
"""


def _element(tag: str, value) -> str:
    if value is None:
        return ""
    return f"<{tag}>{value}</{tag}>"


def site_xml(
    name: str | None = None,
    title: str | None = None,
    subsidiaries: list[str] = (),
    parents: list[str] = (),
) -> str:
    """Build an ilisite.xml document."""
    subsidiary = "".join(
        f"<IliSite09.RepositoryLocation_><value>{uri}</value></IliSite09.RepositoryLocation_>"
        for uri in subsidiaries
    )
    parent = "".join(
        f"<IliSite09.RepositoryLocation_><value>{uri}</value></IliSite09.RepositoryLocation_>"
        for uri in parents
    )
    return (
        TRANSFER_HEADER
        + '<IliSite09.SiteMetadata BID="b1"><IliSite09.SiteMetadata.Site TID="1">'
        + _element("Name", name)
        + _element("Title", title)
        + _element("Owner", "mailto:owner@example.org")
        + (f"<subsidiarySite>{subsidiary}</subsidiarySite>" if subsidiary else "")
        + (f"<parentSite>{parent}</parentSite>" if parent else "")
        + "</IliSite09.SiteMetadata.Site></IliSite09.SiteMetadata>"
        + TRANSFER_FOOTER
    )


def models_xml(models: list[dict] = (), schema: str = "IliRepository09") -> str:
    """
    Build an ilimodels.xml document.

    Each model is a dict with name and optional file, version, md5, tags,
    depends_on.
    """
    entries = []
    for tid, model in enumerate(models, start=1):
        depends = "".join(
            f"<{schema}.ModelName_><value>{dependency}</value></{schema}.ModelName_>"
            for dependency in model.get("depends_on", [])
        )
        entries.append(
            f'<{schema}.RepositoryIndex.ModelMetadata TID="{tid}">'
            + _element("Name", model["name"])
            + _element("SchemaLanguage", model.get("schema_language", "ili2_3"))
            + _element("File", model.get("file"))
            + _element("Version", model.get("version", "2024-01-01"))
            + _element("Tags", model.get("tags"))
            + _element("md5", model.get("md5"))
            + (f"<dependsOnModel>{depends}</dependsOnModel>" if depends else "")
            + f"</{schema}.RepositoryIndex.ModelMetadata>"
        )
    return (
        TRANSFER_HEADER
        + f'<{schema}.RepositoryIndex BID="b1">'
        + "".join(entries)
        + f"</{schema}.RepositoryIndex>"
        + TRANSFER_FOOTER
    )


def data_xml(datasets: list[dict] = ()) -> str:
    """
    Build an ilidata.xml document.

    Each dataset is a dict with id and optional version, precursor, title,
    categories (defaults to the reference-data code), files, baskets.
    """
    entries = []
    for tid, dataset in enumerate(datasets, start=1):
        categories = dataset.get("categories", ["http://codes.interlis.ch/type/referenceData"])
        files = "".join(
            "<DatasetIdx16.DataFile><file><DatasetIdx16.File>"
            f"<path>{path}</path>"
            "</DatasetIdx16.File></file></DatasetIdx16.DataFile>"
            for path in dataset.get("files", [])
        )
        baskets = "".join(
            "<DatasetIdx16.DataIndex.BasketMetadata><model><DatasetIdx16.ModelLink>"
            f"<name>{link}</name>"
            "</DatasetIdx16.ModelLink></model></DatasetIdx16.DataIndex.BasketMetadata>"
            for link in dataset.get("baskets", [])
        )
        title = ""
        if dataset.get("title"):
            title = (
                "<title><DatasetIdx16.MultilingualText><LocalisedText>"
                "<DatasetIdx16.LocalisedText>"
                f"<Language>de</Language><Text>{dataset['title']}</Text>"
                "</DatasetIdx16.LocalisedText>"
                "</LocalisedText></DatasetIdx16.MultilingualText></title>"
            )
        entries.append(
            f'<DatasetIdx16.DataIndex.DatasetMetadata TID="{tid}">'
            + _element("id", dataset["id"])
            + _element("version", dataset.get("version"))
            + _element("precursorVersion", dataset.get("precursor"))
            + _element("owner", dataset.get("owner"))
            + title
            + "<categories>"
            + "".join(
                f"<DatasetIdx16.Code_><value>{code}</value></DatasetIdx16.Code_>"
                for code in categories
            )
            + "</categories>"
            + (f"<files>{files}</files>" if files else "")
            + (f"<baskets>{baskets}</baskets>" if baskets else "")
            + "</DatasetIdx16.DataIndex.DatasetMetadata>"
        )
    return (
        TRANSFER_HEADER
        + '<DatasetIdx16.DataIndex BID="b1">'
        + "".join(entries)
        + "</DatasetIdx16.DataIndex>"
        + TRANSFER_FOOTER
    )


class FakeRepositoryServer:
    """
    In-memory document server.

    GET serves registered documents (404 otherwise). HEAD answers 200 for any
    location that is a registered document or a prefix of one, which is
    what the HTTPS upgrade check asks for. Every request is recorded.
    """

    def __init__(self):
        self.documents: dict[str, bytes] = {}
        self.failures: dict[str, int | type[httpx.HTTPError]] = {}
        self.requests: list[tuple[str, str]] = []

    def add_document(self, url: str, content: str | bytes) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.documents[url.rstrip("/")] = content

    def add_repository(
        self,
        base: str,
        name: str | None = "Repository",
        subsidiaries: list[str] = (),
        models: list[dict] = (),
        datasets: list[dict] = (),
    ) -> None:
        """Register the three descriptor documents of a repository."""
        base = base.rstrip("/")
        self.add_document(f"{base}/ilisite.xml", site_xml(name=name, subsidiaries=subsidiaries))
        self.add_document(f"{base}/ilimodels.xml", models_xml(models))
        self.add_document(f"{base}/ilidata.xml", data_xml(datasets))

    def fail(self, url: str, failure: int | type[httpx.HTTPError] = 500) -> None:
        """Make a location answer with an error status or raise a transport error."""
        self.failures[url.rstrip("/")] = failure

    def count(self, url: str, method: str = "GET") -> int:
        return Counter(self.requests)[(method, url.rstrip("/"))]

    def requested(self, prefix: str) -> bool:
        """Whether any request was made below prefix."""
        return any(url.startswith(prefix.rstrip("/")) for _, url in self.requests)

    def handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url).rstrip("/")
        self.requests.append((request.method, url))

        failure = self.failures.get(url)
        if isinstance(failure, int):
            return httpx.Response(failure)
        if failure is not None:
            raise failure(f"Simulated failure for {url}", request=request)

        if request.method == "HEAD":
            prefix = url + "/"
            served = url in self.documents or any(doc.startswith(prefix) for doc in self.documents)
            return httpx.Response(200 if served else 404)

        content = self.documents.get(url)
        if content is None:
            return httpx.Response(404)
        return httpx.Response(200, content=content, headers={"Content-Type": "application/xml"})


@pytest.fixture
def server() -> FakeRepositoryServer:
    """Empty in-memory repository server."""
    return FakeRepositoryServer()


@pytest.fixture
async def fetcher(server) -> AsyncGenerator:
    """HTTP fetcher wired to the in-memory server."""
    http_fetcher = HttpDocumentFetcher(
        timeout=5.0, max_connections=4, transport=httpx.MockTransport(server.handle)
    )
    yield http_fetcher
    await http_fetcher.close()
