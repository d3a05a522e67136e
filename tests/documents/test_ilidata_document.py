"""
Tests for data index mapping.
"""

from datetime import date

import pytest

from repobrowser.core.documents.ilidata import (
    CATALOG_CODE,
    DatasetMetadata,
    LocalisedText,
    parse_ilidata,
)
from repobrowser.utils.exceptions import DocumentParseError

SAMPLE_ILIDATA = """<?xml version="1.0" encoding="UTF-8"?>
<TRANSFER xmlns="http://www.interlis.ch/INTERLIS2.3">
  <HEADERSECTION SENDER="ili2c" VERSION="2.3"/>
  <DATASECTION>
    <DatasetIdx16.DataIndex BID="b1">
      <DatasetIdx16.DataIndex.DatasetMetadata TID="1">
        <id>ch.admin.codes.Kantone</id>
        <version>2021-11-01</version>
        <precursorVersion>2019-08-09</precursorVersion>
        <publishingDate>2021-11-01</publishingDate>
        <owner>mailto:models@geo.admin.ch</owner>
        <title>
          <DatasetIdx16.MultilingualText>
            <LocalisedText>
              <DatasetIdx16.LocalisedText><Language>de</Language><Text>Kantone</Text></DatasetIdx16.LocalisedText>
              <DatasetIdx16.LocalisedText><Text>Cantons</Text></DatasetIdx16.LocalisedText>
            </LocalisedText>
          </DatasetIdx16.MultilingualText>
        </title>
        <categories>
          <DatasetIdx16.Code_><value>http://codes.interlis.ch/type/referenceData</value></DatasetIdx16.Code_>
          <DatasetIdx16.Code_><value>http://codes.interlis.ch/model/CHAdminCodes_V1</value></DatasetIdx16.Code_>
          <DatasetIdx16.Code_><value>http://codes.interlis.ch/model/</value></DatasetIdx16.Code_>
        </categories>
        <files>
          <DatasetIdx16.DataFile><file><DatasetIdx16.File><path>refdata/kantone.xml</path></DatasetIdx16.File></file></DatasetIdx16.DataFile>
        </files>
        <baskets>
          <DatasetIdx16.DataIndex.BasketMetadata><model><DatasetIdx16.ModelLink><name>CHAdminCodes_V1.CHAdminCodes</name></DatasetIdx16.ModelLink></model></DatasetIdx16.DataIndex.BasketMetadata>
          <DatasetIdx16.DataIndex.BasketMetadata><model><DatasetIdx16.ModelLink><name>Units.Topic</name></DatasetIdx16.ModelLink></model></DatasetIdx16.DataIndex.BasketMetadata>
        </baskets>
      </DatasetIdx16.DataIndex.DatasetMetadata>
      <DatasetIdx16.DataIndex.DatasetMetadata TID="2">
        <id>ch.admin.toml</id>
        <categories>
          <DatasetIdx16.Code_><value>http://codes.interlis.ch/type/metaconfig</value></DatasetIdx16.Code_>
        </categories>
      </DatasetIdx16.DataIndex.DatasetMetadata>
    </DatasetIdx16.DataIndex>
  </DATASECTION>
</TRANSFER>
"""


@pytest.mark.unit
class TestParseIlidata:
    """Tests for parse_ilidata."""

    def test_only_catalogs_returned(self):
        """Test datasets without the reference-data category are dropped."""
        datasets = parse_ilidata(SAMPLE_ILIDATA)

        assert [dataset.id for dataset in datasets] == ["ch.admin.codes.Kantone"]

    def test_dataset_fields(self):
        """Test dataset fields are mapped."""
        dataset = parse_ilidata(SAMPLE_ILIDATA.encode("utf-8"))[0]

        assert dataset.version == "2021-11-01"
        assert dataset.precursor_version == "2019-08-09"
        assert dataset.publishing_date == date(2021, 11, 1)
        assert dataset.owner == "mailto:models@geo.admin.ch"
        assert dataset.file_paths == ["refdata/kantone.xml"]
        assert dataset.is_catalog

    def test_referenced_models(self):
        """Test model codes and basket links both contribute model names."""
        dataset = parse_ilidata(SAMPLE_ILIDATA)[0]

        assert dataset.referenced_models() == ["CHAdminCodes_V1", "Units"]

    def test_to_catalog(self):
        """Test the catalog projection resolves files against the repository."""
        dataset = parse_ilidata(SAMPLE_ILIDATA)[0]

        catalog = dataset.to_catalog("https://models.geo.admin.ch/")

        assert catalog.identifier == "ch.admin.codes.Kantone"
        assert catalog.title == "Cantons"
        assert catalog.files == ["https://models.geo.admin.ch/refdata/kantone.xml"]
        assert catalog.referenced_models == ["CHAdminCodes_V1", "Units"]

    def test_catalog_without_id_is_invalid(self):
        """Test a catalog without identifier fails the document."""
        xml = (
            "<TRANSFER><DATASECTION><DatasetIdx16.DataIndex>"
            "<DatasetIdx16.DataIndex.DatasetMetadata><version>1</version>"
            f"<categories><DatasetIdx16.Code_><value>{CATALOG_CODE}</value></DatasetIdx16.Code_></categories>"
            "</DatasetIdx16.DataIndex.DatasetMetadata>"
            "</DatasetIdx16.DataIndex></DATASECTION></TRANSFER>"
        )

        with pytest.raises(DocumentParseError):
            parse_ilidata(xml)

    def test_invalid_non_catalog_dataset_ignored(self):
        """Test an invalid dataset outside the catalog category does not affect catalogs."""
        xml = (
            "<TRANSFER><DATASECTION><DatasetIdx16.DataIndex>"
            "<DatasetIdx16.DataIndex.DatasetMetadata><id>Codes</id>"
            f"<categories><DatasetIdx16.Code_><value>{CATALOG_CODE}</value></DatasetIdx16.Code_></categories>"
            "</DatasetIdx16.DataIndex.DatasetMetadata>"
            "<DatasetIdx16.DataIndex.DatasetMetadata><id>Config</id>"
            "<publishingDate>2021-13-45</publishingDate>"
            "<categories><DatasetIdx16.Code_><value>http://codes.interlis.ch/type/metaconfig</value>"
            "</DatasetIdx16.Code_></categories>"
            "</DatasetIdx16.DataIndex.DatasetMetadata>"
            "<DatasetIdx16.DataIndex.DatasetMetadata><version>1</version>"
            "</DatasetIdx16.DataIndex.DatasetMetadata>"
            "</DatasetIdx16.DataIndex></DATASECTION></TRANSFER>"
        )

        assert [dataset.id for dataset in parse_ilidata(xml)] == ["Codes"]

    def test_empty_and_malformed(self):
        """Test empty documents map to nothing and malformed ones raise."""
        assert parse_ilidata("<TRANSFER><DATASECTION/></TRANSFER>") == []
        with pytest.raises(DocumentParseError):
            parse_ilidata("<TRANSFER><DATASECTION>")


@pytest.mark.unit
class TestDatasetTitle:
    """Tests for choosing the catalog title."""

    def test_language_neutral_title_preferred(self):
        dataset = DatasetMetadata(
            id="X",
            title=[LocalisedText(language="de", text="Titel"), LocalisedText(text="Title")],
        )

        assert dataset.title_text() == "Title"

    def test_first_title_as_fallback(self):
        dataset = DatasetMetadata(
            id="X",
            title=[LocalisedText(language="de", text="Titel"), LocalisedText(language="fr", text="Titre")],
        )

        assert dataset.title_text() == "Titel"

    def test_no_title(self):
        assert DatasetMetadata(id="X").title_text() == ""

    def test_is_catalog(self):
        assert DatasetMetadata(id="X", categories=[CATALOG_CODE]).is_catalog
        assert not DatasetMetadata(id="X").is_catalog
