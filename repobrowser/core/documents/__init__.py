"""
Descriptor document mapping.

Each repository publishes three INTERLIS transfer documents:
- ilisite.xml: site metadata and subsidiary sites
- ilimodels.xml: model index (IliRepository09 / IliRepository20)
- ilidata.xml: data index, filtered to reference-data catalogs
"""

from repobrowser.core.documents.ilidata import ILIDATA_FILE, DatasetMetadata, parse_ilidata
from repobrowser.core.documents.ilimodels import (
    ILIMODELS_FILE,
    ModelMetadata,
    ModelMetadata09,
    ModelMetadata20,
    parse_ilimodels,
)
from repobrowser.core.documents.ilisite import ILISITE_FILE, Site, parse_ilisite

__all__ = [
    "ILISITE_FILE",
    "ILIMODELS_FILE",
    "ILIDATA_FILE",
    "Site",
    "ModelMetadata",
    "ModelMetadata09",
    "ModelMetadata20",
    "DatasetMetadata",
    "parse_ilisite",
    "parse_ilimodels",
    "parse_ilidata",
]
