"""
Catalog version resolution.

A data index may list several versions of the same catalog, each naming its
direct predecessor. Only the head of every version chain is kept.
"""

from collections import defaultdict
from collections.abc import Iterable

from repobrowser.models.catalog import Catalog


def remove_precursor_catalog_versions(catalogs: Iterable[Catalog]) -> list[Catalog]:
    """
    Drop every catalog version that another catalog names as its precursor.

    Works on chains of any length and does not depend on input order.
    Catalogs without precursor relationships are always kept.

    Args:
        catalogs: Raw catalogs of one repository

    Returns:
        Surviving catalogs, in input order
    """
    catalogs = list(catalogs)

    superseded: dict[str, set[str]] = defaultdict(set)
    for catalog in catalogs:
        if catalog.precursor_version and catalog.precursor_version != catalog.version:
            superseded[catalog.identifier].add(catalog.precursor_version)

    return [
        catalog
        for catalog in catalogs
        if catalog.version not in superseded.get(catalog.identifier, ())
    ]
