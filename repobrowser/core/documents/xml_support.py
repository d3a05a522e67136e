"""
Shared XML helpers for the repository descriptor documents.

Documents are INTERLIS transfer files. Element names are matched by local
name only, so both namespaced and namespace-free files map the same way.
"""

from lxml import etree
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from repobrowser.utils.exceptions import DocumentParseError

DATASECTION_TAGS = ("DATASECTION", "datasection")

_PARSER = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_comments=True,
    remove_pis=True,
)


def load_datasection(xml: bytes | str, document: str) -> etree._Element | None:
    """
    Parse a document and return its DATASECTION element.

    Args:
        xml: Raw document
        document: Document name used in error messages

    Returns:
        DATASECTION element, or None if the document has none

    Raises:
        DocumentParseError: If the document is not well-formed XML
    """
    if isinstance(xml, str):
        xml = xml.encode("utf-8")

    try:
        root = etree.fromstring(xml, parser=_PARSER)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise DocumentParseError(
            f"{document} is not well-formed XML: {e}", context={"document": document}
        ) from e

    for element in root.iter():
        if isinstance(element.tag, str):
            element.tag = etree.QName(element).localname

    if root.tag in DATASECTION_TAGS:
        return root
    for tag in DATASECTION_TAGS:
        section = root.find(f".//{tag}")
        if section is not None:
            return section
    return None


def text(element: etree._Element, path: str) -> str | None:
    """Stripped text of the first match of path, None when absent or empty."""
    value = element.findtext(path)
    if value is None:
        return None
    value = value.strip()
    return value or None


def texts(element: etree._Element, path: str) -> list[str]:
    """Stripped, non-empty texts of every match of path."""
    values = []
    for match in element.findall(path):
        if match.text and match.text.strip():
            values.append(match.text.strip())
    return values


def map_fields(element: etree._Element, fields: dict[str, str]) -> dict[str, str | None]:
    """Read child element texts into a dict, renaming XML names to field names."""
    return {field: text(element, tag) for tag, field in fields.items()}


def validate(model: type[BaseModel], data: dict, document: str) -> BaseModel:
    """
    Validate mapped data into a typed document object.

    Raises:
        DocumentParseError: If a field value is missing or invalid
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise DocumentParseError(
            f"{document} contains an invalid entry: {e}", context={"document": document}
        ) from e


def distinct(values: list[str]) -> list[str]:
    """Remove duplicates, keeping first occurrences in order."""
    return list(dict.fromkeys(values))
