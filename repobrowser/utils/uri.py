"""
Location helpers for repository URIs.

A repository is identified by its canonical location: lowercase scheme and
host, the path without trailing slash, no fragment.
"""

from urllib.parse import urlsplit, urlunsplit

from repobrowser.utils.exceptions import ValidationError

HTTP = "http"
HTTPS = "https"


def _split(uri: str):
    try:
        return urlsplit(uri)
    except ValueError as e:
        raise ValidationError(f"Malformed location: {uri}: {e}", context={"uri": uri}) from e


def canonical_location(uri: str) -> str:
    """
    Normalize an absolute location to its canonical form.

    Args:
        uri: Absolute repository location

    Returns:
        Canonical location string

    Raises:
        ValidationError: If the location is not absolute or malformed
    """
    if uri is None:
        raise ValidationError("Repository location cannot be empty")

    parts = _split(uri.strip())
    if not parts.scheme or not parts.netloc:
        raise ValidationError(
            f"Repository location must be absolute: {uri}", context={"uri": uri}
        )

    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path.rstrip("/"), parts.query, "")
    )


def host_of(uri: str) -> str:
    """Return the host part of a location."""
    return urlsplit(uri).hostname or ""


def is_https(uri: str) -> bool:
    return urlsplit(uri).scheme.lower() == HTTPS


def https_variant(uri: str) -> str:
    """
    Rewrite an HTTP location to its HTTPS equivalent.

    Raises:
        ValidationError: If the location is not an HTTP(S) location
    """
    parts = _split(uri)
    scheme = parts.scheme.lower()
    if scheme == HTTPS:
        return uri
    if scheme != HTTP or not parts.netloc:
        raise ValidationError(f"Not an HTTP location: {uri}", context={"uri": uri})
    return urlunsplit(parts._replace(scheme=HTTPS))


def append(base_uri: str, relative_path: str) -> str:
    """Join a base location and a relative path with exactly one slash."""
    return f"{base_uri.rstrip('/')}/{relative_path.lstrip('/')}"


def location_key(uri: str) -> str:
    """Case-insensitive comparison key for a location."""
    return uri.strip().rstrip("/").casefold()


def matches_any(uri: str, locations: list[str] | set[str]) -> bool:
    """Check whether a location equals any of the given locations, ignoring case."""
    key = location_key(uri)
    return any(location_key(candidate) == key for candidate in locations if candidate)
