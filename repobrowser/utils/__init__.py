"""Utility modules for the repository browser."""

from repobrowser.utils.exceptions import (
    ConfigurationError,
    DocumentParseError,
    FetchCancelledError,
    FetchError,
    RepoBrowserError,
    ValidationError,
)
from repobrowser.utils.logger import escape_newlines, get_logger, setup_logging
from repobrowser.utils.uri import (
    append,
    canonical_location,
    host_of,
    https_variant,
    is_https,
    matches_any,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "escape_newlines",
    # Locations
    "append",
    "canonical_location",
    "host_of",
    "https_variant",
    "is_https",
    "matches_any",
    # Exceptions
    "RepoBrowserError",
    "FetchError",
    "FetchCancelledError",
    "DocumentParseError",
    "ValidationError",
    "ConfigurationError",
]
