"""
Custom exception hierarchy for the repository browser.

Provides structured error types for the crawl pipeline.
All exceptions inherit from RepoBrowserError for easy catching.
"""


class RepoBrowserError(Exception):
    """
    Base exception for all repository browser errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize repository browser error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class FetchError(RepoBrowserError):
    """
    Transport errors.
    Raised when a document or file cannot be retrieved (network error,
    timeout, non-success status).
    """

    pass


class FetchCancelledError(FetchError):
    """
    Cancelled fetch.
    Raised when the crawl's cancellation signal fires while a fetch is pending.
    """

    pass


class DocumentParseError(RepoBrowserError):
    """
    Descriptor document errors.
    Raised when an XML document is malformed or cannot be mapped.
    """

    pass


class ValidationError(RepoBrowserError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class ConfigurationError(RepoBrowserError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
