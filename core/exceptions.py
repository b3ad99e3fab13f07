"""
Custom exception hierarchy for sourcemap-mirror.
Provides specific exceptions for better error handling and debugging.

The message of every exception is the short, user-facing reason that ends up
in the change report. Extra diagnostics go into ``details`` and are only
logged.
"""


class MirrorException(Exception):
    """Base exception for all mirror-related errors."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        return self.message

    def describe(self) -> str:
        """Message with details, for logs."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# =============================================================================
# Fetch Exceptions
# =============================================================================


class FetchException(MirrorException):
    """Base exception for remote retrieval errors."""

    pass


class TransportException(FetchException):
    """Exception for connection, DNS and timeout errors."""

    pass


class HttpStatusException(FetchException):
    """Exception for non-2xx responses."""

    def __init__(self, status: int, details: dict = None):
        self.status = status
        super().__init__(f"HTTP {status}", details)


class FormatException(FetchException):
    """Exception when a response body does not have the expected shape."""

    pass


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageException(MirrorException):
    """Exception for local mirror read/write errors."""

    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(MirrorException):
    """Exception for configuration and input file errors."""

    pass
