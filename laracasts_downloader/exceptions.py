"""
Exceptions raised while crawling the catalog and downloading lessons.
"""

from typing import Optional


class LaracastsError(Exception):
    """Base exception for all downloader errors."""


class NetworkError(LaracastsError):
    """Raised when an endpoint cannot be reached at all."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(f"{url}: {cause}" if cause else url)


class UnexpectedStatus(LaracastsError):
    """Raised when a response carries anything other than HTTP 200."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{url} returned wrong status code: {status_code}, expected 200")


class AuthError(LaracastsError):
    """Raised when the login form is rejected."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Login failed: {url} returned status code {status_code}")


class TokenNotFound(LaracastsError):
    """Raised when the landing page carries no login token."""


class HeaderMissing(LaracastsError):
    """Raised when a download response has no usable Content-Disposition filename."""


class DownloadLinkMissing(LaracastsError):
    """Raised when a lesson page has no link to its video download."""


class ConfigurationError(LaracastsError):
    """Raised when required settings such as credentials are missing or invalid."""
