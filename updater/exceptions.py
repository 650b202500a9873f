"""
Custom Exception Classes for the Plugin Updater

Every failure on the manifest path derives from UpdaterError so callers can
degrade to "no remote data" with a single except clause.
"""

from typing import Any

from fastapi import status


class UpdaterError(Exception):
    """Base exception class for all updater-related exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Manifest Fetch Exceptions
# ============================================================================


class NetworkError(UpdaterError):
    """Raised when the manifest request times out or cannot connect"""

    def __init__(self, message: str = "Manifest request failed", url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message=message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


class HttpStatusError(UpdaterError):
    """Raised when the manifest endpoint answers with anything but 200"""

    def __init__(self, response_status: int, url: str | None = None):
        details: dict[str, Any] = {"response_status": response_status}
        if url:
            details["url"] = url
        super().__init__(
            message=f"Manifest endpoint returned HTTP {response_status}",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )
        self.response_status = response_status


class EmptyBodyError(UpdaterError):
    """Raised when the manifest endpoint returns an empty body"""

    def __init__(self, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(
            message="Manifest endpoint returned an empty body",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )


class ManifestParseError(UpdaterError):
    """Raised when the manifest body is not valid JSON or fails validation"""

    def __init__(self, message: str = "Malformed manifest", errors: list[Any] | None = None):
        details = {"errors": errors} if errors else {}
        super().__init__(message=message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


# ============================================================================
# Decision & Availability Exceptions
# ============================================================================


class InvalidVersionError(UpdaterError):
    """Raised when a version string cannot be parsed"""

    def __init__(self, version: str):
        super().__init__(
            message=f"Invalid version string '{version}'",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"version": version},
        )
        self.version = version


class ManifestUnavailableError(UpdaterError):
    """Raised by the HTTP surface when no manifest can be produced"""

    def __init__(self, message: str = "Remote manifest is currently unavailable"):
        super().__init__(message=message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
