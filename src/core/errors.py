"""
Exception types raised by the dashboard copy pipeline.

Every stage raises a subclass of DashboardCopyError; the pipeline runner stops
at the first one it sees.
"""

from typing import Any, Dict, Optional


class DashboardCopyError(Exception):
    """Base class for all pipeline failures."""


class ConfigurationError(DashboardCopyError):
    """Required input (tenant URL, token, dashboard ID) is missing or invalid."""


class CompatibilityError(DashboardCopyError):
    """Tenant shape, server version or token scopes are not supported."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class TransportError(DashboardCopyError):
    """The endpoint could not be reached."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class APIError(DashboardCopyError):
    """The platform answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 error_code: Optional[Any] = None, error_message: Optional[str] = None,
                 response_data: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.error_message = error_message
        self.response_data = response_data


class DocumentError(DashboardCopyError):
    """The dashboard document does not have the shape needed for an edit."""
