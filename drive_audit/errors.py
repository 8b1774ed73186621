"""
Error types raised by the audit tools.

Configuration, authentication and API errors abort a run. Per-file permission
failures during the sharing audit are collected in the result instead (see
models.FileError).
"""

from typing import Any, Optional


class DriveAuditError(Exception):
    """Base class for all drive-audit errors."""


class ConfigError(DriveAuditError):
    """Missing or invalid configuration settings."""


class AuthError(DriveAuditError):
    """Service account credentials could not be loaded or exchanged for a token."""


class ReportError(DriveAuditError):
    """A report could not be written."""


class DriveAPIError(DriveAuditError):
    """
    A Google Drive API call failed.

    Args:
        operation: What was being attempted (e.g. "list files")
        target: The entity the call was about, such as a file ID
        status_code: HTTP status code when the API answered with an error
        detail: Extra text describing the failure
    """

    def __init__(self, operation: str, target: Optional[str] = None,
                 status_code: Optional[int] = None, detail: str = ""):
        self.operation = operation
        self.target = target
        self.status_code = status_code
        self.detail = detail

        message = f"failed to {operation}"
        if target:
            message += f" {target}"
        if status_code is not None:
            message += f": HTTP {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class AuditCancelled(DriveAuditError):
    """
    The cancellation signal was observed between two API calls.

    `partial` holds whatever had been gathered so far: a list of items when
    raised by the pagination loop, an AuditResult when raised by an audit.
    """

    def __init__(self, partial: Any = None, message: str = "audit cancelled"):
        self.partial = partial
        super().__init__(message)
