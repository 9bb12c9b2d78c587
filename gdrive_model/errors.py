"""
Gdrive Model Errors

Every failure surfaced by the model derives from GdriveModelError.
"""

from typing import Optional


class GdriveModelError(Exception):
    """Base class for all gdrive model errors."""

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error


class MissingParameter(GdriveModelError, ValueError):
    """A required construction parameter was not supplied."""

    def __init__(self, parameter: str):
        super().__init__(f"Gdrive Model - required parameter not set: {parameter}")
        self.parameter = parameter


class InvalidArgument(GdriveModelError, ValueError):
    """Conflicting or malformed caller input, detected before any remote call."""


class AuthorizationError(GdriveModelError):
    """The authorizer could not supply usable credentials."""


class RemoteServiceError(GdriveModelError):
    """Google Drive rejected or failed to complete a request."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        original_error: Optional[BaseException] = None
    ):
        super().__init__(message, original_error)
        self.status = status
        self.reason = reason

    @classmethod
    def from_http_error(cls, error) -> "RemoteServiceError":
        """Wrap a googleapiclient HttpError, keeping its status and reason."""
        status = error.resp.status
        reason = error.reason
        message = f"HTTP {status}: {reason}" if status else str(error)
        return cls(message, status=status, reason=reason, original_error=error)


class BatchOperationError(RemoteServiceError):
    """A step of a multi-file trash/delete failed; the batch was aborted."""

    def __init__(self, file_id: str, action: str, error: RemoteServiceError):
        super().__init__(
            f"The google API returned an error when {action} file {file_id}: {error}",
            status=error.status,
            reason=error.reason,
            original_error=error
        )
        self.file_id = file_id
        self.action = action


class LocalIOError(GdriveModelError):
    """Reading a local file for upload failed."""

    def __init__(self, path: str, original_error: Optional[BaseException] = None):
        super().__init__(f"Failed to read local file {path}: {original_error}", original_error)
        self.path = path
