"""Gdrive Model - Google Drive client with authorized requests and batch trashing."""

from .auth import GoogleAuthorizer
from .config import GdriveConfig, load_config
from .errors import (
    AuthorizationError,
    BatchOperationError,
    GdriveModelError,
    InvalidArgument,
    LocalIOError,
    MissingParameter,
    RemoteServiceError,
)
from .executor import RequestExecutor
from .interface import (
    FOLDER_MIME_TYPE,
    Authorizer,
    FileMetadata,
    FilePage,
    FileResource,
    LocalFile,
    MediaBody,
)
from .model import GdriveModel

__all__ = [
    "GdriveModel",
    "GoogleAuthorizer",
    "RequestExecutor",
    "Authorizer",
    "FileResource",
    "FileMetadata",
    "FilePage",
    "LocalFile",
    "MediaBody",
    "FOLDER_MIME_TYPE",
    "GdriveConfig",
    "load_config",
    "GdriveModelError",
    "MissingParameter",
    "InvalidArgument",
    "AuthorizationError",
    "RemoteServiceError",
    "BatchOperationError",
    "LocalIOError",
]
