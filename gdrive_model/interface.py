"""
Gdrive Model Interface

Data types exchanged with Google Drive and the Authorizer abstraction the
request executor depends on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


@dataclass
class FileResource:
    """A Drive file or folder, as returned by the API."""
    id: Optional[str] = None
    name: Optional[str] = None
    mime_type: Optional[str] = None
    description: Optional[str] = None
    parents: List[str] = field(default_factory=list)
    trashed: Optional[bool] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> "FileResource":
        """Decode a Drive v3 files resource. Fields not requested stay None."""
        return cls(
            id=item.get("id"),
            name=item.get("name"),
            mime_type=item.get("mimeType"),
            description=item.get("description"),
            parents=list(item.get("parents", [])),
            trashed=item.get("trashed"),
            raw=dict(item)
        )

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE


@dataclass
class FilePage:
    """Paginated file listing results."""
    files: List[FileResource]
    next_cursor: Optional[str] = None


ParentRef = Union[str, FileResource, Mapping[str, Any]]


@dataclass
class FileMetadata:
    """Metadata for a file about to be created."""
    name: Optional[str] = None
    description: Optional[str] = None
    mime_type: Optional[str] = None
    parents: Sequence[ParentRef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileMetadata":
        """Accept the loose resource dicts callers pass around ('title' is an alias of 'name')."""
        return cls(
            name=data.get("name", data.get("title")),
            description=data.get("description"),
            mime_type=data.get("mime_type", data.get("mimeType")),
            parents=list(data.get("parents") or [])
        )


@dataclass(frozen=True)
class LocalFile:
    """Upload content read from a file on the local machine."""
    path: Path

    def read(self) -> bytes:
        return Path(self.path).read_bytes()


@dataclass(frozen=True)
class MediaBody:
    """Upload content held in memory."""
    body: Union[bytes, str]

    def read(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return bytes(self.body)


UploadContent = Union[LocalFile, MediaBody]


class Authorizer(ABC):
    """
    Supplies credentials for Drive requests.

    Implementations own their token cache and are responsible for making
    concurrent authorize() calls safe.
    """

    @abstractmethod
    async def authorize(self):
        """
        Return valid credentials, refreshing or acquiring them if needed.

        Raises:
            AuthorizationError: If no usable credentials can be obtained
        """
        pass
