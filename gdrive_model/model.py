"""
Gdrive Model

Create, fetch, list and trash files on Google Drive. Each call is authorized
through the model's own Authorizer before it reaches the API.
"""

import io
import logging
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from googleapiclient.http import MediaIoBaseUpload

from .auth import GoogleAuthorizer
from .config import GdriveConfig
from .errors import (
    BatchOperationError,
    InvalidArgument,
    LocalIOError,
    MissingParameter,
    RemoteServiceError,
)
from .executor import RequestExecutor, build_drive_service
from .interface import (
    FOLDER_MIME_TYPE,
    Authorizer,
    FileMetadata,
    FilePage,
    FileResource,
    LocalFile,
    MediaBody,
    ParentRef,
    UploadContent,
)

logger = logging.getLogger(__name__)

REQUIRED_PARAMS = ["google_scopes", "token_file", "token_dir", "client_secret_file"]

DEFAULT_MIME_TYPE = "application/octet-stream"


def _join_fields(ret_fields: Optional[Sequence[str]]) -> Optional[str]:
    if not ret_fields:
        return None
    return ",".join(ret_fields)


def _parent_id(parent: ParentRef) -> str:
    if isinstance(parent, str):
        parent_id = parent
    elif isinstance(parent, FileResource):
        parent_id = parent.id
    elif isinstance(parent, Mapping):
        parent_id = parent.get("id")
    else:
        parent_id = None

    if not parent_id:
        raise InvalidArgument(f"GdriveModel.create_file - parent has no id: {parent!r}")
    return parent_id


def resolve_content(
    local_file: Optional[Union[str, Path]] = None,
    media_body: Optional[Union[bytes, str]] = None
) -> Optional[UploadContent]:
    """
    Turn the loose local_file/media_body pair into one content source.

    Raises:
        InvalidArgument: If both are given
    """
    if local_file is not None and media_body is not None:
        raise InvalidArgument("GdriveModel.create_file - Media body and local file path passed")
    if local_file is not None:
        return LocalFile(Path(local_file))
    if media_body is not None:
        return MediaBody(media_body)
    return None


class GdriveModel:
    """
    Google Drive client.

    Args:
        google_scopes: Drive scopes this instance will hold permissions for
        token_file: Name of the file holding the cached access token
        token_dir: Directory the token file lives in
        client_secret_file: OAuth client secret used when no token exists yet
        user_id: Drive identity to act as (defaults to 'me')
        authorizer: Replaces the GoogleAuthorizer built from the above
        service_factory: Builds the Drive service from credentials
    """

    def __init__(
        self,
        google_scopes: Optional[Sequence[str]] = None,
        token_file: Optional[str] = None,
        token_dir: Optional[Union[str, Path]] = None,
        client_secret_file: Optional[Union[str, Path]] = None,
        user_id: Optional[str] = None,
        authorizer: Optional[Authorizer] = None,
        service_factory: Callable[[Any], Any] = build_drive_service
    ):
        params = {
            "google_scopes": google_scopes,
            "token_file": token_file,
            "token_dir": token_dir,
            "client_secret_file": client_secret_file,
        }
        for name in REQUIRED_PARAMS:
            if not params[name]:
                raise MissingParameter(name)

        self.user_id = user_id or "me"
        self.authorizer = authorizer or GoogleAuthorizer(
            google_scopes, token_file, token_dir, client_secret_file
        )
        self._executor = RequestExecutor(self.authorizer, service_factory)

    @classmethod
    def from_config(cls, config: GdriveConfig, **kwargs) -> "GdriveModel":
        """Build a model from loaded configuration."""
        return cls(
            google_scopes=config.scopes,
            token_file=config.token_file,
            token_dir=config.token_dir,
            client_secret_file=config.client_secret_file,
            user_id=config.user_id,
            **kwargs
        )

    async def create_file(
        self,
        resource: Optional[Union[FileMetadata, Mapping[str, Any]]] = None,
        *,
        is_folder: bool = False,
        local_file: Optional[Union[str, Path]] = None,
        media_body: Optional[Union[bytes, str]] = None,
        ret_fields: Optional[Sequence[str]] = None
    ) -> FileResource:
        """
        Create a file or folder.

        Args:
            resource: Name, description, MIME type and parents of the new file
            is_folder: Create a folder; no content may be given
            local_file: Path of a local file whose content is uploaded
            media_body: In-memory content to upload
            ret_fields: Fields to return in the response

        Returns:
            The created file

        Raises:
            InvalidArgument: Content missing, both content sources given,
                             or a parent without an id
            LocalIOError: The local file could not be read
            AuthorizationError: No usable credentials
            RemoteServiceError: Drive rejected or failed to complete the request
        """
        if resource is None:
            metadata = FileMetadata()
        elif isinstance(resource, FileMetadata):
            metadata = resource
        else:
            metadata = FileMetadata.from_dict(resource)

        content = resolve_content(local_file, media_body)
        media = None

        if is_folder:
            if content is not None:
                raise InvalidArgument("GdriveModel.create_file - Folders cannot have content")
            mime_type = FOLDER_MIME_TYPE
        else:
            if content is None:
                raise InvalidArgument("GdriveModel.create_file - No media body or local file path passed")
            mime_type = metadata.mime_type
            try:
                data = content.read()
            except OSError as e:
                logger.error(f"❌ Failed to read {content.path}: {e}")
                raise LocalIOError(str(content.path), e) from e
            media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type or DEFAULT_MIME_TYPE)

        body = {"name": metadata.name, "mimeType": mime_type, "description": metadata.description}
        body = {k: v for k, v in body.items() if v is not None}
        if metadata.parents:
            body["parents"] = [_parent_id(p) for p in metadata.parents]

        kwargs = {"body": body}
        if media is not None:
            kwargs["media_body"] = media
        fields = _join_fields(ret_fields)
        if fields:
            kwargs["fields"] = fields

        response = await self._executor.execute(lambda service: service.files().create(**kwargs))
        created = FileResource.from_api(response)
        logger.info(f"✅ Created {'folder' if is_folder else 'file'}: {metadata.name} ({created.id})")
        return created

    async def get_file(self, file_id: str, ret_fields: Optional[Sequence[str]] = None) -> FileResource:
        """Fetch a single file's metadata."""
        if not file_id:
            raise InvalidArgument("GdriveModel.get_file - file_id is required")

        kwargs = {"fileId": file_id}
        fields = _join_fields(ret_fields)
        if fields:
            kwargs["fields"] = fields

        response = await self._executor.execute(lambda service: service.files().get(**kwargs))
        return FileResource.from_api(response)

    async def list_files_page(
        self,
        q: Optional[str] = None,
        spaces: Optional[str] = None,
        ret_fields: Optional[Sequence[str]] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None
    ) -> FilePage:
        """
        List one page of files.

        Args:
            q: Drive search expression, e.g. "name contains 'report'"
            spaces: Comma-separated spaces to search ('drive', 'appDataFolder')
            ret_fields: Response fields; include 'nextPageToken' to page
            page_size: Maximum files per page
            page_token: Cursor returned by the previous page
        """
        kwargs = {}
        if q:
            kwargs["q"] = q
        if spaces:
            kwargs["spaces"] = spaces
        fields = _join_fields(ret_fields)
        if fields:
            kwargs["fields"] = fields
        if page_size:
            kwargs["pageSize"] = page_size
        if page_token:
            kwargs["pageToken"] = page_token

        response = await self._executor.execute(lambda service: service.files().list(**kwargs))
        return FilePage(
            files=[FileResource.from_api(item) for item in response.get("files", [])],
            next_cursor=response.get("nextPageToken")
        )

    async def list_files(
        self,
        q: Optional[str] = None,
        spaces: Optional[str] = None,
        ret_fields: Optional[Sequence[str]] = None
    ) -> List[FileResource]:
        """List files matching a search. Only the first page is returned; use list_files_page to page."""
        page = await self.list_files_page(q=q, spaces=spaces, ret_fields=ret_fields)
        return page.files

    async def trash_files(
        self,
        file_ids: Sequence[str],
        delete_permanently: bool = False
    ) -> List[Optional[FileResource]]:
        """
        Trash (or permanently delete) files one at a time, in order.

        The first failure aborts the batch: later ids are never attempted and
        results for earlier ids are not returned.

        Returns:
            One entry per id. Trashed files come back with id and trashed
            set; permanently deleted files come back as None.

        Raises:
            InvalidArgument: No ids given, or a single string instead of a list
            BatchOperationError: Drive rejected or failed to complete the call for one id
            AuthorizationError: No usable credentials
        """
        if isinstance(file_ids, str):
            raise InvalidArgument("GdriveModel.trash_files - file_ids must be a list of ids, not a string")
        file_ids = list(file_ids)
        if not file_ids:
            raise InvalidArgument("GdriveModel.trash_files - no file ids passed")

        action = "deleting" if delete_permanently else "trashing"
        responses: List[Optional[FileResource]] = []

        for file_id in file_ids:
            if delete_permanently:
                operation = lambda service, fid=file_id: service.files().delete(fileId=fid)
            else:
                operation = lambda service, fid=file_id: service.files().update(
                    fileId=fid, body={"trashed": True}, fields="id,trashed"
                )

            try:
                response = await self._executor.execute(operation)
            except RemoteServiceError as e:
                logger.error(f"❌ Error {action} file {file_id}: {e}")
                raise BatchOperationError(file_id, action, e) from e

            # delete returns an empty body
            responses.append(FileResource.from_api(response) if response else None)

        logger.info(f"✅ Finished {action} {len(responses)} file(s)")
        return responses
