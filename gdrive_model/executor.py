"""
Authorized request execution.

Every Drive call goes through RequestExecutor.execute(), which obtains
credentials first and only then builds and runs the request.
"""

import asyncio
import logging
from typing import Any, Callable

from google.auth.exceptions import RefreshError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from .errors import AuthorizationError, RemoteServiceError
from .interface import Authorizer

logger = logging.getLogger(__name__)


def build_drive_service(credentials):
    """Build a Drive v3 service resource bound to the given credentials."""
    return build("drive", "v3", credentials=credentials, cache_discovery=False)


class RequestExecutor:
    """Runs Drive requests with credentials supplied by an Authorizer."""

    def __init__(self, authorizer: Authorizer, service_factory: Callable[[Any], Any] = build_drive_service):
        self.authorizer = authorizer
        self._service_factory = service_factory

    async def execute(self, operation: Callable[[Any], Any]) -> Any:
        """
        Authorize, then run a Drive request.

        Args:
            operation: Called with the Drive service; returns an unexecuted
                       request, e.g. ``lambda s: s.files().get(fileId=fid)``

        Returns:
            The decoded response body, unchanged

        Raises:
            AuthorizationError: If credentials could not be obtained; the
                                request is never built or sent
            RemoteServiceError: If Drive returned an error or the request
                                did not complete (timeout, connection failure)
        """
        credentials = await self.authorizer.authorize()

        service = self._service_factory(credentials)
        request = operation(service)
        logger.debug(f"Executing {getattr(request, 'methodId', 'drive request')}")

        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            error = RemoteServiceError.from_http_error(e)
            logger.warning(f"Drive request failed: {error}")
            raise error from e
        except RefreshError as e:
            # the transport refreshes expired credentials on its own during execute()
            logger.error(f"❌ Credential refresh failed during request: {e}")
            raise AuthorizationError(f"Token refresh failed: {e}", e) from e
        except (HttpLib2Error, OSError) as e:
            logger.warning(f"Drive request did not complete: {e}")
            raise RemoteServiceError(f"Request did not complete: {e}", original_error=e) from e
