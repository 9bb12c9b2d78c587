import json
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from gdrive_model import Authorizer, GdriveModel

SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.metadata",
]


class FakeAuthorizer(Authorizer):
    """Counts authorize() calls; raises `error` instead of returning when set."""

    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    async def authorize(self, force=False):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return "fake-credentials"


def http_error(status=404, message="File not found"):
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


@pytest.fixture
def authorizer():
    return FakeAuthorizer()


@pytest.fixture
def service():
    """Stands in for the Drive service: service.files().<method>(...).execute()."""
    return MagicMock()


@pytest.fixture
def model_params(tmp_path):
    return {
        "google_scopes": SCOPES,
        "token_file": "gdrive_token.json",
        "token_dir": tmp_path,
        "client_secret_file": tmp_path / "client_secret.json",
    }


@pytest.fixture
def model(model_params, authorizer, service):
    return GdriveModel(
        **model_params,
        authorizer=authorizer,
        service_factory=lambda credentials: service
    )
