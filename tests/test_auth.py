"""Tests for GoogleAuthorizer token handling."""

import asyncio
import json

import pytest
from google.oauth2.credentials import Credentials

from gdrive_model import AuthorizationError, GoogleAuthorizer
from gdrive_model import auth as auth_module

from conftest import SCOPES


def _write_token(path, expiry="2999-01-01T00:00:00Z", scopes=SCOPES, token="access-token"):
    path.write_text(json.dumps({
        "token": token,
        "refresh_token": "refresh-token",
        "token_uri": "https://oauth2.googleapis.com/token",
        "client_id": "client-id",
        "client_secret": "client-secret",
        "scopes": scopes,
        "expiry": expiry,
    }))


def _authorizer(tmp_path, **kwargs):
    return GoogleAuthorizer(
        SCOPES,
        "gdrive_token.json",
        tmp_path,
        tmp_path / "client_secret.json",
        **kwargs
    )


@pytest.mark.asyncio
async def test_valid_token_file(tmp_path):
    _write_token(tmp_path / "gdrive_token.json")
    authorizer = _authorizer(tmp_path, interactive=False)

    creds = await authorizer.authorize()

    assert creds.token == "access-token"
    assert creds.valid


@pytest.mark.asyncio
async def test_expired_token_is_refreshed_and_saved(tmp_path, monkeypatch):
    token_path = tmp_path / "gdrive_token.json"
    _write_token(token_path, expiry="2000-01-01T00:00:00Z")

    def fake_refresh(self, request):
        self.token = "refreshed-token"
        self.expiry = None

    monkeypatch.setattr(Credentials, "refresh", fake_refresh)
    authorizer = _authorizer(tmp_path, interactive=False)

    creds = await authorizer.authorize()

    assert creds.token == "refreshed-token"
    assert json.loads(token_path.read_text())["token"] == "refreshed-token"


@pytest.mark.asyncio
async def test_no_token_non_interactive(tmp_path):
    authorizer = _authorizer(tmp_path, interactive=False)

    with pytest.raises(AuthorizationError, match="Complete OAuth flow first"):
        await authorizer.authorize()


@pytest.mark.asyncio
async def test_token_missing_scopes_non_interactive(tmp_path):
    _write_token(tmp_path / "gdrive_token.json", scopes=SCOPES[:1])
    authorizer = _authorizer(tmp_path, interactive=False)

    with pytest.raises(AuthorizationError):
        await authorizer.authorize()


@pytest.mark.asyncio
async def test_missing_client_secret(tmp_path):
    authorizer = _authorizer(tmp_path, interactive=True)

    with pytest.raises(AuthorizationError, match="Credentials file not found"):
        await authorizer.authorize()


@pytest.mark.asyncio
async def test_browser_flow_saves_token(tmp_path, monkeypatch):
    (tmp_path / "client_secret.json").write_text("{}")

    class FakeCreds:
        valid = True

        def to_json(self):
            return json.dumps({"token": "from-flow"})

    class FakeFlow:
        def run_local_server(self, **kwargs):
            self.kwargs = kwargs
            return FakeCreds()

    flow = FakeFlow()

    class FakeInstalledAppFlow:
        @classmethod
        def from_client_secrets_file(cls, path, scopes):
            return flow

    monkeypatch.setattr(auth_module, "InstalledAppFlow", FakeInstalledAppFlow)
    authorizer = _authorizer(tmp_path, interactive=True)

    creds = await authorizer.authorize()

    assert isinstance(creds, FakeCreds)
    assert flow.kwargs["access_type"] == "offline"
    assert json.loads((tmp_path / "gdrive_token.json").read_text()) == {"token": "from-flow"}


@pytest.mark.asyncio
async def test_concurrent_callers_share_credentials(tmp_path, monkeypatch):
    authorizer = _authorizer(tmp_path, interactive=False)
    calls = []

    class ValidCreds:
        valid = True

    def obtain(force=False):
        calls.append(force)
        return ValidCreds()

    monkeypatch.setattr(authorizer, "_obtain_credentials", obtain)

    first, second = await asyncio.gather(authorizer.authorize(), authorizer.authorize())

    assert first is second
    assert calls == [False]


def test_status_without_token(tmp_path):
    status = _authorizer(tmp_path).status()

    assert status["exists"] is False
    assert status["client_secret_exists"] is False
    assert status["has_required_scopes"] is False


def test_status_with_token(tmp_path):
    _write_token(tmp_path / "gdrive_token.json")

    status = _authorizer(tmp_path).status()

    assert status["exists"] is True
    assert status["valid"] is True
    assert status["expired"] is False
    assert status["has_required_scopes"] is True
