"""
Google OAuth Authorizer

Loads the cached token, refreshes it when expired and falls back to the
consent flow (browser or manual/headless) when no usable token exists.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow, InstalledAppFlow

from .config import OAUTH_PORT
from .errors import AuthorizationError
from .interface import Authorizer

logger = logging.getLogger(__name__)


class GoogleAuthorizer(Authorizer):
    """
    Authorizer backed by a token file and an OAuth client secret file.

    Credential priority:
    1. Credentials already held by this instance, if still valid
    2. Token file at token_dir/token_file (refreshed if expired)
    3. Consent flow using client_secret_file (only when interactive)
    """

    def __init__(
        self,
        scopes: Sequence[str],
        token_file: str,
        token_dir,
        client_secret_file,
        interactive: bool = True,
        manual: bool = False,
        port: int = OAUTH_PORT,
        prompt: Callable[[str], str] = input
    ):
        self.scopes: List[str] = list(scopes)
        self.token_path = Path(token_dir).expanduser() / token_file
        self.client_secret_file = Path(client_secret_file).expanduser()
        self.interactive = interactive
        self.manual = manual
        self.port = port
        self._prompt = prompt
        self._credentials: Optional[Credentials] = None
        self._lock = asyncio.Lock()

    async def authorize(self, force: bool = False) -> Credentials:
        """Return valid credentials. Concurrent callers share a single refresh."""
        async with self._lock:
            if not force and self._credentials is not None and self._credentials.valid:
                return self._credentials
            self._credentials = await asyncio.to_thread(self._obtain_credentials, force)
            return self._credentials

    def _load_token(self) -> Optional[Credentials]:
        if not self.token_path.exists():
            return None

        try:
            creds = Credentials.from_authorized_user_file(str(self.token_path))
            logger.info(f"Loaded credentials from {self.token_path}")
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load token file: {e}")
            return None

        if not creds.has_scopes(self.scopes):
            logger.warning("⚠️  Token missing scopes, need to re-authorize")
            return None
        return creds

    def _save_token(self, creds: Credentials) -> None:
        try:
            self.token_path.parent.mkdir(parents=True, exist_ok=True)
            self.token_path.write_text(creds.to_json())
        except OSError as e:
            raise AuthorizationError(f"Failed to save token to {self.token_path}: {e}", e) from e
        logger.info(f"✅ Token saved: {self.token_path}")

    def _obtain_credentials(self, force: bool = False) -> Credentials:
        creds = None if force else self._load_token()

        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            logger.info("🔄 Refreshing expired token...")
            try:
                creds.refresh(Request())
            except GoogleAuthError as e:
                logger.error(f"❌ Token refresh failed: {e}")
                if not self.interactive:
                    raise AuthorizationError(f"Token refresh failed: {e}", e) from e
            else:
                self._save_token(creds)
                return creds

        if not self.interactive:
            raise AuthorizationError(
                f"No credentials available at {self.token_path}. Complete OAuth flow first."
            )

        creds = self._run_flow()
        self._save_token(creds)
        return creds

    def _run_flow(self) -> Credentials:
        if not self.client_secret_file.exists():
            raise AuthorizationError(f"Credentials file not found: {self.client_secret_file}")

        try:
            if self.manual:
                return self._run_manual_flow()

            logger.info("🌐 Starting OAuth flow (browser)...")
            flow = InstalledAppFlow.from_client_secrets_file(str(self.client_secret_file), self.scopes)
            return flow.run_local_server(port=self.port, prompt="consent", access_type="offline")
        except AuthorizationError:
            raise
        except Exception as e:
            # oauthlib, wsgiref and webbrowser failures all end the consent attempt
            raise AuthorizationError(f"OAuth flow failed: {e}", e) from e

    def _run_manual_flow(self) -> Credentials:
        """Consent flow for headless machines: the user pastes the redirect URL back."""
        redirect_uri = f"http://localhost:{self.port}"
        flow = Flow.from_client_secrets_file(
            str(self.client_secret_file),
            scopes=self.scopes,
            redirect_uri=redirect_uri
        )
        auth_url, _ = flow.authorization_url(
            access_type="offline",
            include_granted_scopes="true",
            prompt="consent"
        )

        response = self._prompt(
            f"Open this URL in a browser:\n\n{auth_url}\n\n"
            f"After authorizing you will be redirected to {redirect_uri} "
            "(the page won't load - that's expected).\n"
            "Paste the full redirect URL here: "
        ).strip()
        if not response:
            raise AuthorizationError("No redirect URL provided")

        # oauthlib refuses plain http; the localhost redirect never leaves the machine
        flow.fetch_token(authorization_response=response.replace("http://", "https://", 1))
        return flow.credentials

    def status(self) -> dict:
        """Report the state of the cached token without refreshing it."""
        result = {
            "token_file": str(self.token_path),
            "exists": self.token_path.exists(),
            "client_secret_exists": self.client_secret_file.exists(),
            "valid": False,
            "expired": None,
            "scopes": [],
            "has_required_scopes": False
        }

        if not result["exists"]:
            return result

        try:
            creds = Credentials.from_authorized_user_file(str(self.token_path))
        except (OSError, ValueError) as e:
            result["error"] = str(e)
            return result

        result["valid"] = creds.valid
        result["expired"] = creds.expired
        result["scopes"] = list(creds.scopes) if creds.scopes else []
        result["has_required_scopes"] = set(self.scopes).issubset(result["scopes"])
        return result
