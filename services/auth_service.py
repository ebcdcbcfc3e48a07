from __future__ import annotations

import logging
from typing import Any, Dict, Iterable

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from utils.config import AppConfig

LOGGER = logging.getLogger(__name__)
SCOPES: Iterable[str] = ("https://www.googleapis.com/auth/gmail.modify",)
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"


class AuthService:
    """Build Gmail credentials from the configured OAuth client and refresh token."""

    def __init__(self, config: AppConfig):
        self._config = config

    def authenticate(self) -> Credentials:
        self._config.ensure_complete()
        creds = Credentials(
            token=None,
            refresh_token=self._config.refresh_token,
            client_id=self._config.client_id,
            client_secret=self._config.client_secret,
            token_uri=self._config.token_uri,
            scopes=list(SCOPES),
        )
        LOGGER.info("Refreshing Gmail access token")
        creds.refresh(Request())
        return creds

    def authorize(self, port: int = 0) -> Credentials:
        """Run the browser consent flow; the result carries a new refresh token."""

        self._config.ensure_complete(include_refresh_token=False)
        LOGGER.info("Initiating OAuth flow for client %s", self._config.client_id)
        flow = InstalledAppFlow.from_client_config(self._client_config(), scopes=list(SCOPES))
        return flow.run_local_server(port=port, access_type="offline", prompt="consent")

    def _client_config(self) -> Dict[str, Any]:
        return {
            "installed": {
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": self._config.token_uri,
                "redirect_uris": ["http://localhost"],
            }
        }
