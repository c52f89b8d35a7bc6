"""Credential management for YouTube integrations."""

from __future__ import annotations

from os import environ
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

from google.auth.exceptions import RefreshError, TransportError as GoogleTransportError
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2.credentials import Credentials

from ...core.errors import CredentialsError
from ...utils.file_helper import write_text
from ...utils.logging import get_logger

LOGGER = get_logger(__name__)

SCOPES = (
    "https://www.googleapis.com/auth/youtube",
    "https://www.googleapis.com/auth/youtube.upload",
)


class YouTubeCredentialStore:
    """Loads an authorized-user token file and keeps it fresh on disk.

    The consent flow that creates the token file is out of scope; this store
    only reads, refreshes and writes back an existing one.
    """

    def __init__(
        self,
        token_cache_path: Path,
        *,
        env: Mapping[str, str] | None = None,
        env_token_key: str = "YTPUBLISH_TOKEN_FILE",
        scopes: Sequence[str] = SCOPES,
        loader: Callable[[str, Sequence[str]], Any] = Credentials.from_authorized_user_file,
        request_factory: Callable[[], Any] = Request,
    ) -> None:
        self._env = env if env is not None else environ
        self._env_token_key = env_token_key
        self._token_cache_path = token_cache_path
        self._scopes = list(scopes)
        self._loader = loader
        self._request_factory = request_factory

    @property
    def token_path(self) -> Path:
        override = self._env.get(self._env_token_key)
        return Path(override).expanduser() if override else self._token_cache_path

    def load_credentials(self) -> Any:
        """Return valid credentials, refreshing and persisting them when expired."""
        path = self.token_path
        if not path.exists():
            raise CredentialsError(
                "Token file not found; create it with an OAuth consent tool first",
                details={"path": str(path), "env": self._env_token_key},
            )
        try:
            credentials = self._loader(str(path), self._scopes)
        except (OSError, ValueError) as exc:
            raise CredentialsError(
                "Token file is not a valid authorized-user file",
                details={"path": str(path), "reason": str(exc)},
            ) from exc

        if not credentials.valid:
            if not credentials.refresh_token:
                raise CredentialsError(
                    "Token expired and carries no refresh token", details={"path": str(path)}
                )
            try:
                credentials.refresh(self._request_factory())
            except (RefreshError, GoogleTransportError) as exc:
                raise CredentialsError(
                    "Could not refresh the access token",
                    details={"path": str(path), "reason": str(exc)},
                ) from exc
            self.store_credentials(credentials)
            LOGGER.info("Access token refreshed", extra={"event": "credentials.refreshed", "path": str(path)})
        return credentials

    def store_credentials(self, credentials: Any) -> None:
        """Persist credentials atomically, readable by the owner only."""
        write_text(self.token_path, credentials.to_json(), mode=0o600)

    def open_session(self) -> AuthorizedSession:
        """An authorized session that never replays a request on 401."""
        return AuthorizedSession(self.load_credentials(), refresh_status_codes=())


__all__ = ["SCOPES", "YouTubeCredentialStore"]
