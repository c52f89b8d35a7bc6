from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest
import requests
from google.auth.exceptions import RefreshError

from ytpublish.core.errors import CredentialsError
from ytpublish.platforms.youtube.credentials import YouTubeCredentialStore


class StubCredentials:
    def __init__(self, *, valid: bool, refresh_token: str | None = "refresh", fail: bool = False) -> None:
        self.valid = valid
        self.refresh_token = refresh_token
        self.fail = fail
        self.refreshed_with = None

    def refresh(self, request) -> None:
        if self.fail:
            raise RefreshError("invalid_grant")
        self.refreshed_with = request
        self.valid = True

    def to_json(self) -> str:
        return json.dumps({"token": "fresh", "refresh_token": self.refresh_token})


def _token_file(tmp_path: Path) -> Path:
    path = tmp_path / "token.json"
    path.write_text("{}", encoding="utf-8")
    return path


def test_missing_token_file_is_a_credentials_error(tmp_path: Path) -> None:
    store = YouTubeCredentialStore(tmp_path / "absent.json", env={})
    with pytest.raises(CredentialsError):
        store.load_credentials()


def test_env_variable_overrides_token_path(tmp_path: Path) -> None:
    override = tmp_path / "other.json"
    store = YouTubeCredentialStore(tmp_path / "token.json", env={"YTPUBLISH_TOKEN_FILE": str(override)})
    assert store.token_path == override


def test_expired_token_is_refreshed_and_written_back(tmp_path: Path) -> None:
    path = _token_file(tmp_path)
    credentials = StubCredentials(valid=False)
    marker = object()
    store = YouTubeCredentialStore(
        path,
        env={},
        loader=lambda file, scopes: credentials,
        request_factory=lambda: marker,
    )

    assert store.load_credentials() is credentials
    assert credentials.refreshed_with is marker
    assert json.loads(path.read_text(encoding="utf-8"))["token"] == "fresh"
    if os.name == "posix":
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert sorted(p.name for p in tmp_path.iterdir()) == ["token.json"]


def test_valid_token_is_used_as_is(tmp_path: Path) -> None:
    path = _token_file(tmp_path)
    credentials = StubCredentials(valid=True)
    store = YouTubeCredentialStore(path, env={}, loader=lambda file, scopes: credentials)

    store.load_credentials()

    assert credentials.refreshed_with is None
    assert path.read_text(encoding="utf-8") == "{}"


@pytest.mark.parametrize(
    "credentials",
    [StubCredentials(valid=False, refresh_token=None), StubCredentials(valid=False, fail=True)],
)
def test_unrefreshable_token_is_a_credentials_error(tmp_path: Path, credentials: StubCredentials) -> None:
    store = YouTubeCredentialStore(
        _token_file(tmp_path), env={}, loader=lambda file, scopes: credentials, request_factory=object
    )
    with pytest.raises(CredentialsError):
        store.load_credentials()


def test_malformed_token_file_is_a_credentials_error(tmp_path: Path) -> None:
    path = tmp_path / "token.json"
    path.write_text(json.dumps({"token": "abc"}), encoding="utf-8")
    with pytest.raises(CredentialsError):
        YouTubeCredentialStore(path, env={}).load_credentials()


def test_open_session_from_authorized_user_file(tmp_path: Path) -> None:
    path = tmp_path / "token.json"
    path.write_text(
        json.dumps(
            {
                "token": "access",
                "refresh_token": "refresh",
                "client_id": "client",
                "client_secret": "secret",
                "expiry": "2999-01-01T00:00:00Z",
            }
        ),
        encoding="utf-8",
    )
    store = YouTubeCredentialStore(path, env={})

    with store.open_session() as session:
        assert isinstance(session, requests.Session)
        assert session.credentials.token == "access"
