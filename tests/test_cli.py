"""Tests for the command-line interface."""

from __future__ import annotations

import contextlib
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import requests

from ytpublish.app import cli
from ytpublish.core.errors import CommandNotImplemented
from ytpublish.platforms import CatalogEntry


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("YTPUBLISH_CONFIG", raising=False)


class StubCatalogClient:
    def __init__(self, session, settings=None) -> None:
        self.session = session

    def list_playlist(self, playlist_id, page_size=None):
        return [CatalogEntry(id="v1", title="First"), CatalogEntry(id="v2", title="Second")]

    def list_uploaded(self, page_size=None):
        return [CatalogEntry(id="u1", title="Mine", description="text")]

    def list_most_popular(self, max_results=5):
        return []


def _stub_catalog(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "_open_session", lambda config: contextlib.nullcontext(object()))
    monkeypatch.setattr(cli, "YouTubeCatalogClient", StubCatalogClient)


def test_list_publish_methods(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["list", "--publish-methods"]) == 0
    out = capsys.readouterr().out
    assert "asap\n    Current date at 0 o'clock" in out
    assert "coming=<weekday>" in out
    assert "iso-date-time=YYYY-MM-DD[ HH:MM:SS]" in out


def test_upload_pretend_prints_preview(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(
        [
            "upload",
            "--file",
            "2A-intro.mp4",
            "--description",
            "First steps",
            "--publish-at",
            "weeks-from-episode",
            "--first-episode-date",
            "2020-09-01",
            "--keywords",
            "a,b",
            "--pretend",
        ]
    )

    assert code == 0
    lines = dict(line.split(": ", 1) for line in capsys.readouterr().out.splitlines())
    expected = datetime(2020, 9, 1, 8, tzinfo=timezone.utc) + timedelta(weeks=42)
    assert lines["publish-datetime"] == expected.strftime("%Y-%m-%dT%H:%M:%SZ")
    assert lines["episode_nr"] == "42 (0x2A)"
    assert lines["youtube-title"] == "2A. 2A-intro"
    assert lines["category"] == "science"
    assert lines["privacy"] == "private"
    assert json.loads(lines["youtube-tags"]) == ["a", "b"]


def test_invalid_publish_method_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["upload", "--file", "x.mp4", "--description", "d", "--publish-at", "someday", "--pretend"])
    assert excinfo.value.code == 2


def test_out_of_range_episode_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["upload", "--file", "x.mp4", "--description", "d", "--episode-nr", "300", "--pretend"])
    assert code == 2
    assert "0-255" in capsys.readouterr().err


def test_missing_explicit_config_fails(tmp_path: Path) -> None:
    assert cli.main(["--config", str(tmp_path / "absent.toml"), "list", "--publish-methods"]) == 1


def test_unimplemented_command_exits_with_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def not_implemented(args, config):
        raise CommandNotImplemented("list --yt-top5")

    monkeypatch.setattr(cli, "_handle_list", not_implemented)
    assert cli.main(["list", "--yt-top5"]) == 1
    assert "Not yet implemented" in capsys.readouterr().err


def test_connection_failure_exits_with_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    @contextlib.contextmanager
    def broken_session(config):
        raise requests.ConnectionError("offline")
        yield  # pragma: no cover

    monkeypatch.setattr(cli, "_open_session", broken_session)
    assert cli.main(["list", "--uploaded"]) == 1


def test_list_playlist_as_table(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _stub_catalog(monkeypatch)

    assert cli.main(["list", "--playlist-id", "PL1"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["Id", "Title"]
    assert lines[1].split() == ["v1", "First"]
    assert lines[2].split() == ["v2", "Second"]


def test_list_uploaded_as_json(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _stub_catalog(monkeypatch)

    assert cli.main(["list", "--uploaded", "--format", "json"]) == 0

    assert json.loads(capsys.readouterr().out) == [{"id": "u1", "title": "Mine", "description": "text"}]


def test_list_requires_a_target() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["list"])
    assert excinfo.value.code == 2


@pytest.mark.parametrize(("literal", "number"), [("08", 8), ("0x2A", 42), ("255", 255)])
def test_episode_number_accepts_decimal_and_hex(
    literal: str, number: int, capsys: pytest.CaptureFixture[str]
) -> None:
    code = cli.main(["upload", "--file", "x.mp4", "--description", "d", "--episode-nr", literal, "--pretend"])

    assert code == 0
    lines = dict(line.split(": ", 1) for line in capsys.readouterr().out.splitlines())
    assert lines["episode_nr"] == f"{number} (0x{number:X})"
    assert lines["youtube-title"] == f"{number:X}. x"
