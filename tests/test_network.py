"""
Tests for downloads, document bootstrap and update checks.

``urllib`` is never reached: ``download`` is monkeypatched where needed.
"""

import json
from pathlib import Path

import pytest

from uam import __version__
from uam.core.errors import NetworkUnavailable, NotFound
from uam.core.services import download as download_mod
from uam.core.services import updates
from uam.core.services.download import ensure_document, join_url
from uam.core.services.platform_probe import PlatformInfo
from uam.core.services.updates import check_update, refresh_documents, update_system


def _offline(url, dest=None, timeout=30):
    raise NetworkUnavailable(f"Download failed for {url}")


class TestJoinUrl:
    def test_slashes(self):
        assert join_url("https://x.org/base/", "tasks.json") == "https://x.org/base/tasks.json"
        assert join_url("https://x.org/base", "tasks.json") == "https://x.org/base/tasks.json"


class TestEnsureDocument:
    def test_present(self, data_dir: Path):
        assert ensure_document(data_dir / "tasks.json", "https://unused") == "present"

    def test_seeded_from_bundle(self, tmp_path: Path):
        path = tmp_path / "tasks.json"
        assert ensure_document(path) == "seeded"
        assert "tasks" in json.loads(path.read_text(encoding="utf-8"))

    def test_offline_falls_back_to_bundle(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(download_mod, "download", _offline)
        assert ensure_document(tmp_path / "lang.json", "https://x.org") == "seeded"

    def test_downloaded(self, tmp_path: Path, monkeypatch):
        def fake(url, dest=None, timeout=30):
            dest.write_text('{"profiles": []}')
            return dest

        monkeypatch.setattr(download_mod, "download", fake)
        assert ensure_document(tmp_path / "profiles.json", "https://x.org") == "downloaded"

    def test_nothing_available(self, tmp_path: Path):
        with pytest.raises(NotFound):
            ensure_document(tmp_path / "unknown.json")


class TestCheckUpdate:
    def test_update_available(self, monkeypatch):
        monkeypatch.setattr(updates, "download", lambda url: "9.9.9\n")
        result = check_update("https://x.org", current="0.1.0")
        assert result == {"ok": True, "current": "0.1.0", "latest": "9.9.9", "update_available": True}

    def test_up_to_date(self, monkeypatch):
        monkeypatch.setattr(updates, "download", lambda url: __version__)
        assert check_update("https://x.org")["update_available"] is False

    def test_offline(self, monkeypatch):
        monkeypatch.setattr(updates, "download", _offline)
        result = check_update("https://x.org")
        assert result["ok"] is False
        assert "Download failed" in result["error"]

    def test_no_source(self):
        assert check_update("")["ok"] is False


class TestRefreshDocuments:
    def test_partial_failure(self, tmp_path: Path, monkeypatch):
        def fake(url, dest=None, timeout=30):
            if url.endswith("lang.json"):
                raise NetworkUnavailable("boom")
            dest.write_text("{}")
            return dest

        monkeypatch.setattr(updates, "download", fake)
        result = refresh_documents("https://x.org", [tmp_path / "lang.json", tmp_path / "tasks.json"])
        assert result["ok"] is False
        assert result["files"] == {"lang.json": "boom", "tasks.json": "downloaded"}


class TestUpdateSystem:
    def test_runs_every_command(self, make_shell):
        shell = make_shell(codes={"sudo apt update": 1})
        result = update_system(PlatformInfo(family="linux", package_manager="apt"), shell)
        assert result["ok"] is True
        assert shell.commands == ["sudo apt update", "sudo apt upgrade -y"]
        assert result["commands"][0]["return_code"] == 1

    def test_no_manager(self, shell):
        result = update_system(PlatformInfo(family="linux"), shell)
        assert result["ok"] is False
        assert shell.commands == []
