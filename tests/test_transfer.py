"""
Tests for profile import / export.
"""

import json
from pathlib import Path

import pytest

from uam.core.errors import DocumentCorrupt, InvalidInput, NotFound
from uam.core.services.transfer import (
    DEFAULT_EXPORT_NAME,
    detect_import_format,
    export_profile,
    import_profile,
    list_import_candidates,
)
from uam.core.stores import ProfileStore, TaskStore


class TestDetectFormat:
    def test_minimal(self):
        assert detect_import_format({"dev": ["git"]}) == ("dev", "minimal")

    def test_complete(self):
        assert detect_import_format({"dev": [{"name": "git"}]}) == ("dev", "complete")

    def test_empty_list_is_minimal(self):
        assert detect_import_format({"dev": []}) == ("dev", "minimal")

    @pytest.mark.parametrize("data", [[], {}, {"dev": "git"}, "x"])
    def test_rejects(self, data):
        with pytest.raises(DocumentCorrupt):
            detect_import_format(data)


class TestImport:
    def test_minimal(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        path = tmp_path / "ops.json"
        path.write_text(json.dumps({"ops": ["vim", "htop", "vim"]}))

        result = import_profile(path, task_store, profile_store)
        assert result.format == "minimal"
        assert result.tasks == ["htop", "vim"]
        assert result.added_tasks == []
        assert profile_store.find("ops").tasks == ["htop", "vim"]
        assert not task_store.exists("htop")

    def test_complete_adds_unknown_tasks(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        path = tmp_path / "ops-full.json"
        path.write_text(json.dumps({
            "ops": [
                {"name": "vim", "linux": ["something else"]},
                {"name": "htop", "description": {"en": "Process viewer"}, "linux": ["sudo apt install -y htop"]},
            ]
        }))

        result = import_profile(path, task_store, profile_store)
        assert result.format == "complete"
        assert result.added_tasks == ["htop"]
        assert task_store.find("htop").linux == ["sudo apt install -y htop"]
        # known tasks are left untouched
        assert task_store.find("vim").linux == ["sudo apt install -y vim"]

    def test_replaces_existing_profile(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        path = tmp_path / "dev.json"
        path.write_text(json.dumps({"dev": ["curl"]}))
        import_profile(path, task_store, profile_store)
        assert profile_store.find("dev").tasks == ["curl"]
        assert len(profile_store) == 2

    def test_bad_entry(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"dev": ["git", 3]}))
        with pytest.raises(DocumentCorrupt):
            import_profile(path, task_store, profile_store)
        assert profile_store.find("dev").tasks == ["git", "vim"]


class TestExport:
    def test_writes_both_files(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        result = export_profile(
            "mine",
            task_store,
            profile_store,
            profile_names=["dev"],
            task_names=["curl", "git"],
            out_dir=tmp_path,
        )
        assert result.tasks == ["curl", "git", "vim"]
        assert json.loads((tmp_path / "mine.json").read_text()) == {"mine": ["curl", "git", "vim"]}

        full = json.loads((tmp_path / "mine-full.json").read_text())
        # task document order, not name order
        assert [t["name"] for t in full["mine"]] == ["vim", "git", "curl"]
        assert not result.saved
        assert not profile_store.exists("mine")

    def test_save(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        result = export_profile("mine", task_store, profile_store, task_names=["vim"], out_dir=tmp_path, save=True)
        assert result.saved
        assert profile_store.find("mine").tasks == ["vim"]

    def test_default_name(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        result = export_profile("  ", task_store, profile_store, task_names=["vim"], out_dir=tmp_path)
        assert result.profile == DEFAULT_EXPORT_NAME
        assert (tmp_path / f"{DEFAULT_EXPORT_NAME}.json").is_file()

    def test_unsafe_name(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        with pytest.raises(InvalidInput):
            export_profile("../evil", task_store, profile_store, task_names=["vim"], out_dir=tmp_path)

    def test_nothing_selected(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        with pytest.raises(InvalidInput):
            export_profile("x", task_store, profile_store, profile_names=["empty"], out_dir=tmp_path)

    def test_unknown_profile(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        with pytest.raises(NotFound):
            export_profile("x", task_store, profile_store, profile_names=["nope"], out_dir=tmp_path)


class TestRoundTrip:
    def test_export_then_import_minimal(self, tmp_path: Path, task_store: TaskStore, profile_store: ProfileStore):
        profile_store.set_tasks("dev", ["vim", "git", "curl"])
        out = tmp_path / "out"
        export_profile("copy", task_store, profile_store, profile_names=["dev"], out_dir=out)

        result = import_profile(out / "copy.json", task_store, profile_store)
        assert result.tasks == sorted({"vim", "git", "curl"})
        assert profile_store.find("copy").tasks == profile_store.find("dev").tasks


class TestCandidates:
    def test_lists_json_except_core_documents(self, data_dir: Path):
        (data_dir / "dev.json").write_text("{}")
        (data_dir / "notes.txt").write_text("")
        found = list_import_candidates(data_dir, exclude=[data_dir / "tasks.json", data_dir / "profiles.json"])
        assert [p.name for p in found] == ["dev.json", "lang.json"]

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(NotFound):
            list_import_candidates(tmp_path / "nope")
