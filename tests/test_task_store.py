"""
Tests for the Task Store — CRUD and persistence.
"""

import json
from pathlib import Path

import pytest

from uam.core.errors import DocumentCorrupt, DuplicateKey, InvalidInput, NotFound
from uam.core.models import Task
from uam.core.stores import TaskStore
from uam.core.stores.task_store import FALLBACK_DESCRIPTION


def _on_disk(store: TaskStore) -> list[dict]:
    return json.loads(store.path.read_text(encoding="utf-8"))["tasks"]


class TestQueries:
    def test_load(self, task_store: TaskStore):
        assert task_store.names() == ["vim", "git", "curl"]
        assert len(task_store) == 3

    def test_find(self, task_store: TaskStore):
        assert task_store.find("git").commands_for("windows") == ["winget install -e --id Git.Git"]

    def test_find_missing(self, task_store: TaskStore):
        with pytest.raises(NotFound):
            task_store.find("emacs")

    def test_select_keeps_document_order(self, task_store: TaskStore):
        assert [t.name for t in task_store.select(["curl", "vim", "nope"])] == ["vim", "curl"]

    def test_tolerant_reading(self, task_store: TaskStore):
        curl = task_store.find("curl")
        assert curl.description == {"en": "HTTP client"}
        assert curl.linux == ["sudo apt install -y curl"]

    def test_missing_document(self, tmp_path: Path):
        with pytest.raises(NotFound):
            TaskStore(tmp_path / "tasks.json")

    def test_corrupt_document(self, tmp_path: Path):
        path = tmp_path / "tasks.json"
        path.write_text("{not json")
        with pytest.raises(DocumentCorrupt):
            TaskStore(path)


class TestCreate:
    def test_create_then_find(self, task_store: TaskStore):
        task_store.create(Task(name="htop", linux=["sudo apt install -y htop"]))
        assert task_store.find("htop").name == "htop"
        assert _on_disk(task_store)[-1] == {"name": "htop", "linux": ["sudo apt install -y htop"]}

    def test_duplicate_rejected(self, task_store: TaskStore):
        with pytest.raises(DuplicateKey):
            task_store.create(Task(name="vim"))
        assert len(task_store) == 3
        assert len(_on_disk(task_store)) == 3

    def test_rewrite_keeps_raw_shape_of_untouched_tasks(self, task_store: TaskStore):
        task_store.create(Task(name="htop"))
        vim = _on_disk(task_store)[0]
        assert set(vim) == {"name", "description", "category", "linux", "macos"}

    def test_reloads_before_mutating(self, task_store: TaskStore, data_dir: Path):
        other = TaskStore(data_dir / "tasks.json")
        other.create(Task(name="htop"))
        task_store.create(Task(name="tmux"))
        assert task_store.names() == ["vim", "git", "curl", "htop", "tmux"]


class TestUpdateField:
    def test_english(self, task_store: TaskStore):
        task_store.update_field("vim", "description", "Editor", "en")
        assert task_store.find("vim").description == {"en": "Editor", "fr": "Éditeur de texte"}

    def test_other_language_with_translation(self, task_store: TaskStore):
        calls = []

        def translator(text, target):
            calls.append((text, target))
            return "Versioning"

        task_store.update_field("git", "category", "Versionnage", "fr", translator)
        assert calls == [("Versionnage", "en")]
        assert task_store.find("git").category == {"en": "Versioning", "fr": "Versionnage"}

    def test_other_language_without_translation(self, task_store: TaskStore):
        task_store.update_field("curl", "category", "Réseau", "fr", lambda text, target: None)
        assert task_store.find("curl").category == {"fr": "Réseau"}

    def test_english_never_asks(self, task_store: TaskStore):
        task_store.update_field("vim", "category", "Editors", "en", lambda *a: pytest.fail("asked"))

    def test_unknown_field(self, task_store: TaskStore):
        with pytest.raises(InvalidInput):
            task_store.update_field("vim", "linux", "x", "en")

    def test_missing_task(self, task_store: TaskStore):
        with pytest.raises(NotFound):
            task_store.update_field("emacs", "description", "x", "en")


class TestAppendCommand:
    def test_append(self, task_store: TaskStore):
        task_store.append_command("vim", "linux", "vim --version")
        assert task_store.find("vim").linux == ["sudo apt install -y vim", "vim --version"]

    def test_new_platform(self, task_store: TaskStore):
        task_store.append_command("vim", "windows", "winget install -e --id vim.vim")
        assert _on_disk(task_store)[0]["windows"] == ["winget install -e --id vim.vim"]

    def test_bad_platform(self, task_store: TaskStore):
        with pytest.raises(InvalidInput):
            task_store.append_command("vim", "amiga", "x")

    def test_blank_command(self, task_store: TaskStore):
        with pytest.raises(InvalidInput):
            task_store.append_command("vim", "linux", "   ")


class TestDelete:
    def test_delete_then_find(self, task_store: TaskStore):
        assert task_store.delete("vim") is True
        with pytest.raises(NotFound):
            task_store.find("vim")
        assert [t["name"] for t in _on_disk(task_store)] == ["git", "curl"]

    def test_delete_absent_is_noop(self, task_store: TaskStore):
        before = task_store.path.read_text()
        assert task_store.delete("emacs") is False
        assert len(task_store) == 3
        assert task_store.path.read_text() == before


class TestRecordFallback:
    def test_minimal_record(self, task_store: TaskStore):
        task_store.record_fallback("foo", "linux", "sudo apt install -y foo")
        assert _on_disk(task_store)[-1] == {
            "name": "foo",
            "description": {"en": FALLBACK_DESCRIPTION},
            "linux": ["sudo apt install -y foo"],
        }
