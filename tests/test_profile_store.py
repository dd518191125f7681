"""
Tests for the Profile Store.
"""

import json

import pytest

from uam.core.errors import DuplicateKey, NotFound
from uam.core.models import Profile
from uam.core.stores import ProfileStore
from uam.core.stores.profile_store import unique_sorted


class TestProfileStore:
    def test_load(self, profile_store: ProfileStore):
        assert profile_store.names() == ["dev", "empty"]

    def test_create_then_find(self, profile_store: ProfileStore):
        profile_store.create(Profile(name="ops", tasks=["htop"]))
        assert profile_store.find("ops").tasks == ["htop"]

    def test_duplicate(self, profile_store: ProfileStore):
        with pytest.raises(DuplicateKey):
            profile_store.create(Profile(name="dev"))
        assert len(profile_store) == 2

    def test_add_task_ref_is_idempotent(self, profile_store: ProfileStore):
        profile_store.add_task_ref("dev", "curl")
        profile_store.add_task_ref("dev", "curl")
        assert profile_store.find("dev").tasks == ["curl", "git", "vim"]

    def test_add_task_ref_missing_profile(self, profile_store: ProfileStore):
        with pytest.raises(NotFound):
            profile_store.add_task_ref("nope", "curl")

    def test_dangling_reference_allowed(self, profile_store: ProfileStore):
        profile_store.add_task_ref("empty", "does-not-exist")
        assert profile_store.find("empty").tasks == ["does-not-exist"]

    def test_update_description(self, profile_store: ProfileStore):
        profile_store.update_description("dev", "Outils", "fr", lambda text, target: "Tools")
        assert profile_store.find("dev").description == {"en": "Tools", "fr": "Outils"}

    def test_set_tasks_creates(self, profile_store: ProfileStore):
        profile_store.set_tasks("new", ["vim", "git", "vim", " "])
        assert profile_store.find("new").tasks == ["git", "vim"]

    def test_set_tasks_replaces(self, profile_store: ProfileStore):
        profile_store.set_tasks("dev", ["curl"])
        assert profile_store.find("dev").tasks == ["curl"]
        assert profile_store.find("dev").description == {"en": "Developer tools"}

    def test_delete(self, profile_store: ProfileStore):
        assert profile_store.delete("dev") is True
        assert profile_store.delete("dev") is False
        with pytest.raises(NotFound):
            profile_store.find("dev")
        data = json.loads(profile_store.path.read_text())
        assert [p["name"] for p in data["profiles"]] == ["empty"]


class TestUniqueSorted:
    def test_basic(self):
        assert unique_sorted(["b", "a", "b", "", " c "]) == ["a", "b", "c"]
