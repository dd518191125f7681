"""
Profile Store — CRUD over ``profiles.json``.

Same read-modify-write discipline as the task store. Task references
are not checked against the task document: a dangling reference only
surfaces when the profile runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from uam.core.errors import DuplicateKey, NotFound
from uam.core.models.profile import Profile, ProfileDocument
from uam.core.persistence.json_document import load_model, save_model
from uam.core.stores.task_store import Translator

logger = logging.getLogger(__name__)


def unique_sorted(names: Iterable[str]) -> list[str]:
    """Set union semantics: strip, drop blanks and duplicates, sort."""
    return sorted({n.strip() for n in names if n and n.strip()})


class ProfileStore:
    """Named collections of task references persisted in a JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._doc = ProfileDocument()
        self.load()

    def load(self) -> None:
        self._doc = load_model(self.path, ProfileDocument)

    def _save(self) -> None:
        save_model(self.path, self._doc)

    @property
    def profiles(self) -> list[Profile]:
        return list(self._doc.profiles)

    def names(self) -> list[str]:
        return [p.name for p in self._doc.profiles]

    def __len__(self) -> int:
        return len(self._doc.profiles)

    def exists(self, name: str) -> bool:
        return self._get(name) is not None

    def find(self, name: str) -> Profile:
        """Return the profile called ``name``.

        Raises:
            NotFound: No such profile.
        """
        profile = self._get(name)
        if profile is None:
            raise NotFound(f"Profile not found: '{name}'")
        return profile

    def _get(self, name: str) -> Profile | None:
        for profile in self._doc.profiles:
            if profile.name == name:
                return profile
        return None

    def create(self, profile: Profile) -> Profile:
        """Append a new profile.

        Raises:
            DuplicateKey: A profile with that name already exists.
        """
        self.load()
        if self._get(profile.name) is not None:
            raise DuplicateKey(f"Profile already exists: '{profile.name}'")
        self._doc.profiles.append(profile)
        self._save()
        logger.info("Profile '%s' created with %d task(s)", profile.name, len(profile.tasks))
        return profile

    def update_description(
        self,
        name: str,
        value: str,
        language: str,
        translator: Translator | None = None,
    ) -> Profile:
        """Set ``description[language]``; non-English edits may also set ``en``."""
        english = None
        if language != "en" and translator is not None:
            english = translator(value, "en")

        self.load()
        profile = self.find(name)
        updated = {**profile.description, language: value}
        if english:
            updated["en"] = english
        profile.description = updated
        self._save()
        logger.info("Profile '%s' description[%s] updated", name, language)
        return profile

    def add_task_ref(self, name: str, task_name: str) -> Profile:
        """Add ``task_name``; the list is kept as a sorted set."""
        self.load()
        profile = self.find(name)
        profile.tasks = unique_sorted([*profile.tasks, task_name])
        self._save()
        logger.info("Task '%s' referenced by profile '%s'", task_name, name)
        return profile

    def set_tasks(self, name: str, task_names: Iterable[str]) -> Profile:
        """Replace the task list, creating the profile if needed."""
        tasks = unique_sorted(task_names)
        self.load()
        profile = self._get(name)
        if profile is None:
            profile = Profile(name=name, tasks=tasks)
            self._doc.profiles.append(profile)
        else:
            profile.tasks = tasks
        self._save()
        logger.info("Profile '%s' now references %d task(s)", name, len(tasks))
        return profile

    def delete(self, name: str) -> bool:
        """Remove the profile; a missing name is a no-op."""
        self.load()
        before = len(self._doc.profiles)
        self._doc.profiles = [p for p in self._doc.profiles if p.name != name]
        if len(self._doc.profiles) == before:
            logger.debug("Delete of unknown profile '%s' ignored", name)
            return False
        self._save()
        logger.info("Profile '%s' deleted", name)
        return True
