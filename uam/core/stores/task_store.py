"""
Task Store — CRUD over ``tasks.json``.

The document is the source of truth; the in-memory list is a cache.
Every mutation reloads the document, applies the change and writes the
whole collection back atomically (read-modify-write, last writer wins).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from uam.core.errors import DuplicateKey, InvalidInput, NotFound
from uam.core.models.task import PLATFORMS, TEXT_FIELDS, Task, TaskDocument
from uam.core.persistence.json_document import load_model, save_model

logger = logging.getLogger(__name__)

# (text, target_language) → translated text, or None when not supplied
Translator = Callable[[str, str], "str | None"]

FALLBACK_DESCRIPTION = "Automatically added"


class TaskStore:
    """Ordered collection of tasks persisted in a JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._doc = TaskDocument()
        self.load()

    def load(self) -> None:
        """Reload the cache from disk."""
        self._doc = load_model(self.path, TaskDocument)

    def _save(self) -> None:
        save_model(self.path, self._doc)

    # ── Queries ─────────────────────────────────────────────────

    @property
    def tasks(self) -> list[Task]:
        return list(self._doc.tasks)

    def names(self) -> list[str]:
        return [t.name for t in self._doc.tasks]

    def __len__(self) -> int:
        return len(self._doc.tasks)

    def exists(self, name: str) -> bool:
        return self._get(name) is not None

    def find(self, name: str) -> Task:
        """Return the task called ``name``.

        Raises:
            NotFound: No such task.
        """
        task = self._get(name)
        if task is None:
            raise NotFound(f"Task not found: '{name}'")
        return task

    def select(self, names: Iterable[str]) -> list[Task]:
        """Tasks whose name is in ``names``, in document order."""
        wanted = set(names)
        return [t for t in self._doc.tasks if t.name in wanted]

    def _get(self, name: str) -> Task | None:
        for task in self._doc.tasks:
            if task.name == name:
                return task
        return None

    # ── Mutations ───────────────────────────────────────────────

    def create(self, task: Task) -> Task:
        """Append a new task.

        Raises:
            DuplicateKey: A task with that name already exists.
        """
        self.load()
        if self._get(task.name) is not None:
            raise DuplicateKey(f"Task already exists: '{task.name}'")
        self._doc.tasks.append(task)
        self._save()
        logger.info("Task '%s' created", task.name)
        return task

    def update_field(
        self,
        name: str,
        field: str,
        value: str,
        language: str,
        translator: Translator | None = None,
    ) -> Task:
        """Set ``task.<field>[language] = value``.

        When ``language`` is not English, ``translator`` is asked for the
        English text; ``en`` is only set when a translation is supplied.

        Raises:
            InvalidInput: ``field`` is not description/category.
            NotFound: No such task.
        """
        if field not in TEXT_FIELDS:
            raise InvalidInput(f"Unknown task field: '{field}' (expected one of {', '.join(TEXT_FIELDS)})")

        english = None
        if language != "en" and translator is not None:
            english = translator(value, "en")

        self.load()
        task = self.find(name)
        updated = {**getattr(task, field), language: value}
        if english:
            updated["en"] = english
        setattr(task, field, updated)
        self._save()
        logger.info("Task '%s' %s[%s] updated", name, field, language)
        return task

    def append_command(self, name: str, platform: str, command: str) -> Task:
        """Append ``command`` to the task's command list for ``platform``.

        Raises:
            InvalidInput: Unknown platform or blank command.
            NotFound: No such task.
        """
        if platform not in PLATFORMS:
            raise InvalidInput(f"Unknown platform: '{platform}' (expected one of {', '.join(PLATFORMS)})")
        command = command.strip()
        if not command:
            raise InvalidInput("Command must not be empty")

        self.load()
        task = self.find(name)
        setattr(task, platform, [*getattr(task, platform), command])
        self._save()
        logger.info("Task '%s' gained a %s command", name, platform)
        return task

    def delete(self, name: str) -> bool:
        """Remove the task; a missing name is a no-op.

        Returns:
            True if a record was removed.
        """
        self.load()
        before = len(self._doc.tasks)
        self._doc.tasks = [t for t in self._doc.tasks if t.name != name]
        if len(self._doc.tasks) == before:
            logger.debug("Delete of unknown task '%s' ignored", name)
            return False
        self._save()
        logger.info("Task '%s' deleted", name)
        return True

    def record_fallback(self, name: str, platform: str, command: str) -> Task:
        """Append the minimal record left behind by a fallback install."""
        task = Task(
            name=name,
            description={"en": FALLBACK_DESCRIPTION},
            **{platform: [command]},
        )
        return self.create(task)
