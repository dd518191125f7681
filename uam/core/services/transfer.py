"""
Profile import / export.

Import documents come in two shapes, told apart by the type of the
first element of the first key's array::

    {"dev": ["git", "vim"]}                                  # minimal
    {"dev": [{"name": "git", "linux": [...]}, ...]}          # complete

Export writes both shapes side by side: ``<name>.json`` and
``<name>-full.json``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from uam.core.errors import DocumentCorrupt, InvalidInput, NotFound
from uam.core.models.task import Task
from uam.core.persistence.json_document import read_json, write_json
from uam.core.stores.profile_store import ProfileStore, unique_sorted
from uam.core.stores.task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "exported_profile"

_SAFE_NAME = re.compile(r"^[\w.\-]+$")


@dataclass
class ImportResult:
    """Outcome of importing one profile document."""

    profile: str
    format: str                                       # minimal | complete
    tasks: list[str] = field(default_factory=list)
    added_tasks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "profile": self.profile,
            "format": self.format,
            "tasks": self.tasks,
            "added_tasks": self.added_tasks,
        }


@dataclass
class ExportResult:
    """Files written by an export."""

    profile: str
    minimal_path: Path
    complete_path: Path
    tasks: list[str] = field(default_factory=list)
    saved: bool = False

    def to_dict(self) -> dict:
        return {
            "profile": self.profile,
            "minimal": str(self.minimal_path),
            "complete": str(self.complete_path),
            "tasks": self.tasks,
            "saved": self.saved,
        }


def detect_import_format(data: Any) -> tuple[str, str]:
    """Return ``(profile_key, "minimal" | "complete")``.

    Raises:
        DocumentCorrupt: Not a ``{key: [...]}`` document.
    """
    if not isinstance(data, dict) or not data:
        raise DocumentCorrupt("Import document must be a non-empty JSON object")

    key = next(iter(data))
    items = data[key]
    if not isinstance(items, list):
        raise DocumentCorrupt(f"Import key '{key}' must hold an array")

    kind = "complete" if items and isinstance(items[0], dict) else "minimal"
    return key, kind


def _names_from(items: list[Any], kind: str) -> list[str]:
    names = []
    for item in items:
        if kind == "minimal" and isinstance(item, str):
            names.append(item)
        elif kind == "complete" and isinstance(item, dict) and isinstance(item.get("name"), str):
            names.append(item["name"])
        else:
            raise DocumentCorrupt(f"Unexpected entry in {kind} import: {item!r}")
    return names


def import_profile(path: Path, tasks: TaskStore, profiles: ProfileStore) -> ImportResult:
    """Import a profile document into the stores.

    In complete documents, task objects unknown to ``tasks`` are added.
    The profile is created, or its task list replaced, with the sorted
    unique task names.
    """
    data = read_json(path)
    key, kind = detect_import_format(data)
    items = data[key]
    names = _names_from(items, kind)

    result = ImportResult(profile=key, format=kind)
    if kind == "complete":
        for item in items:
            if tasks.exists(item["name"]):
                continue
            try:
                task = Task.model_validate(item)
            except ValidationError as e:
                raise DocumentCorrupt(f"Invalid task '{item['name']}' in {path}: {e}") from e
            tasks.create(task)
            result.added_tasks.append(task.name)

    profile = profiles.set_tasks(key, names)
    result.tasks = list(profile.tasks)
    logger.info(
        "Imported profile '%s' (%s, %d task(s), %d new)",
        key, kind, len(result.tasks), len(result.added_tasks),
    )
    return result


def export_profile(
    name: str,
    tasks: TaskStore,
    profiles: ProfileStore,
    *,
    profile_names: Iterable[str] = (),
    task_names: Iterable[str] = (),
    out_dir: Path,
    save: bool = False,
) -> ExportResult:
    """Export the union of profiles' task refs and extra tasks.

    Raises:
        InvalidInput: Unusable export name or nothing selected.
        NotFound: Unknown profile or extra task.
    """
    name = (name or "").strip() or DEFAULT_EXPORT_NAME
    if not _SAFE_NAME.match(name):
        raise InvalidInput(f"Invalid export name: '{name}'")

    merged: list[str] = []
    for profile_name in profile_names:
        merged.extend(profiles.find(profile_name).tasks)
    for task_name in task_names:
        merged.append(tasks.find(task_name).name)

    selected = unique_sorted(merged)
    if not selected:
        raise InvalidInput("Nothing to export: select at least one profile or task")

    minimal_path = out_dir / f"{name}.json"
    complete_path = out_dir / f"{name}-full.json"
    write_json(minimal_path, {name: selected})
    write_json(complete_path, {name: [t.to_document() for t in tasks.select(selected)]})

    result = ExportResult(
        profile=name,
        minimal_path=minimal_path,
        complete_path=complete_path,
        tasks=selected,
    )
    if save:
        profiles.set_tasks(name, selected)
        result.saved = True

    logger.info("Exported '%s' (%d task(s)) to %s", name, len(selected), out_dir)
    return result


def list_import_candidates(directory: Path, exclude: Iterable[Path] = ()) -> list[Path]:
    """JSON files in ``directory`` other than the core documents."""
    if not directory.is_dir():
        raise NotFound(f"Directory not found: {directory}")
    skip = {p.resolve() for p in exclude}
    return sorted(p for p in directory.glob("*.json") if p.resolve() not in skip)
