"""JSON-backed task and profile stores."""

from uam.core.stores.profile_store import ProfileStore
from uam.core.stores.task_store import TaskStore, Translator

__all__ = ["ProfileStore", "TaskStore", "Translator"]
