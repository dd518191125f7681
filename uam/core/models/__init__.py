"""
Domain models — Pydantic types for tasks, profiles and run reports.

    from uam.core.models import Task, Profile, RunReport
"""

from uam.core.models.profile import Profile, ProfileDocument
from uam.core.models.run import CommandOutcome, ProfileReport, RunReport
from uam.core.models.task import PLATFORMS, TEXT_FIELDS, Task, TaskDocument, localized

__all__ = [
    "CommandOutcome",
    "PLATFORMS",
    "Profile",
    "ProfileDocument",
    "ProfileReport",
    "RunReport",
    "TEXT_FIELDS",
    "Task",
    "TaskDocument",
    "localized",
]
