"""
Run reports — the outcome of running a task or a profile.

Commands are fire-and-continue: a non-zero exit code is recorded on the
report but never stops the remaining commands, and never flips the
task's status. ``status`` only turns ``failed`` when the task could not
be run at all (no fallback package manager, download error, ...).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandOutcome(BaseModel):
    """One literal shell command and its exit code."""

    command: str
    return_code: int = 0

    @property
    def ok(self) -> bool:
        return self.return_code == 0


class RunReport(BaseModel):
    """Result of running a single task."""

    task: str
    platform: str
    status: Literal["ok", "failed"] = "ok"

    found: bool = True            # task existed in the task document
    fallback: bool = False        # native package manager was used instead
    recorded: bool = False        # a fallback task record was written
    download_url: str | None = None

    commands: list[CommandOutcome] = Field(default_factory=list)
    error: str | None = None

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed_commands(self) -> list[CommandOutcome]:
        return [c for c in self.commands if not c.ok]

    @classmethod
    def failure(cls, task: str, platform: str, error: str, **kwargs: Any) -> RunReport:
        """Create a failed report."""
        return cls(task=task, platform=platform, status="failed", error=error, **kwargs)


class ProfileReport(BaseModel):
    """Result of running every task of a profile, in order."""

    profile: str
    reports: list[RunReport] = Field(default_factory=list)
    error: str | None = None

    @property
    def total(self) -> int:
        return len(self.reports)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.reports if r.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def ok(self) -> bool:
        return self.error is None and self.failed == 0
