"""
Task Runner — run a task by name on the current platform.

Per invocation::

    lookup ──► found      download (if a URL is set) → commands in order
           └─► not found  native package manager install → record a
                          minimal task for this platform

Commands are fire-and-continue: every command is attempted, exit codes
are collected on the report, and a failing command neither stops the
sequence nor fails the task. The fallback records its task whether or
not the install succeeded, unless ``strict_fallback`` is set.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from uam.core.errors import NotFound, UamError
from uam.core.models.profile import Profile
from uam.core.models.run import CommandOutcome, ProfileReport, RunReport
from uam.core.models.task import PLATFORMS, Task
from uam.core.services.platform_probe import PlatformInfo, fallback_install_command
from uam.core.services.shell import CommandRunner, run_shell
from uam.core.stores.task_store import TaskStore

logger = logging.getLogger(__name__)

# download URL → outcomes of the install commands it ran
Installer = Callable[[str], list[CommandOutcome]]


class TaskRunner:
    """Executes tasks from a ``TaskStore`` on one platform.

    Args:
        tasks: The task store (fallback records are written to it).
        platform: Probed or simulated platform.
        run_command: Runs one literal shell command, returns its exit code.
        installer: Download-and-install collaborator for task URLs.
        strict_fallback: Only record a fallback task when its install
            exited 0.
    """

    def __init__(
        self,
        tasks: TaskStore,
        platform: PlatformInfo,
        *,
        run_command: CommandRunner = run_shell,
        installer: Installer | None = None,
        strict_fallback: bool = False,
    ) -> None:
        self.tasks = tasks
        self.platform = platform
        self.run_command = run_command
        self.installer = installer
        self.strict_fallback = strict_fallback

    def run(self, name: str) -> RunReport:
        """Run one task; never raises for expected failures."""
        start = time.monotonic()
        try:
            task = self.tasks.find(name)
        except NotFound:
            logger.warning("Task '%s' not found — trying the native package manager", name)
            report = self._fallback(name)
        else:
            report = self._run_task(task)

        report.ended_at = datetime.now(UTC).isoformat()
        report.duration_ms = int((time.monotonic() - start) * 1000)
        return report

    def run_many(
        self,
        names: Iterable[str],
        on_start: Callable[[str], None] | None = None,
        on_done: Callable[[RunReport], None] | None = None,
    ) -> list[RunReport]:
        """Run tasks in order; the hooks fire around each one."""
        reports = []
        for name in names:
            if on_start:
                on_start(name)
            report = self.run(name)
            if on_done:
                on_done(report)
            reports.append(report)
        return reports

    def run_profile(
        self,
        profile: Profile,
        on_start: Callable[[str], None] | None = None,
        on_done: Callable[[RunReport], None] | None = None,
    ) -> ProfileReport:
        """Run every task reference in declared order; no rollback."""
        report = ProfileReport(profile=profile.name)
        if not profile.tasks:
            logger.warning("Profile '%s' has no tasks", profile.name)
            return report

        report.reports = self.run_many(profile.tasks, on_start, on_done)
        logger.info(
            "Profile '%s': %d/%d task(s) ok",
            profile.name, report.succeeded, report.total,
        )
        return report

    # ── Found ───────────────────────────────────────────────────

    def _run_task(self, task: Task) -> RunReport:
        family = self.platform.family
        url = task.url_for(family)
        report = RunReport(task=task.name, platform=family, download_url=url)

        if url:
            if self.installer is None:
                logger.warning("Task '%s' has a download URL but no installer is configured", task.name)
            else:
                try:
                    report.commands.extend(self.installer(url))
                except UamError as e:
                    logger.error("Download for '%s' failed: %s", task.name, e)
                    report.status = "failed"
                    report.error = str(e)
                    return report

        commands = task.commands_for(family)
        if not commands and not url:
            logger.info("Task '%s' has nothing to run on %s", task.name, family)

        for command in commands:
            code = self.run_command(command)
            report.commands.append(CommandOutcome(command=command, return_code=code))

        if report.failed_commands:
            logger.warning(
                "Task '%s': %d command(s) failed, sequence completed",
                task.name, len(report.failed_commands),
            )
        return report

    # ── Not found ───────────────────────────────────────────────

    def _fallback(self, name: str) -> RunReport:
        family = self.platform.family
        if family not in PLATFORMS:
            return RunReport.failure(
                name, family, f"Unsupported platform: {family}", found=False, fallback=True,
            )

        command = fallback_install_command(name, self.platform.package_manager)
        if command is None:
            return RunReport.failure(
                name,
                family,
                f"No supported package manager on {family}"
                + (f" ({self.platform.distro})" if self.platform.distro else ""),
                found=False,
                fallback=True,
            )

        code = self.run_command(command)
        report = RunReport(
            task=name,
            platform=family,
            found=False,
            fallback=True,
            commands=[CommandOutcome(command=command, return_code=code)],
        )

        if self.strict_fallback and code != 0:
            report.status = "failed"
            report.error = f"Install exited with {code}; task not recorded"
            return report

        try:
            self.tasks.record_fallback(name, family, command)
            report.recorded = True
        except (UamError, OSError) as e:
            logger.error("Could not record fallback task '%s': %s", name, e)
            report.error = str(e)
        return report
