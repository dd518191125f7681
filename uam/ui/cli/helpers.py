"""
Shared CLI plumbing — workspace loading, error reporting, rendering.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import click

from uam.core.errors import UamError
from uam.core.models import Profile, ProfileReport, RunReport, Task
from uam.core.use_cases.bootstrap import Workspace
from uam.ui.cli import prompts


def fail(message: str) -> NoReturn:
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn a ``UamError`` into ``❌ message`` and exit code 1."""
    try:
        yield
    except UamError as e:
        fail(str(e))


def echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def title(text: str) -> None:
    click.echo()
    click.secho(text, fg="cyan", bold=True)
    click.secho("─" * max(len(text), 20), fg="cyan")


# ── Workspace ───────────────────────────────────────────────────


def get_workspace(ctx: click.Context) -> Workspace:
    """Load settings and documents once per invocation."""
    obj = ctx.ensure_object(dict)
    workspace = obj.get("workspace")
    if workspace is not None:
        return workspace

    from uam.core.config.loader import load_settings
    from uam.core.services.shell import run_shell
    from uam.core.use_cases.bootstrap import open_workspace

    def confirm_redownload(filename: str) -> bool:
        return prompts.redownload_prompt(obj["workspace"].strings)(filename)

    with reporting_errors():
        settings = load_settings(obj.get("config_path"))
        overrides: dict[str, object] = {}
        if obj.get("language"):
            overrides["language"] = obj["language"]
        if obj.get("platform"):
            overrides["platform"] = obj["platform"]
        if obj.get("no_input") or not sys.stdin.isatty():
            overrides["interactive"] = False
        if overrides:
            settings = settings.model_copy(update=overrides)

        workspace = open_workspace(
            settings,
            run_command=prompts.echoing(run_shell),
            confirm_redownload=confirm_redownload if settings.interactive else None,
        )

    if settings.interactive:
        workspace.strings.on_missing = prompts.missing_translation_handler(workspace.strings)
    obj["workspace"] = workspace
    return workspace


def translator_for(workspace: Workspace) -> prompts.Translator | None:
    """Interactive translator when a user is there to answer."""
    if workspace.settings.interactive and workspace.language != "en":
        return prompts.interactive_translator(workspace.strings)
    return None


# ── Rendering ───────────────────────────────────────────────────


def echo_task_line(workspace: Workspace, task: Task, index: int | None = None) -> None:
    lang = workspace.language
    prefix = f"{index:>3}) " if index is not None else "   "
    line = f"{prefix}{click.style(task.name, bold=True)}"
    description = task.localized("description", lang)
    if description:
        line += f" — {description}"
    category = task.localized("category", lang)
    if category:
        line += click.style(f" [{category}]", fg="bright_black")
    click.echo(line)


def echo_task(workspace: Workspace, task: Task) -> None:
    t = workspace.t
    lang = workspace.language
    title(f"📦 {task.name}")
    click.echo(f"   {t('description', 'tasks')}: {task.localized('description', lang) or '-'}")
    click.echo(f"   {t('category', 'tasks')}: {task.localized('category', lang) or '-'}")
    for platform in ("linux", "windows", "macos"):
        commands = task.commands_for(platform)
        url = task.url_for(platform)
        if not commands and not url:
            continue
        marker = "▶" if platform == workspace.platform.family else " "
        click.secho(f" {marker} {platform}:", fg="cyan")
        if url:
            click.echo(f"      🔗 {url}")
        for command in commands:
            click.echo(f"      $ {command}")


def echo_profile_line(workspace: Workspace, profile: Profile, index: int | None = None) -> None:
    prefix = f"{index:>3}) " if index is not None else "   "
    line = f"{prefix}{click.style(profile.name, bold=True)}"
    description = profile.localized_description(workspace.language)
    if description:
        line += f" — {description}"
    line += click.style(f" ({len(profile.tasks)})", fg="bright_black")
    click.echo(line)


def echo_profile(workspace: Workspace, profile: Profile) -> None:
    t = workspace.t
    title(f"📋 {profile.name}")
    description = profile.localized_description(workspace.language)
    click.echo(f"   {t('description', 'tasks')}: {description or '-'}")
    if not profile.tasks:
        click.secho(f"   ⚠️  {t('no_tasks', 'profiles')}", fg="yellow")
    for name in profile.tasks:
        known = workspace.tasks.exists(name)
        icon = "•" if known else "?"
        click.echo(f"   {icon} {name}")


def echo_run_report(workspace: Workspace, report: RunReport) -> None:
    t = workspace.t
    if report.fallback:
        if report.recorded:
            click.secho(f"   ➕ {t('recorded', 'runner', name=report.task)}", fg="blue")
    for outcome in report.failed_commands:
        click.secho(
            f"   ⚠️  {t('command_failed', 'runner', code=outcome.return_code)}: {outcome.command}",
            fg="yellow",
        )
    if report.ok:
        click.secho(f"✅ {t('task_done', 'runner', name=report.task)}", fg="green")
    else:
        click.secho(f"❌ {t('task_failed', 'runner', name=report.task)}: {report.error}", fg="red")


def announce_task(workspace: Workspace, name: str) -> None:
    t = workspace.t
    if workspace.tasks.exists(name):
        click.secho(f"\n⚙️  {t('running', 'runner', name=name)}", fg="cyan", bold=True)
    else:
        click.secho(f"\n⚠️  {t('not_found', 'runner', name=name)}", fg="yellow")


def run_and_report(workspace: Workspace, names: list[str]) -> list[RunReport]:
    """Run tasks one by one, printing progress; returns the reports."""
    return workspace.runner.run_many(
        names,
        on_start=lambda name: announce_task(workspace, name),
        on_done=lambda report: echo_run_report(workspace, report),
    )


def run_profile_and_report(workspace: Workspace, profile: Profile) -> ProfileReport:
    report = workspace.runner.run_profile(
        profile,
        on_start=lambda name: announce_task(workspace, name),
        on_done=lambda r: echo_run_report(workspace, r),
    )
    echo_profile_summary(workspace, report)
    return report


def echo_profile_summary(workspace: Workspace, report: ProfileReport) -> None:
    t = workspace.t
    if report.error:
        click.secho(f"❌ {report.error}", fg="red")
        return
    color = "green" if report.ok else "yellow"
    click.secho(
        f"\n📊 {t('profile_summary', 'runner', name=report.profile, ok=report.succeeded, total=report.total)}",
        fg=color,
        bold=True,
    )


def localized_value(workspace: Workspace, value: str) -> dict[str, str]:
    """``{current: value}``, plus ``en`` when the user supplies one."""
    value = value.strip()
    if not value:
        return {}
    lang = workspace.language
    field = {lang: value}
    translator = translator_for(workspace)
    if translator is not None:
        english = translator(value, "en")
        if english:
            field["en"] = english
    return field
