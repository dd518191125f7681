"""
CLI commands for the Task Store and the Task Runner.
"""

from __future__ import annotations

import sys

import click
from pydantic import ValidationError

from uam.core.errors import InvalidInput
from uam.core.models.task import PLATFORMS, Task
from uam.ui.cli.helpers import (
    echo_json,
    echo_task,
    echo_task_line,
    get_workspace,
    localized_value,
    reporting_errors,
    run_and_report,
    title,
    translator_for,
)
from uam.ui.cli.prompts import split_commands


@click.group()
def tasks() -> None:
    """Tasks — list, show, add, edit, delete, run."""


@tasks.command("list")
@click.option("--category", default=None, help="Only tasks of this category.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_tasks(ctx: click.Context, category: str | None, as_json: bool) -> None:
    """List every task in document order."""
    ws = get_workspace(ctx)
    selected = ws.tasks.tasks
    if category:
        wanted = category.lower()
        selected = [
            t for t in selected
            if any(v.lower() == wanted for v in t.category.values())
        ]

    if as_json:
        echo_json([t.to_document() for t in selected])
        return

    if not selected:
        click.secho(f"⚠️  {ws.t('none', 'tasks')}", fg="yellow")
        return
    title(f"📦 {ws.t('title', 'tasks')} ({len(selected)})")
    for task in selected:
        echo_task_line(ws, task)


@tasks.command("show")
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show_task(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show one task with its commands per platform."""
    ws = get_workspace(ctx)
    with reporting_errors():
        task = ws.tasks.find(name)
    if as_json:
        echo_json(task.to_document())
        return
    echo_task(ws, task)


@tasks.command("add")
@click.argument("name")
@click.option("--description", "-d", default="", help="Description in the current language.")
@click.option("--category", "-c", default="", help="Category in the current language.")
@click.option("--linux", default="", help="Linux commands, separated by ';'.")
@click.option("--windows", default="", help="Windows commands, separated by ';'.")
@click.option("--macos", default="", help="macOS commands, separated by ';'.")
@click.option(
    "--url",
    "urls",
    multiple=True,
    metavar="PLATFORM=URL",
    help="Download URL for a platform (repeatable).",
)
@click.pass_context
def add_task(
    ctx: click.Context,
    name: str,
    description: str,
    category: str,
    linux: str,
    windows: str,
    macos: str,
    urls: tuple[str, ...],
) -> None:
    """Create a task."""
    ws = get_workspace(ctx)
    with reporting_errors():
        task = build_task(
            name,
            description=localized_value(ws, description),
            category=localized_value(ws, category),
            commands={"linux": linux, "windows": windows, "macos": macos},
            urls=parse_urls(urls),
        )
        ws.tasks.create(task)
    click.secho(f"✅ {ws.t('created', 'tasks', name=task.name)}", fg="green")


def parse_urls(values: tuple[str, ...] | list[str]) -> dict[str, str]:
    """``("linux=https://…",)`` → ``{"linux": "https://…"}``."""
    urls: dict[str, str] = {}
    for value in values:
        platform, sep, url = value.partition("=")
        platform = platform.strip()
        if not sep or platform not in PLATFORMS or not url.strip():
            raise InvalidInput(f"Expected PLATFORM=URL with PLATFORM in {', '.join(PLATFORMS)}: '{value}'")
        urls[platform] = url.strip()
    return urls


def build_task(
    name: str,
    *,
    description: dict[str, str],
    category: dict[str, str],
    commands: dict[str, str],
    urls: dict[str, str] | None = None,
) -> Task:
    """Validate user input into a ``Task``.

    Raises:
        InvalidInput: Blank name or malformed values.
    """
    fields: dict = {"name": name}
    if description:
        fields["description"] = description
    if category:
        fields["category"] = category
    for platform in PLATFORMS:
        parsed = split_commands(commands.get(platform, ""))
        if parsed:
            fields[platform] = parsed
    if urls:
        fields["urls"] = urls
    try:
        return Task(**fields)
    except ValidationError as e:
        raise InvalidInput(f"Invalid task: {e.errors()[0]['msg']}") from e


def _update_text(ctx: click.Context, name: str, field: str, text: str, language: str | None) -> None:
    ws = get_workspace(ctx)
    lang = language or ws.language
    translator = translator_for(ws) if lang == ws.language else None
    with reporting_errors():
        ws.tasks.update_field(name, field, text, lang, translator)
    click.secho(f"✅ {ws.t('updated', 'tasks', name=name)}", fg="green")


@tasks.command("describe")
@click.argument("name")
@click.argument("text")
@click.option("--lang", "language", default=None, help="Language code (default: current).")
@click.pass_context
def describe_task(ctx: click.Context, name: str, text: str, language: str | None) -> None:
    """Set a task's description."""
    _update_text(ctx, name, "description", text, language)


@tasks.command("categorize")
@click.argument("name")
@click.argument("text")
@click.option("--lang", "language", default=None, help="Language code (default: current).")
@click.pass_context
def categorize_task(ctx: click.Context, name: str, text: str, language: str | None) -> None:
    """Set a task's category."""
    _update_text(ctx, name, "category", text, language)


@tasks.command("add-command")
@click.argument("name")
@click.argument("platform", type=click.Choice(PLATFORMS))
@click.argument("command")
@click.pass_context
def add_command(ctx: click.Context, name: str, platform: str, command: str) -> None:
    """Append a shell command to a task for one platform."""
    ws = get_workspace(ctx)
    with reporting_errors():
        ws.tasks.append_command(name, platform, command)
    click.secho(f"✅ {ws.t('updated', 'tasks', name=name)}", fg="green")


@tasks.command("delete")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete_task(ctx: click.Context, name: str, yes: bool) -> None:
    """Delete a task (no-op if absent)."""
    ws = get_workspace(ctx)
    if not yes and ws.settings.interactive:
        click.confirm(ws.t("confirm_delete", "tasks", name=name), abort=True)
    with reporting_errors():
        deleted = ws.tasks.delete(name)
    if deleted:
        click.secho(f"✅ {ws.t('deleted', 'tasks', name=name)}", fg="green")
    else:
        click.secho(f"ℹ️  {ws.t('not_present', 'tasks', name=name)}", fg="blue")


@tasks.command("run")
@click.argument("names", nargs=-1, required=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output reports as JSON.")
@click.pass_context
def run_tasks(ctx: click.Context, names: tuple[str, ...], as_json: bool) -> None:
    """Run tasks by name; unknown names go to the native package manager."""
    ws = get_workspace(ctx)
    if as_json:
        reports = ws.runner.run_many(names)
        echo_json([r.model_dump(mode="json") for r in reports])
    else:
        reports = run_and_report(ws, list(names))

    if not all(r.ok for r in reports):
        sys.exit(1)
