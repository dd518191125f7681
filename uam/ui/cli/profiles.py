"""
CLI commands for the Profile Store.
"""

from __future__ import annotations

import sys

import click
from pydantic import ValidationError

from uam.core.errors import InvalidInput
from uam.core.models.profile import Profile
from uam.core.stores.profile_store import unique_sorted
from uam.ui.cli.helpers import (
    echo_json,
    echo_profile,
    echo_profile_line,
    get_workspace,
    localized_value,
    reporting_errors,
    run_profile_and_report,
    title,
    translator_for,
)


@click.group()
def profiles() -> None:
    """Profiles — named lists of tasks run together."""


@profiles.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_profiles(ctx: click.Context, as_json: bool) -> None:
    """List every profile."""
    ws = get_workspace(ctx)
    items = ws.profiles.profiles
    if as_json:
        echo_json([p.to_document() for p in items])
        return
    if not items:
        click.secho(f"⚠️  {ws.t('none', 'profiles')}", fg="yellow")
        return
    title(f"📋 {ws.t('title', 'profiles')} ({len(items)})")
    for profile in items:
        echo_profile_line(ws, profile)


@profiles.command("show")
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show_profile(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show a profile and its task references."""
    ws = get_workspace(ctx)
    with reporting_errors():
        profile = ws.profiles.find(name)
    if as_json:
        echo_json(profile.to_document())
        return
    echo_profile(ws, profile)


@profiles.command("add")
@click.argument("name")
@click.option("--description", "-d", default="", help="Description in the current language.")
@click.option("--task", "-t", "task_names", multiple=True, help="Task name (repeatable).")
@click.pass_context
def add_profile(ctx: click.Context, name: str, description: str, task_names: tuple[str, ...]) -> None:
    """Create a profile."""
    ws = get_workspace(ctx)
    with reporting_errors():
        fields: dict = {"name": name, "tasks": unique_sorted(task_names)}
        text = localized_value(ws, description)
        if text:
            fields["description"] = text
        try:
            profile = Profile(**fields)
        except ValidationError as e:
            raise InvalidInput(f"Invalid profile: {e.errors()[0]['msg']}") from e
        ws.profiles.create(profile)

    unknown = [n for n in profile.tasks if not ws.tasks.exists(n)]
    if unknown:
        click.secho(f"⚠️  {ws.t('unknown_tasks', 'profiles', names=', '.join(unknown))}", fg="yellow")
    click.secho(f"✅ {ws.t('created', 'profiles', name=profile.name)}", fg="green")


@profiles.command("describe")
@click.argument("name")
@click.argument("text")
@click.option("--lang", "language", default=None, help="Language code (default: current).")
@click.pass_context
def describe_profile(ctx: click.Context, name: str, text: str, language: str | None) -> None:
    """Set a profile's description."""
    ws = get_workspace(ctx)
    lang = language or ws.language
    translator = translator_for(ws) if lang == ws.language else None
    with reporting_errors():
        ws.profiles.update_description(name, text, lang, translator)
    click.secho(f"✅ {ws.t('updated', 'profiles', name=name)}", fg="green")


@profiles.command("add-task")
@click.argument("name")
@click.argument("task_names", nargs=-1, required=True)
@click.pass_context
def add_task_ref(ctx: click.Context, name: str, task_names: tuple[str, ...]) -> None:
    """Reference one or more tasks from a profile."""
    ws = get_workspace(ctx)
    with reporting_errors():
        for task_name in task_names:
            ws.profiles.add_task_ref(name, task_name)
    click.secho(f"✅ {ws.t('updated', 'profiles', name=name)}", fg="green")


@profiles.command("delete")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete_profile(ctx: click.Context, name: str, yes: bool) -> None:
    """Delete a profile (no-op if absent)."""
    ws = get_workspace(ctx)
    if not yes and ws.settings.interactive:
        click.confirm(ws.t("confirm_delete", "profiles", name=name), abort=True)
    with reporting_errors():
        deleted = ws.profiles.delete(name)
    if deleted:
        click.secho(f"✅ {ws.t('deleted', 'profiles', name=name)}", fg="green")
    else:
        click.secho(f"ℹ️  {ws.t('not_present', 'profiles', name=name)}", fg="blue")


@profiles.command("run")
@click.argument("names", nargs=-1, required=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output reports as JSON.")
@click.pass_context
def run_profiles(ctx: click.Context, names: tuple[str, ...], as_json: bool) -> None:
    """Run every task of each profile, in order."""
    ws = get_workspace(ctx)
    with reporting_errors():
        selected = [ws.profiles.find(n) for n in names]

    if as_json:
        reports = [ws.runner.run_profile(p) for p in selected]
        echo_json([r.model_dump(mode="json") for r in reports])
    else:
        reports = [run_profile_and_report(ws, p) for p in selected]

    if not all(r.ok for r in reports):
        sys.exit(1)
