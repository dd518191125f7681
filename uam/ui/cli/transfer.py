"""
CLI commands for profile import / export.

Thin wrappers over ``uam.core.services.transfer``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from uam.core.services.transfer import DEFAULT_EXPORT_NAME
from uam.ui.cli.helpers import (
    echo_json,
    get_workspace,
    reporting_errors,
    run_profile_and_report,
)


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--run", "run_after", is_flag=True, help="Run the imported profile afterwards.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def import_cmd(ctx: click.Context, file: Path, run_after: bool, as_json: bool) -> None:
    """Import a profile document (minimal or complete format)."""
    from uam.core.services.transfer import import_profile

    ws = get_workspace(ctx)
    with reporting_errors():
        result = import_profile(file, ws.tasks, ws.profiles)

    if as_json:
        echo_json(result.to_dict())
    else:
        click.secho(
            f"✅ {ws.t('imported', 'transfer', name=result.profile, count=len(result.tasks))}",
            fg="green",
        )
        click.echo(f"   {ws.t('format', 'transfer')}: {result.format}")
        for name in result.added_tasks:
            click.echo(f"   ➕ {name}")

    if run_after:
        with reporting_errors():
            report = run_profile_and_report(ws, ws.profiles.find(result.profile))
        if not report.ok:
            sys.exit(1)


@click.command("export")
@click.argument("name", default=DEFAULT_EXPORT_NAME)
@click.option("--profile", "-p", "profile_names", multiple=True, help="Profile to include (repeatable).")
@click.option("--task", "-t", "task_names", multiple=True, help="Extra task to include (repeatable).")
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: data directory).",
)
@click.option("--save", is_flag=True, help="Also add the result as a profile.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def export_cmd(
    ctx: click.Context,
    name: str,
    profile_names: tuple[str, ...],
    task_names: tuple[str, ...],
    out_dir: Path | None,
    save: bool,
    as_json: bool,
) -> None:
    """Export profiles and tasks to NAME.json and NAME-full.json."""
    from uam.core.services.transfer import export_profile

    ws = get_workspace(ctx)
    with reporting_errors():
        result = export_profile(
            name,
            ws.tasks,
            ws.profiles,
            profile_names=profile_names,
            task_names=task_names,
            out_dir=out_dir or ws.settings.base_dir,
            save=save,
        )

    if as_json:
        echo_json(result.to_dict())
        return
    click.secho(f"✅ {ws.t('exported', 'transfer', name=result.profile, count=len(result.tasks))}", fg="green")
    click.echo(f"   📄 {result.minimal_path}")
    click.echo(f"   📄 {result.complete_path}")
    if result.saved:
        click.echo(f"   📋 {ws.t('saved', 'transfer', name=result.profile)}")
