"""
CLI commands for the host system and tool updates.
"""

from __future__ import annotations

import sys

import click

from uam import __version__
from uam.ui.cli.helpers import echo_json, get_workspace, reporting_errors, title


@click.group()
def update() -> None:
    """Update — check for a new release, refresh documents."""


@update.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update_check(ctx: click.Context, as_json: bool) -> None:
    """Compare the published version with this one."""
    from uam.core.services.updates import check_update

    ws = get_workspace(ctx)
    result = check_update(ws.settings.source_url, __version__)
    if as_json:
        echo_json(result)
    elif not result["ok"]:
        click.secho(f"❌ {result['error']}", fg="red")
    elif result["update_available"]:
        click.secho(
            f"⚠️  {ws.t('available', 'update', latest=result['latest'], current=result['current'])}",
            fg="yellow",
        )
    else:
        click.secho(f"✅ {ws.t('up_to_date', 'update', current=result['current'])}", fg="green")

    if not result["ok"]:
        sys.exit(1)


@update.command("documents")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def update_documents(ctx: click.Context, yes: bool) -> None:
    """Re-download the language, task and profile documents."""
    from uam.core.services.updates import refresh_documents

    ws = get_workspace(ctx)
    if not yes and ws.settings.interactive:
        click.confirm(ws.t("confirm_refresh", "update"), abort=True)

    result = refresh_documents(ws.settings.source_url, ws.settings.document_paths())
    if result.get("error"):
        click.secho(f"❌ {result['error']}", fg="red")
        sys.exit(1)

    for filename, status in result["files"].items():
        icon = "✅" if status == "downloaded" else "❌"
        click.echo(f"   {icon} {filename}: {status}")
    with reporting_errors():
        ws.reload()
    if not result["ok"]:
        sys.exit(1)


@click.group()
def system() -> None:
    """System — platform info, connectivity, package updates."""


@system.command("info")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def system_info(ctx: click.Context, as_json: bool) -> None:
    """Show the detected platform and package manager."""
    ws = get_workspace(ctx)
    info = ws.platform.to_dict()
    if as_json:
        echo_json(info)
        return

    t = ws.t
    title(f"🖥️  {t('title', 'system')}")
    click.echo(f"   {t('family', 'system')}: {info['family']}")
    click.echo(f"   {t('os', 'system')}: {info['system'] or '-'}")
    click.echo(f"   {t('distro', 'system')}: {info['distro'] or '-'}")
    click.echo(f"   {t('package_manager', 'system')}: {info['package_manager'] or '-'}")
    click.echo(f"   {t('language', 'system')}: {ws.language}")
    click.echo(f"   {t('data_dir', 'system')}: {ws.settings.base_dir}")


@system.command("internet")
@click.pass_context
def system_internet(ctx: click.Context) -> None:
    """Check internet connectivity."""
    from uam.core.errors import NetworkUnavailable
    from uam.core.services.download import check_internet

    ws = get_workspace(ctx)
    try:
        check_internet()
    except NetworkUnavailable as e:
        click.secho(f"❌ {ws.t('offline', 'system')}: {e}", fg="red")
        sys.exit(1)
    click.secho(f"✅ {ws.t('online', 'system')}", fg="green")


@system.command("update")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def system_update(ctx: click.Context, yes: bool) -> None:
    """Update installed packages with the native package manager."""
    from uam.core.services.updates import update_system

    ws = get_workspace(ctx)
    if not yes and ws.settings.interactive:
        click.confirm(ws.t("confirm_update", "system"), abort=True)

    result = update_system(ws.platform, ws.runner.run_command)
    if not result["ok"]:
        click.secho(f"❌ {result['error']}", fg="red")
        sys.exit(1)
    for entry in result["commands"]:
        if entry["return_code"] != 0:
            click.secho(f"   ⚠️  exit {entry['return_code']}: {entry['command']}", fg="yellow")
    click.secho(f"✅ {ws.t('updated', 'system', manager=result['manager'])}", fg="green")
