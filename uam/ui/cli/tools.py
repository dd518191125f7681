"""
CLI commands for one-off downloads and installs from a link.

Both go through the same services the Task Runner uses for task URLs;
``install`` honours the workspace cache directory and cache mode.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from uam.ui.cli.helpers import fail, get_workspace, reporting_errors


@click.group()
def tools() -> None:
    """Tools — download a file, install from a link."""


@tools.command("download")
@click.argument("url")
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Save into this directory instead of printing the body.",
)
@click.pass_context
def tools_download(ctx: click.Context, url: str, out_dir: Path | None) -> None:
    """Download URL to stdout, or into --out DIR."""
    from uam.core.services import download as download_mod
    from uam.core.services.installer import filename_from_url

    ws = get_workspace(ctx)
    with reporting_errors():
        if out_dir is None:
            click.echo(download_mod.download(url), nl=False)
            return
        dest = out_dir / filename_from_url(url)
        try:
            download_mod.download(url, dest)
        except OSError as e:
            fail(f"Cannot save {dest}: {e}")

    click.secho(f"✅ {ws.t('saved', 'tools', path=dest)}", fg="green", err=True)


@tools.command("install")
@click.argument("url")
@click.option("--force", "cache_mode", flag_value="force", help="Download again even if cached.")
@click.option("--cache-only", "cache_mode", flag_value="cache", help="Reuse a cached copy without asking.")
@click.pass_context
def tools_install(ctx: click.Context, url: str, cache_mode: str | None) -> None:
    """Download URL into the cache and install it for this platform."""
    from uam.core.services.installer import filename_from_url

    ws = get_workspace(ctx)
    overrides = {"cache_mode": cache_mode} if cache_mode else {}
    with reporting_errors():
        name = filename_from_url(url)
        outcomes = ws.runner.installer(url, **overrides)

    if not outcomes:
        click.secho(
            f"ℹ️  {ws.t('nothing_to_run', 'tools', name=name, platform=ws.platform.family)}",
            fg="blue",
        )
        return

    failed = [o for o in outcomes if o.return_code != 0]
    for outcome in failed:
        click.secho(f"   ⚠️  exit {outcome.return_code}: {outcome.command}", fg="yellow")
    if failed:
        sys.exit(1)
    click.secho(f"✅ {ws.t('installed', 'tools', name=name)}", fg="green")
