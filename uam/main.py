"""
Universal Automation Manager — CLI entrypoint.

Usage:
    uam                      # interactive menu
    uam tasks list
    uam tasks run git vim
    uam profiles run dev
    uam tools install https://example.com/tool.deb
    python -m uam.main --help
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from uam import __version__
from uam.core.models.task import PLATFORMS
from uam.core.observability.logging_config import resolve_level, setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="uam")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to uam.yml (default: auto-detect).",
)
@click.option("--lang", "language", default=None, help="Interface language (e.g. en, fr).")
@click.option(
    "--platform",
    type=click.Choice(PLATFORMS),
    default=None,
    help="Act as if running on this platform.",
)
@click.option("--no-input", is_flag=True, help="Never prompt (missing translations, confirmations).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    language: str | None,
    platform: str | None,
    no_input: bool,
) -> None:
    """Universal Automation Manager — install and configure software from task lists."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["language"] = language
    ctx.obj["platform"] = platform
    ctx.obj["no_input"] = no_input

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet, env=os.environ),
        log_file=os.environ.get("UAM_LOG_FILE"),
        log_file_level=os.environ.get("UAM_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(menu)


# ── Register command groups ─────────────────────────────────────

from uam.ui.cli.lang import lang  # noqa: E402
from uam.ui.cli.menu import menu  # noqa: E402
from uam.ui.cli.profiles import profiles  # noqa: E402
from uam.ui.cli.system import system, update  # noqa: E402
from uam.ui.cli.tasks import tasks  # noqa: E402
from uam.ui.cli.tools import tools  # noqa: E402
from uam.ui.cli.transfer import export_cmd, import_cmd  # noqa: E402

cli.add_command(menu)
cli.add_command(tasks)
cli.add_command(profiles)
cli.add_command(import_cmd)
cli.add_command(export_cmd)
cli.add_command(update)
cli.add_command(system)
cli.add_command(tools)
cli.add_command(lang)


if __name__ == "__main__":
    cli()
