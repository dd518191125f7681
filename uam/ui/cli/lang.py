"""
CLI commands for the language document.
"""

from __future__ import annotations

import click

from uam.ui.cli.helpers import get_workspace, reporting_errors


@click.group()
def lang() -> None:
    """Lang — read and write UI strings."""


@lang.command("get")
@click.argument("key")
@click.option("--namespace", "-n", default=None, help="Namespace of the key.")
@click.option("--lang", "language", default=None, help="Language code (default: current).")
@click.pass_context
def get_string(ctx: click.Context, key: str, namespace: str | None, language: str | None) -> None:
    """Print the text for KEY (with fallbacks)."""
    ws = get_workspace(ctx)
    if language and language != ws.language:
        text = ws.strings.lookup(key, namespace, language) or ws.strings.fallback(key, namespace)
    else:
        text = ws.t(key, namespace)
    click.echo(text)


@lang.command("set")
@click.argument("key")
@click.argument("text")
@click.option("--namespace", "-n", default=None, help="Namespace of the key.")
@click.option("--lang", "language", default=None, help="Language code (default: current).")
@click.pass_context
def set_string(
    ctx: click.Context,
    key: str,
    text: str,
    namespace: str | None,
    language: str | None,
) -> None:
    """Store TEXT for KEY in the language document."""
    ws = get_workspace(ctx)
    with reporting_errors():
        ws.strings.set_translation(key, text, namespace=namespace, language=language)
    fq_key = f"{namespace}.{key}" if namespace else key
    click.secho(f"✅ {fq_key}.{language or ws.language}", fg="green")
