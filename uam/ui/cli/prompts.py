"""
Interactive prompts — open text, yes/no, numbers and multi-choice.

The ``parse_*`` functions are pure and raise ``InvalidInput``; the
``ask_*`` wrappers prompt with click and re-prompt until the answer
parses. The translation helpers plug the user into the string store
and the task/profile stores.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from urllib.parse import quote

import click

from uam.core.errors import InvalidInput
from uam.core.i18n.strings import MissingHandler, MissingTranslation, StringStore
from uam.core.services.installer import RedownloadPrompt
from uam.core.services.shell import CommandRunner
from uam.core.stores.task_store import Translator

logger = logging.getLogger(__name__)

YES_WORDS = frozenset({"y", "yes", "o", "oui", "1"})
NO_WORDS = frozenset({"n", "no", "non", "2"})

_LIMIT = re.compile(r"^([+-]?)(\d+)$")


# ── Pure parsing ────────────────────────────────────────────────


def parse_yes_no(raw: str) -> bool:
    answer = raw.strip().lower()
    if answer in YES_WORDS:
        return True
    if answer in NO_WORDS:
        return False
    raise InvalidInput(f"Expected yes or no, got '{raw}'")


def parse_number(raw: str, minimum: int | None = None, maximum: int | None = None) -> int:
    try:
        number = int(raw.strip())
    except ValueError:
        raise InvalidInput(f"Not a number: '{raw}'") from None
    if minimum is not None and number < minimum:
        raise InvalidInput(f"Number too small (min {minimum})")
    if maximum is not None and number > maximum:
        raise InvalidInput(f"Number too large (max {maximum})")
    return number


def parse_selection(raw: str, count: int, limit: str | None = None) -> list[int] | None:
    """Parse ``"1 3 4"`` into zero-based indices; ``"0"`` cancels (None).

    ``limit`` is ``"+N"`` (at least N), ``"-N"`` (at most N) or ``"N"``
    (exactly N).
    """
    text = raw.replace(",", " ").strip()
    if text == "0":
        return None
    tokens = text.split()
    if not tokens:
        raise InvalidInput("Empty selection")

    indices: list[int] = []
    for token in tokens:
        if not token.isdigit() or not 1 <= int(token) <= count:
            raise InvalidInput(f"Invalid selection: '{token}'")
        index = int(token) - 1
        if index not in indices:
            indices.append(index)

    if limit:
        match = _LIMIT.match(limit)
        if match is None:
            raise ValueError(f"Bad selection limit: {limit}")
        sign, n = match.group(1), int(match.group(2))
        if sign == "+" and len(indices) < n:
            raise InvalidInput(f"Select at least {n} item(s)")
        if sign == "-" and len(indices) > n:
            raise InvalidInput(f"Select at most {n} item(s)")
        if not sign and len(indices) != n:
            raise InvalidInput(f"Select exactly {n} item(s)")
    return indices


def parse_names(raw: str, options: Sequence[str]) -> list[str] | None:
    """Mixed selection: numbers pick from ``options``, other words are names.

    ``"1 htop 3"`` → ``[options[0], "htop", options[2]]``; ``"0"`` cancels.
    """
    text = raw.replace(",", " ").strip()
    if text == "0":
        return None
    tokens = text.split()
    if not tokens:
        raise InvalidInput("Empty selection")

    names: list[str] = []
    for token in tokens:
        if token.isdigit():
            if not 1 <= int(token) <= len(options):
                raise InvalidInput(f"Invalid selection: '{token}'")
            token = options[int(token) - 1]
        if token not in names:
            names.append(token)
    return names


def split_commands(raw: str) -> list[str]:
    """``"a; b;"`` → ``["a", "b"]``."""
    return [part.strip() for part in raw.split(";") if part.strip()]


def translate_url(text: str, target: str, source: str = "auto") -> str:
    return f"https://translate.google.com/?sl={source}&tl={target}&text={quote(text)}"


# ── Click wrappers ──────────────────────────────────────────────


def ask_text(prompt: str, default: str = "") -> str:
    return click.prompt(prompt, default=default, show_default=bool(default)).strip()


def ask_yes_no(prompt: str, default: bool = False, invalid: str = "Invalid choice, try again.") -> bool:
    while True:
        raw = click.prompt(f"{prompt} (y/n)", default="y" if default else "n", show_default=False)
        try:
            return parse_yes_no(raw)
        except InvalidInput:
            click.secho(f"❌ {invalid}", fg="red")


def ask_number(
    prompt: str,
    minimum: int | None = None,
    maximum: int | None = None,
    invalid: str = "Invalid choice, try again.",
) -> int:
    label = prompt
    if minimum is not None and maximum is not None:
        label += f" ({minimum}-{maximum})"
    while True:
        raw = click.prompt(label, default="", show_default=False)
        try:
            return parse_number(raw, minimum, maximum)
        except InvalidInput as e:
            click.secho(f"❌ {invalid} {e}", fg="red")


def ask_selection(
    prompt: str,
    options: Sequence[str],
    limit: str | None = None,
    invalid: str = "Invalid choice, try again.",
) -> list[int] | None:
    """Numbered multi-choice; returns zero-based indices or None (cancel)."""
    for i, option in enumerate(options, start=1):
        click.echo(f"{i:>3}) {option}")
    click.echo("  0) ←")
    while True:
        raw = click.prompt(prompt, default="", show_default=False)
        try:
            return parse_selection(raw, len(options), limit)
        except InvalidInput as e:
            click.secho(f"❌ {invalid} {e}", fg="red")


def ask_names(prompt: str, options: Sequence[str], invalid: str = "Invalid choice, try again.") -> list[str] | None:
    while True:
        raw = click.prompt(prompt, default="", show_default=False)
        try:
            return parse_names(raw, options)
        except InvalidInput as e:
            click.secho(f"❌ {invalid} {e}", fg="red")


# ── Store collaborators ─────────────────────────────────────────


def _text(strings: StringStore, key: str, default: str, **values: object) -> str:
    """Lookup without triggering the missing-translation handler."""
    template = strings.lookup(key, "prompts") or strings.lookup(key, "prompts", "en") or default
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError):
        return template


def _offer_google_translate(strings: StringStore, text: str, target: str) -> None:
    question = _text(strings, "offer_translate", "Open Google Translate for {language}?", language=target)
    if click.confirm(f"🌍 {question}", default=False):
        url = translate_url(text, target)
        if click.launch(url) != 0:
            click.echo(url)


def missing_translation_handler(strings: StringStore) -> MissingHandler:
    """Ask the user for a missing UI string in the current language."""

    def handler(event: MissingTranslation) -> str | None:
        _offer_google_translate(strings, event.fallback, event.language)
        question = _text(
            strings,
            "provide_translation",
            'Translation of "{text}" in {language}',
            text=event.fallback,
            language=event.language,
        )
        answer = click.prompt(f"✏️  {question}", default="", show_default=False)
        return answer.strip() or None

    return handler


def interactive_translator(strings: StringStore) -> Translator:
    """Ask the user to translate a field value; confirm before returning."""

    def translator(text: str, target: str) -> str | None:
        _offer_google_translate(strings, text, target)
        question = _text(strings, "provide_translation", 'Translation of "{text}" in {language}', text=text, language=target)
        answer = click.prompt(f"✏️  {question}", default="", show_default=False).strip()
        if not answer:
            return None
        confirm = _text(strings, "confirm_translation", 'Keep "{text}"?', text=answer)
        if not click.confirm(f"✅ {confirm}", default=True):
            return None
        return answer

    return translator


def redownload_prompt(strings: StringStore) -> RedownloadPrompt:
    def ask(filename: str) -> bool:
        question = _text(strings, "redownload", "{file} is already cached. Download it again?", file=filename)
        return click.confirm(f"📦 {question}", default=False)

    return ask


def echoing(run_command: CommandRunner) -> CommandRunner:
    """Print each command before it runs."""

    def run(command: str) -> int:
        click.secho(f"➡️  {command}", fg="cyan", err=True)
        return run_command(command)

    return run
