"""
Interactive text menu — the default when ``uam`` runs without a command.

Every screen is a numbered list answered with ``ask_number``; ``0``
goes back. A ``UamError`` raised by an action is reported and the user
returns to the screen that launched it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import click

from uam import __version__
from uam.core.errors import InvalidInput, UamError
from uam.core.use_cases.bootstrap import Workspace
from uam.ui.cli import prompts
from uam.ui.cli.helpers import (
    echo_profile,
    echo_profile_line,
    echo_task,
    echo_task_line,
    get_workspace,
    localized_value,
    run_and_report,
    run_profile_and_report,
    title,
    translator_for,
)

logger = logging.getLogger(__name__)

Action = Callable[[], None]


class MenuShell:
    """Menu screens bound to one workspace."""

    def __init__(self, workspace: Workspace) -> None:
        self.ws = workspace

    # ── Plumbing ────────────────────────────────────────────────

    def t(self, key: str, namespace: str = "menu", **values: object) -> str:
        return self.ws.t(key, namespace, **values)

    @property
    def invalid(self) -> str:
        return self.t("invalid_choice")

    def choose(self, heading: str, entries: list[tuple[str, Action]], back: str | None = None) -> bool:
        """Show one screen; returns False when the user picked ``0``."""
        title(heading)
        for i, (label, _) in enumerate(entries, start=1):
            click.echo(f"{i:>3}) {label}")
        click.echo(f"  0) {back or self.t('back')}")

        choice = prompts.ask_number(self.t("choose"), 0, len(entries), invalid=self.invalid)
        if choice == 0:
            return False

        _, action = entries[choice - 1]
        try:
            action()
        except UamError as e:
            click.secho(f"❌ {e}", fg="red")
        return True

    def loop(self, screen: Callable[[], bool]) -> None:
        while screen():
            pass

    def confirm(self, question: str, default: bool = False) -> bool:
        return prompts.ask_yes_no(question, default, invalid=self.invalid)

    # ── Main ────────────────────────────────────────────────────

    def run(self) -> None:
        click.secho(f"\n🛠️  {self.t('welcome', version=__version__)}", fg="cyan", bold=True)
        self.loop(self.main_screen)
        click.secho(f"👋 {self.t('goodbye')}", fg="cyan")

    def main_screen(self) -> bool:
        return self.choose(
            f"🏠 {self.t('main_title')}",
            [
                (f"📦 {self.t('tasks')}", lambda: self.loop(self.tasks_screen)),
                (f"📋 {self.t('profiles')}", lambda: self.loop(self.profiles_screen)),
                (f"🔄 {self.t('transfer')}", lambda: self.loop(self.transfer_screen)),
                (f"🖥️  {self.t('system')}", lambda: self.loop(self.system_screen)),
                (f"🧰 {self.t('tools')}", lambda: self.loop(self.tools_screen)),
                (f"ℹ️  {self.t('about')}", self.about),
            ],
            back=self.t("exit"),
        )

    # ── Tasks ───────────────────────────────────────────────────

    def tasks_screen(self) -> bool:
        return self.choose(
            f"📦 {self.t('tasks')}",
            [
                (self.t("run_tasks"), self.run_tasks),
                (self.t("show_task"), self.show_task),
                (self.t("add_task"), self.add_task),
                (self.t("edit_task"), self.edit_task),
                (self.t("delete_task"), self.delete_task),
            ],
        )

    def list_tasks(self) -> list[str]:
        names = self.ws.tasks.names()
        for i, task in enumerate(self.ws.tasks.tasks, start=1):
            echo_task_line(self.ws, task, i)
        click.echo("  0) ←")
        return names

    def pick_task(self) -> str | None:
        names = self.list_tasks()
        if not names:
            raise InvalidInput(self.t("none", "tasks"))
        picked = prompts.ask_names(self.t("pick_one"), names, invalid=self.invalid)
        if not picked:
            return None
        if len(picked) > 1:
            raise InvalidInput(self.t("one_only"))
        return self.ws.tasks.find(picked[0]).name

    def run_tasks(self) -> None:
        names = self.list_tasks()
        picked = prompts.ask_names(self.t("pick_many"), names, invalid=self.invalid)
        if picked:
            run_and_report(self.ws, picked)

    def show_task(self) -> None:
        name = self.pick_task()
        if name:
            echo_task(self.ws, self.ws.tasks.find(name))

    def add_task(self) -> None:
        from uam.ui.cli.tasks import build_task

        name = prompts.ask_text(self.t("task_name"))
        if not name:
            return
        description = prompts.ask_text(self.t("description", "tasks"))
        category = prompts.ask_text(self.t("category", "tasks"))
        commands = {
            platform: prompts.ask_text(self.t("commands_for", platform=platform))
            for platform in ("linux", "windows", "macos")
        }
        task = build_task(
            name,
            description=localized_value(self.ws, description),
            category=localized_value(self.ws, category),
            commands=commands,
        )
        self.ws.tasks.create(task)
        click.secho(f"✅ {self.ws.t('created', 'tasks', name=task.name)}", fg="green")

    def edit_task(self) -> None:
        name = self.pick_task()
        if not name:
            return
        translator = translator_for(self.ws)
        lang = self.ws.language

        def set_text(field: str) -> None:
            value = prompts.ask_text(self.t(field, "tasks"))
            if value:
                self.ws.tasks.update_field(name, field, value, lang, translator)
                click.secho(f"✅ {self.ws.t('updated', 'tasks', name=name)}", fg="green")

        def add_command() -> None:
            options = ["linux", "windows", "macos"]
            picked = prompts.ask_selection(self.t("platform"), options, limit="1", invalid=self.invalid)
            if not picked:
                return
            command = prompts.ask_text(self.t("command"))
            self.ws.tasks.append_command(name, options[picked[0]], command)
            click.secho(f"✅ {self.ws.t('updated', 'tasks', name=name)}", fg="green")

        self.loop(lambda: self.choose(
            f"✏️  {name}",
            [
                (self.t("description", "tasks"), lambda: set_text("description")),
                (self.t("category", "tasks"), lambda: set_text("category")),
                (self.t("add_command"), add_command),
            ],
        ))

    def delete_task(self) -> None:
        name = self.pick_task()
        if name and self.confirm(self.ws.t("confirm_delete", "tasks", name=name)):
            self.ws.tasks.delete(name)
            click.secho(f"✅ {self.ws.t('deleted', 'tasks', name=name)}", fg="green")

    # ── Profiles ────────────────────────────────────────────────

    def profiles_screen(self) -> bool:
        return self.choose(
            f"📋 {self.t('profiles')}",
            [
                (self.t("run_profiles"), self.run_profiles),
                (self.t("show_profile"), self.show_profile),
                (self.t("add_profile"), self.add_profile),
                (self.t("edit_profile"), self.edit_profile),
                (self.t("delete_profile"), self.delete_profile),
            ],
        )

    def pick_profiles(self, limit: str | None = None) -> list[str]:
        items = self.ws.profiles.profiles
        if not items:
            raise InvalidInput(self.t("none", "profiles"))
        for i, profile in enumerate(items, start=1):
            echo_profile_line(self.ws, profile, i)
        click.echo("  0) ←")
        while True:
            raw = click.prompt(self.t("pick_many"), default="", show_default=False)
            try:
                picked = prompts.parse_selection(raw, len(items), limit)
            except InvalidInput as e:
                click.secho(f"❌ {self.invalid} {e}", fg="red")
                continue
            return [items[i].name for i in picked or []]

    def run_profiles(self) -> None:
        for name in self.pick_profiles():
            run_profile_and_report(self.ws, self.ws.profiles.find(name))

    def show_profile(self) -> None:
        for name in self.pick_profiles("1"):
            echo_profile(self.ws, self.ws.profiles.find(name))

    def pick_task_names(self) -> list[str]:
        names = self.ws.tasks.names()
        if not names:
            return []
        picked = prompts.ask_selection(self.t("pick_many"), names, limit="+1", invalid=self.invalid)
        return [names[i] for i in picked or []]

    def add_profile(self) -> None:
        from uam.core.models.profile import Profile

        name = prompts.ask_text(self.t("profile_name"))
        if not name:
            return
        if self.ws.profiles.exists(name):
            raise InvalidInput(self.ws.t("exists", "profiles", name=name))
        description = localized_value(self.ws, prompts.ask_text(self.t("description", "tasks")))
        tasks = self.pick_task_names()
        profile = Profile(name=name, description=description, tasks=sorted(set(tasks)))
        self.ws.profiles.create(profile)
        click.secho(f"✅ {self.ws.t('created', 'profiles', name=profile.name)}", fg="green")

    def edit_profile(self) -> None:
        picked = self.pick_profiles("1")
        if not picked:
            return
        name = picked[0]

        def set_description() -> None:
            value = prompts.ask_text(self.t("description", "tasks"))
            if value:
                self.ws.profiles.update_description(name, value, self.ws.language, translator_for(self.ws))
                click.secho(f"✅ {self.ws.t('updated', 'profiles', name=name)}", fg="green")

        def add_tasks() -> None:
            for task_name in self.pick_task_names():
                self.ws.profiles.add_task_ref(name, task_name)
            click.secho(f"✅ {self.ws.t('updated', 'profiles', name=name)}", fg="green")

        self.loop(lambda: self.choose(
            f"✏️  {name}",
            [
                (self.t("description", "tasks"), set_description),
                (self.t("add_tasks"), add_tasks),
            ],
        ))

    def delete_profile(self) -> None:
        for name in self.pick_profiles("1"):
            if self.confirm(self.ws.t("confirm_delete", "profiles", name=name)):
                self.ws.profiles.delete(name)
                click.secho(f"✅ {self.ws.t('deleted', 'profiles', name=name)}", fg="green")

    # ── Import / export ─────────────────────────────────────────

    def transfer_screen(self) -> bool:
        return self.choose(
            f"🔄 {self.t('transfer')}",
            [
                (self.t("import"), self.import_profile),
                (self.t("export"), self.export_profile),
            ],
        )

    def import_profile(self) -> None:
        from uam.core.services.transfer import import_profile, list_import_candidates

        settings = self.ws.settings
        candidates = list_import_candidates(settings.base_dir, exclude=settings.document_paths())
        if not candidates:
            raise InvalidInput(self.ws.t("no_candidates", "transfer", directory=settings.base_dir))

        picked = prompts.ask_selection(
            self.t("pick_one"), [p.name for p in candidates], limit="1", invalid=self.invalid
        )
        if not picked:
            return
        result = import_profile(candidates[picked[0]], self.ws.tasks, self.ws.profiles)
        click.secho(
            f"✅ {self.ws.t('imported', 'transfer', name=result.profile, count=len(result.tasks))}",
            fg="green",
        )
        if self.confirm(self.ws.t("run_now", "transfer")):
            run_profile_and_report(self.ws, self.ws.profiles.find(result.profile))

    def export_profile(self) -> None:
        from uam.core.services.transfer import DEFAULT_EXPORT_NAME, export_profile

        profile_names = self.pick_profiles() if self.ws.profiles.names() else []
        task_names = self.pick_task_names() if self.confirm(self.t("extra_tasks")) else []
        name = prompts.ask_text(self.t("export_name"), default=DEFAULT_EXPORT_NAME)
        save = self.confirm(self.ws.t("save_profile", "transfer"))
        result = export_profile(
            name,
            self.ws.tasks,
            self.ws.profiles,
            profile_names=profile_names,
            task_names=task_names,
            out_dir=self.ws.settings.base_dir,
            save=save,
        )
        click.secho(
            f"✅ {self.ws.t('exported', 'transfer', name=result.profile, count=len(result.tasks))}",
            fg="green",
        )
        click.echo(f"   📄 {result.minimal_path}")
        click.echo(f"   📄 {result.complete_path}")

    # ── System ──────────────────────────────────────────────────

    def invoke(self, command: click.Command, **kwargs: object) -> None:
        """Run a one-shot command in place; its exit does not end the menu."""
        ctx = click.get_current_context()
        try:
            ctx.invoke(command, **kwargs)
        except click.Abort:
            click.echo()
        except SystemExit as e:
            logger.debug("%s exited with %s", command.name, e.code)

    def system_screen(self) -> bool:
        from uam.ui.cli import system

        return self.choose(
            f"🖥️  {self.t('system')}",
            [
                (self.t("update_system"), lambda: self.invoke(system.system_update, yes=False)),
                (self.t("refresh_documents"), lambda: self.invoke(system.update_documents, yes=False)),
                (self.t("check_update"), lambda: self.invoke(system.update_check, as_json=False)),
                (self.t("check_internet"), lambda: self.invoke(system.system_internet)),
                (self.t("platform_info"), lambda: self.invoke(system.system_info, as_json=False)),
            ],
        )

    # ── Tools ───────────────────────────────────────────────────

    def tools_screen(self) -> bool:
        return self.choose(
            f"🧰 {self.t('tools')}",
            [
                (self.t("download"), self.download),
                (self.t("install_from_link"), self.install_from_link),
            ],
        )

    def download(self) -> None:
        from uam.ui.cli import tools

        url = prompts.ask_text(self.t("url"))
        if not url:
            return
        out_dir = prompts.ask_text(self.ws.t("out_dir", "tools"))
        self.invoke(tools.tools_download, url=url, out_dir=Path(out_dir) if out_dir else None)

    def install_from_link(self) -> None:
        from uam.core.services.installer import CACHE_MODES
        from uam.ui.cli import tools

        url = prompts.ask_text(self.t("url"))
        if not url:
            return
        picked = prompts.ask_selection(
            self.ws.t("cache_mode", "tools"), list(CACHE_MODES), limit="1", invalid=self.invalid
        )
        if picked:
            self.invoke(tools.tools_install, url=url, cache_mode=CACHE_MODES[picked[0]])

    def about(self) -> None:
        title(f"ℹ️  {self.t('about')}")
        click.echo(f"   Universal Automation Manager {__version__}")
        click.echo(f"   {self.ws.t('family', 'system')}: {self.ws.platform.family}")
        click.echo(f"   {self.ws.t('language', 'system')}: {self.ws.language}")
        click.echo(f"   {self.t('about_text')}")


@click.command()
@click.pass_context
def menu(ctx: click.Context) -> None:
    """Interactive menu."""
    MenuShell(get_workspace(ctx)).run()
