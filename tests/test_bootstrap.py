"""
Tests for workspace bootstrap, the shell runner and logging setup.
"""

import logging
from pathlib import Path

from uam.core.config.loader import Settings
from uam.core.observability.logging_config import resolve_level, setup_logging
from uam.core.services import shell as shell_mod
from uam.core.services.shell import SHELL_UNAVAILABLE, run_shell
from uam.core.use_cases.bootstrap import ensure_documents, open_workspace


class TestOpenWorkspace:
    def test_wires_everything(self, settings: Settings, shell):
        ws = open_workspace(settings, run_command=shell)
        assert ws.platform.family == "linux"
        assert ws.platform.package_manager == "apt"
        assert ws.tasks.names() == ["vim", "git", "curl"]
        assert ws.profiles.names() == ["dev", "empty"]
        assert ws.documents == {"lang.json": "present", "tasks.json": "present", "profiles.json": "present"}

        report = ws.runner.run("vim")
        assert report.ok
        assert shell.commands == ["sudo apt install -y vim"]

    def test_seeds_empty_data_dir(self, tmp_path: Path, shell):
        settings = Settings(data_dir=tmp_path, source_url="", platform="linux", package_manager="apt")
        ws = open_workspace(settings, run_command=shell)
        assert ws.documents == {"lang.json": "seeded", "tasks.json": "seeded", "profiles.json": "seeded"}
        assert "git" in ws.tasks.names()
        assert ws.t("back", "menu") == "Back"

    def test_handler_only_when_interactive(self, settings: Settings):
        def handler(event):
            return "x"

        assert open_workspace(settings, on_missing=handler).strings.on_missing is None
        interactive = settings.model_copy(update={"interactive": True})
        assert open_workspace(interactive, on_missing=handler).strings.on_missing is handler

    def test_language(self, settings: Settings):
        ws = open_workspace(settings.model_copy(update={"language": "fr"}))
        assert ws.language == "fr"
        assert ws.t("back", "menu") == "Retour"
        assert ws.t("choose", "menu") == "Your choice"

    def test_reload(self, settings: Settings):
        ws = open_workspace(settings)
        other = open_workspace(settings)
        other.tasks.delete("vim")
        assert ws.tasks.exists("vim")
        ws.reload()
        assert not ws.tasks.exists("vim")

    def test_ensure_documents(self, settings: Settings):
        assert set(ensure_documents(settings).values()) == {"present"}


class TestRunShell:
    def test_exit_code(self, monkeypatch):
        calls = []

        class Result:
            returncode = 3

        def fake_run(command, shell):
            calls.append((command, shell))
            return Result()

        monkeypatch.setattr(shell_mod.subprocess, "run", fake_run)
        assert run_shell("false") == 3
        assert calls == [("false", True)]

    def test_shell_unavailable(self, monkeypatch):
        def fake_run(*args, **kwargs):
            raise OSError("no shell")

        monkeypatch.setattr(shell_mod.subprocess, "run", fake_run)
        assert run_shell("anything") == SHELL_UNAVAILABLE


class TestLogging:
    def test_resolve_level(self):
        assert resolve_level(debug=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"
        assert resolve_level(env={"UAM_LOG_LEVEL": "INFO"}) == "INFO"
        assert resolve_level() == "WARNING"

    def test_setup_logging_file(self, tmp_path: Path):
        log_file = tmp_path / "uam.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        try:
            root = logging.getLogger()
            assert root.level == logging.DEBUG
            logging.getLogger("uam.test").debug("to file only")
            for handler in root.handlers:
                handler.flush()
            assert "to file only" in log_file.read_text()
        finally:
            for handler in logging.getLogger().handlers:
                handler.close()
            logging.getLogger().handlers.clear()

    def test_unknown_level_means_warning(self):
        setup_logging("chatty")
        try:
            assert logging.getLogger().level == logging.WARNING
        finally:
            logging.getLogger().handlers.clear()
