"""
Shared test fixtures and configuration.

No network, no real shell: documents live under ``tmp_path`` and the
runner receives a recording ``run_command``.
"""

import json
from pathlib import Path

import pytest

from uam.core.config.loader import Settings
from uam.core.services.platform_probe import PlatformInfo
from uam.core.stores.profile_store import ProfileStore
from uam.core.stores.task_store import TaskStore

TASKS_DOC = {
    "tasks": [
        {
            "name": "vim",
            "description": {"en": "Text editor", "fr": "Éditeur de texte"},
            "category": {"en": "Development"},
            "linux": ["sudo apt install -y vim"],
            "macos": ["brew install vim"],
        },
        {
            "name": "git",
            "description": {"en": "Version control"},
            "category": {"en": "Development"},
            "linux": ["sudo apt install -y git", "git config --global init.defaultBranch main"],
            "windows": ["winget install -e --id Git.Git"],
        },
        {
            "name": "curl",
            "description": "HTTP client",
            "linux": "sudo apt install -y curl",
        },
    ]
}

PROFILES_DOC = {
    "profiles": [
        {"name": "dev", "description": {"en": "Developer tools"}, "tasks": ["git", "vim"]},
        {"name": "empty", "description": {}, "tasks": []},
    ]
}

LANG_DOC = {
    "greet": {"en": "Hello"},
    "menu": {
        "back": {"en": "Back", "fr": "Retour"},
        "choose": {"en": "Your choice"},
    },
}


class RecordingShell:
    """Stands in for ``run_shell``: records commands, returns scripted codes."""

    def __init__(self, codes: dict[str, int] | None = None, default: int = 0):
        self.commands: list[str] = []
        self.codes = codes or {}
        self.default = default

    def __call__(self, command: str) -> int:
        self.commands.append(command)
        return self.codes.get(command, self.default)


def write_doc(path: Path, data) -> Path:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A data directory holding the three core documents."""
    root = tmp_path / "data"
    root.mkdir()
    write_doc(root / "tasks.json", TASKS_DOC)
    write_doc(root / "profiles.json", PROFILES_DOC)
    write_doc(root / "lang.json", LANG_DOC)
    return root


@pytest.fixture
def task_store(data_dir: Path) -> TaskStore:
    return TaskStore(data_dir / "tasks.json")


@pytest.fixture
def profile_store(data_dir: Path) -> ProfileStore:
    return ProfileStore(data_dir / "profiles.json")


@pytest.fixture
def linux() -> PlatformInfo:
    return PlatformInfo(family="linux", system="Linux", distro="debian", package_manager="apt")


@pytest.fixture
def shell() -> RecordingShell:
    return RecordingShell()


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Offline, non-interactive settings on a simulated Linux host."""
    return Settings(
        data_dir=data_dir,
        source_url="",
        platform="linux",
        package_manager="apt",
        interactive=False,
    )


@pytest.fixture
def config_file(data_dir: Path) -> Path:
    """A uam.yml next to the documents."""
    path = data_dir / "uam.yml"
    path.write_text(
        "language: en\n"
        "source_url: ''\n"
        "platform: linux\n"
        "package_manager: apt\n"
        "interactive: false\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_shell():
    """Factory for a ``RecordingShell`` with scripted exit codes."""
    return RecordingShell
