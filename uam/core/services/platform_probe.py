"""
Platform probe — which task column applies and which native package
manager backs the fallback install.

Only what the fallback and system update need: platform family, distro
ID and the first package manager found on PATH. No version logic.
"""

from __future__ import annotations

import logging
import platform
import shlex
import shutil
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)

# ── Package manager tables ──────────────────────────────────────

_MANAGERS_BY_FAMILY: dict[str, tuple[str, ...]] = {
    "linux": ("apt", "dnf", "pacman", "zypper", "apk"),
    "windows": ("winget",),
    "macos": ("brew",),
}

_INSTALL_TEMPLATES: dict[str, str] = {
    "apt": "sudo apt install -y {name}",
    "dnf": "sudo dnf install -y {name}",
    "pacman": "sudo pacman -S --noconfirm {name}",
    "zypper": "sudo zypper install -y {name}",
    "apk": "sudo apk add {name}",
    "winget": "winget install -e --id {name}",
    "brew": "brew install {name}",
}

_UPDATE_COMMANDS: dict[str, list[str]] = {
    "apt": ["sudo apt update", "sudo apt upgrade -y"],
    "dnf": ["sudo dnf upgrade --refresh -y"],
    "pacman": ["sudo pacman -Syu --noconfirm"],
    "zypper": ["sudo zypper refresh", "sudo zypper update -y"],
    "apk": ["sudo apk update", "sudo apk upgrade"],
    "winget": ["winget upgrade --all"],
    "brew": ["brew update", "brew upgrade"],
}


@dataclass(frozen=True)
class PlatformInfo:
    """The host as seen by the task runner."""

    family: str                       # linux | windows | macos | unknown
    system: str = ""                  # raw platform.system()
    distro: str = ""                  # /etc/os-release ID (Linux only)
    package_manager: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def _family_of(system: str) -> str:
    if system == "Linux":
        return "linux"
    if system == "Darwin":
        return "macos"
    if system == "Windows" or system.startswith(("MINGW", "MSYS", "CYGWIN")):
        return "windows"
    return "unknown"


def _read_distro_id() -> str:
    try:
        with open("/etc/os-release", encoding="utf-8") as f:
            for line in f:
                if line.startswith("ID="):
                    return line.strip().split("=", 1)[1].strip('"')
    except (FileNotFoundError, OSError):
        pass
    return ""


def _probe_package_manager(family: str) -> str | None:
    for manager in _MANAGERS_BY_FAMILY.get(family, ()):
        if shutil.which(manager):
            return manager
    return None


def detect_platform(
    family: str | None = None,
    package_manager: str | None = None,
) -> PlatformInfo:
    """Probe the host.

    Args:
        family: Override the detected family (simulation / tests).
        package_manager: Override the probed package manager.
    """
    system = platform.system()
    resolved = family or _family_of(system)
    distro = _read_distro_id() if resolved == "linux" and system == "Linux" else ""
    manager = package_manager or _probe_package_manager(resolved)

    info = PlatformInfo(family=resolved, system=system, distro=distro, package_manager=manager)
    logger.debug("Platform: %s", info)
    return info


def supported_package_managers() -> list[str]:
    return sorted(_INSTALL_TEMPLATES)


def fallback_install_command(name: str, package_manager: str | None) -> str | None:
    """Native install command for ``name``, or None when unsupported."""
    template = _INSTALL_TEMPLATES.get(package_manager or "")
    if template is None:
        return None
    return template.format(name=shlex.quote(name))


def system_update_commands(package_manager: str | None) -> list[str]:
    return list(_UPDATE_COMMANDS.get(package_manager or "", []))
