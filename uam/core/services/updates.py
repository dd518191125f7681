"""
Update check, document refresh and system update.

Channel-independent: each function returns a plain dict with ``ok`` and
either data or an ``error`` message.
"""

from __future__ import annotations

import logging
from pathlib import Path

from uam import __version__
from uam.core.errors import NetworkUnavailable
from uam.core.services.download import download, join_url
from uam.core.services.platform_probe import PlatformInfo, system_update_commands
from uam.core.services.shell import CommandRunner

logger = logging.getLogger(__name__)

VERSION_FILE = "version.txt"


def check_update(source_url: str, current: str = __version__) -> dict:
    """Compare the published version with ``current``.

    Returns:
        ``{"ok": True, "current": ..., "latest": ..., "update_available": bool}``
        or ``{"ok": False, "error": "..."}``.
    """
    if not source_url:
        return {"ok": False, "error": "No source_url configured"}
    try:
        latest = str(download(join_url(source_url, VERSION_FILE))).strip()
    except NetworkUnavailable as e:
        return {"ok": False, "error": str(e)}
    if not latest:
        return {"ok": False, "error": "Unable to read the published version"}

    return {
        "ok": True,
        "current": current,
        "latest": latest,
        "update_available": latest != current,
    }


def refresh_documents(source_url: str, paths: list[Path]) -> dict:
    """Re-download each document from ``source_url`` over the local copy."""
    if not source_url:
        return {"ok": False, "error": "No source_url configured", "files": {}}

    files: dict[str, str] = {}
    for path in paths:
        try:
            download(join_url(source_url, path.name), path)
            files[path.name] = "downloaded"
        except NetworkUnavailable as e:
            logger.warning("Refresh of %s failed: %s", path.name, e)
            files[path.name] = str(e)

    ok = all(status == "downloaded" for status in files.values())
    return {"ok": ok, "files": files}


def update_system(platform: PlatformInfo, run_command: CommandRunner) -> dict:
    """Run the package manager's update commands (fire-and-continue)."""
    commands = system_update_commands(platform.package_manager)
    if not commands:
        return {"ok": False, "error": f"No supported package manager on {platform.family}"}

    results = []
    for command in commands:
        results.append({"command": command, "return_code": run_command(command)})
    return {"ok": True, "manager": platform.package_manager, "commands": results}
