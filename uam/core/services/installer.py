"""
Install from link — download a package file, unpack it, install it.

The file lands in ``<cache>/<platform>/<filename>``. Archives are
unpacked in Python; everything else is installed by platform- and
extension-specific shell commands run through the command runner.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import tarfile
import zipfile
from collections.abc import Callable
from pathlib import Path
from urllib.parse import unquote, urlparse

from uam.core.errors import InstallFailed, InvalidInput
from uam.core.models.run import CommandOutcome
from uam.core.services.download import download
from uam.core.services.shell import CommandRunner

logger = logging.getLogger(__name__)

CACHE_MODES = ("normal", "force", "cache")

# file name → True to download again
RedownloadPrompt = Callable[[str], bool]


def filename_from_url(url: str) -> str:
    name = Path(unquote(urlparse(url).path)).name
    if not name:
        raise InvalidInput(f"Cannot derive a file name from URL: {url}")
    return name


def _quote(path: Path | str, family: str) -> str:
    if family == "windows":
        return f'"{path}"'
    return shlex.quote(str(path))


def _archive_kind(name: str) -> str | None:
    lower = name.lower()
    if lower.endswith(".zip"):
        return "zip"
    if lower.endswith((".tar.gz", ".tgz")):
        return "gz"
    if lower.endswith(".tar.xz"):
        return "xz"
    return None


def unpack(file: Path, dest: Path) -> bool:
    """Extract a zip / tar.gz / tar.xz archive into ``dest``.

    Returns:
        False when ``file`` is not a supported archive.
    """
    kind = _archive_kind(file.name)
    if kind is None:
        return False

    dest.mkdir(parents=True, exist_ok=True)
    logger.info("Unpacking %s into %s", file.name, dest)
    if kind == "zip":
        with zipfile.ZipFile(file) as zf:
            zf.extractall(dest)
    else:
        with tarfile.open(file, f"r:{kind}") as tf:
            tf.extractall(dest, filter="data")
    return True


def install_commands(file: Path, family: str, mount_dir: Path | None = None) -> list[str]:
    """Shell commands that install ``file`` on ``family``."""
    name = file.name.lower()
    f = _quote(file, family)

    if family == "linux":
        if name.endswith(".deb"):
            return [f"sudo dpkg -i {f} || sudo apt-get install -f -y"]
        if name.endswith(".rpm"):
            if shutil.which("dnf"):
                return [f"sudo dnf install -y {f} || sudo yum localinstall -y {f}"]
            return [f"sudo yum localinstall -y {f}"]
        if name.endswith(".appimage"):
            return [f"chmod +x {f}", f"sudo mv {f} /usr/local/bin/"]
        if _archive_kind(name) is None and file.is_file() and os.access(file, os.X_OK):
            return [f"bash {f}"]

    elif family == "windows":
        if name.endswith(".exe"):
            return [f"{f} /quiet /norestart || {f}"]
        if name.endswith(".msi"):
            return [f"msiexec /i {f} /quiet /norestart"]

    elif family == "macos":
        if name.endswith(".dmg"):
            mnt = mount_dir or file.parent / "mnt"
            m = _quote(mnt, family)
            return [
                f"mkdir -p {m}",
                f"hdiutil attach {f} -mountpoint {m}",
                f"cp -R {m}/*.app /Applications/",
                f"hdiutil detach {m}",
            ]
        if name.endswith(".pkg"):
            return [f"sudo installer -pkg {f} -target /"]

    return []


def _unpack_target(file: Path, family: str, cache: Path) -> Path:
    if _archive_kind(file.name) == "zip":
        if family == "windows":
            return Path.home() / "AppData" / "Local"
        if family == "macos":
            return Path("/Applications")
    return cache / "unpacked"


def install_from_link(
    url: str,
    *,
    family: str,
    cache_dir: Path,
    run_command: CommandRunner,
    cache_mode: str = "normal",
    confirm_redownload: RedownloadPrompt | None = None,
) -> list[CommandOutcome]:
    """Download ``url`` (honouring the cache) and install it.

    Cache modes: ``normal`` asks ``confirm_redownload`` before fetching a
    file that is already cached (no prompt → keep the cache), ``force``
    always downloads, ``cache`` reuses any cached copy.

    Raises:
        NetworkUnavailable: The download failed.
        InstallFailed: The file could not be written or unpacked.
        InvalidInput: Unknown cache mode or unusable URL.
    """
    if cache_mode not in CACHE_MODES:
        raise InvalidInput(f"Unknown cache mode: '{cache_mode}'")

    cache = cache_dir / family
    file = cache / filename_from_url(url)

    fetch = True
    if file.is_file():
        if cache_mode == "cache":
            fetch = False
        elif cache_mode == "normal":
            fetch = bool(confirm_redownload and confirm_redownload(file.name))
    if fetch:
        try:
            download(url, file)
        except OSError as e:
            raise InstallFailed(f"Cannot save {file}: {e}") from e
    else:
        logger.info("Using cached %s", file)

    try:
        unpack(file, _unpack_target(file, family, cache))
    except (zipfile.BadZipFile, tarfile.TarError) as e:
        raise InstallFailed(f"Cannot unpack {file.name}: {e}") from e
    except OSError as e:
        raise InstallFailed(f"Cannot extract {file.name}: {e}") from e

    outcomes = []
    for command in install_commands(file, family):
        outcomes.append(CommandOutcome(command=command, return_code=run_command(command)))
    return outcomes
