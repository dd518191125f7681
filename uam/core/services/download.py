"""
Network access — connectivity check, downloads and document bootstrap.

Uses ``urllib.request`` only. Every failure surfaces as
``NetworkUnavailable`` so callers can abort download-dependent work.
"""

from __future__ import annotations

import logging
import shutil
import urllib.error
import urllib.request
from importlib import resources
from pathlib import Path

from uam import __version__
from uam.core.errors import NetworkUnavailable, NotFound

logger = logging.getLogger(__name__)

PROBE_URL = "https://github.com"
USER_AGENT = f"uam/{__version__}"


def _request(url: str, method: str = "GET") -> urllib.request.Request:
    return urllib.request.Request(url, method=method, headers={"User-Agent": USER_AGENT})


def check_internet(url: str = PROBE_URL, timeout: int = 5) -> None:
    """Raise ``NetworkUnavailable`` unless ``url`` answers a HEAD request."""
    try:
        with urllib.request.urlopen(_request(url, "HEAD"), timeout=timeout):
            pass
    except (urllib.error.URLError, OSError, ValueError) as e:
        raise NetworkUnavailable(f"No connection to {url}: {e}") from e
    logger.debug("Connectivity OK (%s)", url)


def download(url: str, dest: Path | None = None, timeout: int = 30) -> str | Path:
    """Fetch ``url``.

    Returns:
        The decoded body when ``dest`` is None, else ``dest`` after the
        bytes were written there.
    """
    logger.info("Downloading %s", url)
    try:
        with urllib.request.urlopen(_request(url), timeout=timeout) as resp:
            body = resp.read()
    except (urllib.error.URLError, OSError, ValueError) as e:
        raise NetworkUnavailable(f"Download failed for {url}: {e}") from e

    if dest is None:
        return body.decode("utf-8", errors="replace")

    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_name(f".{dest.name}.part")
    tmp.write_bytes(body)
    tmp.replace(dest)
    logger.debug("Saved %d bytes to %s", len(body), dest)
    return dest


def join_url(base: str, filename: str) -> str:
    return f"{base.rstrip('/')}/{filename}"


def ensure_document(path: Path, source_url: str = "") -> str:
    """Make sure a core document exists.

    Missing documents are downloaded from ``source_url``; when that is
    not possible the bundled seed copy from ``uam/data`` is used.

    Returns:
        ``"present"``, ``"downloaded"`` or ``"seeded"``.

    Raises:
        NotFound: Neither a download nor a bundled copy was available.
    """
    if path.is_file():
        return "present"

    if source_url:
        try:
            download(join_url(source_url, path.name), path)
            logger.info("Downloaded default %s", path.name)
            return "downloaded"
        except NetworkUnavailable as e:
            logger.warning("%s — falling back to the bundled copy", e)

    seed = resources.files("uam.data").joinpath(path.name)
    if not seed.is_file():
        raise NotFound(f"File not found and no default available: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    with resources.as_file(seed) as seed_path:
        shutil.copyfile(seed_path, path)
    logger.info("Seeded %s from bundled defaults", path)
    return "seeded"
