"""
Bootstrap use case — wire a ``Workspace`` from explicit ``Settings``.

All collaborators (string store, stores, runner) receive their
configuration here; nothing is read from module-level state.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field

from uam.core.config.loader import Settings
from uam.core.i18n.strings import MissingHandler, StringStore
from uam.core.services.download import ensure_document
from uam.core.services.installer import RedownloadPrompt, install_from_link
from uam.core.services.platform_probe import PlatformInfo, detect_platform
from uam.core.services.shell import CommandRunner, run_shell
from uam.core.services.task_runner import TaskRunner
from uam.core.stores.profile_store import ProfileStore
from uam.core.stores.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    """The loaded documents and the runner bound to them."""

    settings: Settings
    platform: PlatformInfo
    strings: StringStore
    tasks: TaskStore
    profiles: ProfileStore
    runner: TaskRunner
    documents: dict[str, str] = field(default_factory=dict)

    @property
    def language(self) -> str:
        return self.strings.language

    def t(self, key: str, namespace: str | None = None, **values: object) -> str:
        """Shorthand for ``strings.resolve``."""
        return self.strings.resolve(key, namespace, **values)

    def reload(self) -> None:
        """Re-read every document after an external change."""
        self.strings.load()
        self.tasks.load()
        self.profiles.load()


def ensure_documents(settings: Settings) -> dict[str, str]:
    """Download or seed any missing core document.

    Raises:
        NotFound: A document is missing and no default could be obtained.
    """
    status = {}
    for path in settings.document_paths():
        status[path.name] = ensure_document(path, settings.source_url)
    return status


def open_workspace(
    settings: Settings,
    *,
    on_missing: MissingHandler | None = None,
    run_command: CommandRunner = run_shell,
    confirm_redownload: RedownloadPrompt | None = None,
) -> Workspace:
    """Load documents and build every component.

    Raises:
        NotFound, DocumentCorrupt: The core documents cannot be read.
    """
    documents = ensure_documents(settings)

    platform = detect_platform(settings.platform, settings.package_manager)
    strings = StringStore(
        settings.lang_path,
        language=settings.language,
        on_missing=on_missing if settings.interactive else None,
    )
    tasks = TaskStore(settings.tasks_path)
    profiles = ProfileStore(settings.profiles_path)

    installer = functools.partial(
        install_from_link,
        family=platform.family,
        cache_dir=settings.cache_path,
        run_command=run_command,
        cache_mode=settings.cache_mode,
        confirm_redownload=confirm_redownload,
    )
    runner = TaskRunner(
        tasks,
        platform,
        run_command=run_command,
        installer=installer,
        strict_fallback=settings.strict_fallback,
    )

    logger.info(
        "Workspace ready: %d task(s), %d profile(s), platform=%s",
        len(tasks), len(profiles), platform.family,
    )
    return Workspace(
        settings=settings,
        platform=platform,
        strings=strings,
        tasks=tasks,
        profiles=profiles,
        runner=runner,
        documents=documents,
    )
