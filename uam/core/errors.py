"""
Error taxonomy shared by every layer.

Stores raise these; services turn them into result objects; the CLI
prints them and picks the exit code.
"""

from __future__ import annotations


class UamError(Exception):
    """Base class for all expected, user-reportable failures."""


class NotFound(UamError):
    """A task, profile or file does not exist."""


class DuplicateKey(UamError):
    """A record with the same name already exists."""


class InvalidInput(UamError):
    """A selection, number or value supplied by the user is malformed."""


class DocumentCorrupt(UamError):
    """A JSON document fails to parse or has the wrong structure."""


class NetworkUnavailable(UamError):
    """Connectivity check or download failed."""


class InstallFailed(UamError):
    """A downloaded package could not be stored or unpacked."""
