"""
JSON document persistence — atomic read/write for the task, profile and
language documents.

Each document is the single source of truth for its store. Writes are
atomic (write to a temp file in the same directory, then rename over the
original) so an interrupted write never truncates the document. There is
no locking: concurrent writers are last-writer-wins on the whole file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from uam.core.errors import DocumentCorrupt, NotFound

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def read_json(path: Path) -> Any:
    """Parse a JSON file.

    Raises:
        NotFound: The file does not exist.
        DocumentCorrupt: The file is not valid JSON.
    """
    if not path.is_file():
        raise NotFound(f"File not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise NotFound(f"Cannot read {path}: {e}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise DocumentCorrupt(f"Invalid JSON in {path}: {e}") from e


def write_json(path: Path, data: Any, *, sort_keys: bool = False) -> None:
    """Write ``data`` as pretty JSON (atomic write).

    Args:
        path: Target document.
        data: JSON-serializable value.
        sort_keys: Sort object keys (used for the language document).
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False, sort_keys=sort_keys) + "\n"

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.stem}_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.replace(path)
        logger.debug("Document saved to %s", path)
    except Exception as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save %s: %s", path, e)
        raise


def load_model(path: Path, model: type[M]) -> M:
    """Read ``path`` and validate it against ``model``.

    Raises:
        NotFound: The file does not exist.
        DocumentCorrupt: Invalid JSON, or structure rejected by the model.
    """
    data = read_json(path)
    if not isinstance(data, dict):
        raise DocumentCorrupt(
            f"Expected a JSON object in {path}, got {type(data).__name__}"
        )
    try:
        doc = model.model_validate(data)
    except ValidationError as e:
        raise DocumentCorrupt(f"Invalid document {path}: {e}") from e
    logger.debug("Loaded %s from %s", model.__name__, path)
    return doc


def save_model(path: Path, doc: BaseModel) -> None:
    """Serialize a document model and write it atomically."""
    to_document = getattr(doc, "to_document", None)
    data = to_document() if callable(to_document) else doc.model_dump(mode="json")
    write_json(path, data)
