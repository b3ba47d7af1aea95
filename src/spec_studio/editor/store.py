"""Persistence for the single rollback snapshot.

A store keeps at most one serialized document per key. The editor only
ever uses `STORAGE_KEY`.
"""

import json
import logging
from pathlib import Path

from spec_studio.errors import SnapshotError

logger = logging.getLogger(__name__)

STORAGE_KEY = "openapi3"


class MemorySnapshotStore:
    """Keeps snapshots in a dict. Used by tests and short-lived sessions."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def write(self, document: dict, key: str = STORAGE_KEY) -> None:
        self._data[key] = json.dumps(document)

    def read(self, key: str = STORAGE_KEY) -> dict | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return _decode(raw, key)

    def clear(self, key: str = STORAGE_KEY) -> None:
        self._data.pop(key, None)


class FileSnapshotStore:
    """Keeps each snapshot as `<directory>/<key>.json`."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def write(self, document: dict, key: str = STORAGE_KEY) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Cannot write snapshot to {path}: {e}") from e
        logger.info("Saved snapshot to %s", path)

    def read(self, key: str = STORAGE_KEY) -> dict | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot read snapshot %s: %s", path, e)
            return None
        return _decode(raw, key)

    def clear(self, key: str = STORAGE_KEY) -> None:
        self._path(key).unlink(missing_ok=True)


def _decode(raw: str, key: str) -> dict | None:
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring corrupt snapshot %r: %s", key, e)
        return None
    if not isinstance(document, dict):
        logger.warning("Ignoring snapshot %r: not a JSON object", key)
        return None
    return document
