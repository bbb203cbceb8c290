"""Key-value storage port for persisted criteria order.

Values are JSON documents stored as text under string keys.  Text that does
not parse is reported as absent; callers never see a decode error.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from src.vendorscope.exceptions import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


def _decode(key: str, text: str | None) -> Any | None:
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed JSON stored under %r", key)
        return None


class InMemoryStore:
    """Process-local store; holds serialised text like a browser store would."""

    def __init__(self, raw: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(raw or {})

    def get(self, key: str) -> Any | None:
        return _decode(key, self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def raw(self, key: str) -> str | None:
        return self._data.get(key)


class JsonFileStore:
    """One ``<key>.json`` file per key under *root*."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{_UNSAFE_KEY_RE.sub('_', key)}.json"

    def get(self, key: str) -> Any | None:
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None
        return _decode(key, text)

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.root, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f)
                os.replace(tmp, path)
            except BaseException:
                os.unlink(tmp)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(
                f"Failed to persist {key!r}", context={"path": str(path)},
            ) from exc
        logger.debug("Persisted %s -> %s", key, path)
