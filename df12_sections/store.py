"""Persistent key-value storage for the section engine's cached artefacts.

The engine stores exactly two documents, the Sections Record and the
navigation menu, behind the :class:`ConfigStore` protocol: ``get``/``set`` plus
a ``transaction`` context manager that turns a read-compare-write sequence into
a single critical section.

Two reference stores are provided:

* :class:`MemoryStore` keeps values in a dict for tests and embedded use.
* :class:`JsonFileStore` persists every key in one JSON document, encoded with
  ``msgspec`` and replaced atomically on each write.

Example
-------
>>> from df12_sections.store import MemoryStore
>>> store = MemoryStore()
>>> with store.transaction():
...     if store.get("answer") is None:
...         store.set("answer", {"value": 42})
>>> store.get("answer")
{'value': 42}
"""

from __future__ import annotations

import contextlib
import copy
import logging
import os
import tempfile
import threading
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)


class ConfigStoreError(RuntimeError):
    """Raised when a persisted store cannot be read or written."""


class ConfigStore(typ.Protocol):
    """Persistent get/set storage consumed by the registry and navigation."""

    def get(self, key: str) -> typ.Any | None:
        """Return the value stored under ``key`` or None when absent."""
        ...

    def set(self, key: str, value: typ.Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def transaction(self) -> contextlib.AbstractContextManager[None]:
        """Return a context manager guarding a read-compare-write sequence."""
        ...


class MemoryStore:
    """Dict-backed store; values are deep-copied on the way in and out."""

    def __init__(self, initial: cabc.Mapping[str, typ.Any] | None = None) -> None:
        self._data: dict[str, typ.Any] = copy.deepcopy(dict(initial or {}))
        self._lock = threading.RLock()
        self.writes: list[str] = []

    def get(self, key: str) -> typ.Any | None:
        """Return a copy of the value stored under ``key``."""
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: typ.Any) -> None:
        """Store a copy of ``value`` and record the write."""
        with self._lock:
            self._data[key] = copy.deepcopy(value)
            self.writes.append(key)

    @contextlib.contextmanager
    def transaction(self) -> cabc.Iterator[None]:
        """Hold the store lock for the duration of the block."""
        with self._lock:
            yield


class JsonFileStore:
    """Store every key in a single JSON document on disk.

    The document is read on each ``get`` so separate processes sharing the file
    observe each other's writes. Writes go to a temporary file in the same
    directory which then replaces the target, so readers never see a partial
    document.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    def get(self, key: str) -> typ.Any | None:
        """Return the value stored under ``key`` or None."""
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: typ.Any) -> None:
        """Persist ``value`` under ``key``, replacing an unreadable document."""
        with self._lock:
            try:
                document = self._read()
            except ConfigStoreError as exc:
                logger.warning("%s Starting a new document.", exc)
                document = {}
            document[key] = value
            self._write(document)

    @contextlib.contextmanager
    def transaction(self) -> cabc.Iterator[None]:
        """Hold the store lock for the duration of the block."""
        with self._lock:
            yield

    def _read(self) -> dict[str, typ.Any]:
        if not self.path.exists():
            return {}
        try:
            payload = msgspec_json.decode(self.path.read_bytes())
        except (OSError, msgspec.DecodeError) as exc:
            msg = f"Unable to read section store '{self.path}': {exc}"
            raise ConfigStoreError(msg) from exc
        if not isinstance(payload, dict):
            msg = f"Section store '{self.path}' must contain a JSON object."
            raise ConfigStoreError(msg)
        return payload

    def _write(self, document: dict[str, typ.Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=".df12-sections-", suffix=".json", dir=self.path.parent
        )
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(msgspec_json.format(msgspec_json.encode(document)))
            os.replace(tmp, self.path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            msg = f"Unable to write section store '{self.path}': {exc}"
            raise ConfigStoreError(msg) from exc


def read_cached(store: ConfigStore, key: str) -> typ.Any | None:
    """Return the value under ``key``, or None when the store cannot be read.

    An unreadable store is logged and treated as a cache miss.
    """
    try:
        return store.get(key)
    except ConfigStoreError as exc:
        logger.warning("%s Rebuilding %r.", exc, key)
        return None


__all__ = [
    "ConfigStore",
    "ConfigStoreError",
    "JsonFileStore",
    "MemoryStore",
    "read_cached",
]
