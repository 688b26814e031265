"""
Key-value storage backends for persisted settings and site analyses.

The store only needs four async operations, captured by the
:class:`KeyValueStorage` protocol.  ``MemoryStorage`` keeps values in
a dict (tests and ephemeral runs); ``JsonFileStorage`` persists the
whole mapping to a single JSON file.
"""

from __future__ import annotations

import asyncio
import copy
import json
import pathlib
from typing import Any, Protocol

from dataguardian.utils import logger

log = logger.create_logger("Storage")


class KeyValueStorage(Protocol):
    """Async key-value store holding JSON-compatible values."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def keys(self) -> list[str]: ...


class MemoryStorage:
    """In-process storage.  Values are deep-copied on the way in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """Storage backed by one JSON object on disk.

    Every mutation rewrites the file through a temporary sibling and
    an atomic rename, so a crash never leaves a half-written file.
    """

    def __init__(self, path: str | pathlib.Path) -> None:
        self._path = pathlib.Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> pathlib.Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self._path.name} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        tmp_path.replace(self._path)

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            return self._read().get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)
        log.debug("Storage entry written", {"key": key})

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)

    async def keys(self) -> list[str]:
        async with self._lock:
            return list(self._read())
