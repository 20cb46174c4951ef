"""Persisted key-value stores backing the local state."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class KeyValueStore(Protocol):
    """Async byte store. Values survive restarts for durable implementations."""

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes) -> None: ...


@dataclass
class InMemoryStore:
    """Process-local store, used by tests and dry runs."""

    data: dict[str, bytes] = field(default_factory=dict)

    async def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self.data[key] = value


@dataclass
class JsonFileStore:
    """One file per key under ``root``. Writes go through a temp file then rename."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    def _path_for(self, key: str) -> Path:
        return self.root / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    async def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        return await asyncio.to_thread(_read_bytes, path)

    async def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        await asyncio.to_thread(_write_bytes, path, value)
        logger.debug(f"Persisted {len(value)} bytes to {path}")


def _read_bytes(path: Path) -> bytes | None:
    if not path.exists():
        return None
    return path.read_bytes()


def _write_bytes(path: Path, value: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_bytes(value)
    tmp_path.replace(path)
