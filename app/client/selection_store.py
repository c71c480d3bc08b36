"""Persisted tenant selection, keyed by session id.

The resolver re-validates a stored selection against the accessible
organizations on every session start; a store only remembers it.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class TenantSelectionStore(Protocol):
    async def get(self, session_id: str) -> str | None: ...

    async def set(self, session_id: str, tenant_id: str) -> None: ...

    async def clear(self, session_id: str) -> None: ...


class InMemoryTenantSelectionStore:
    def __init__(self) -> None:
        self._selections: dict[str, str] = {}

    async def get(self, session_id: str) -> str | None:
        return self._selections.get(session_id)

    async def set(self, session_id: str, tenant_id: str) -> None:
        self._selections[session_id] = tenant_id

    async def clear(self, session_id: str) -> None:
        self._selections.pop(session_id, None)


class JsonFileTenantSelectionStore:
    """Selections in one JSON file: ``{session_id: {"tenant_id", "updated_at"}}``.

    Writes replace the file atomically. A missing or corrupt file reads as
    empty. File I/O runs in a worker thread.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, dict[str, str]]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable tenant selection file %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, dict[str, str]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".selection-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def get(self, session_id: str) -> str | None:
        data = await asyncio.to_thread(self._read)
        entry = data.get(session_id)
        if not isinstance(entry, dict):
            return None
        tenant_id = entry.get("tenant_id")
        return tenant_id if isinstance(tenant_id, str) else None

    async def set(self, session_id: str, tenant_id: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data[session_id] = {"tenant_id": tenant_id, "updated_at": utc_now().isoformat()}
            await asyncio.to_thread(self._write, data)

    async def clear(self, session_id: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            if data.pop(session_id, None) is not None:
                await asyncio.to_thread(self._write, data)
