"""JSON-file record storage with a single writer per file."""

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from peakbook.config import get_settings
from peakbook.services.errors import InternalError

logger = logging.getLogger(__name__)

Record = dict[str, Any]

# One lock per resolved file path, shared by every RecordStore on that path
_locks: dict[Path, asyncio.Lock] = {}


def _lock_for(path: Path) -> asyncio.Lock:
    key = path.resolve()
    lock = _locks.get(key)
    if lock is None:
        lock = _locks[key] = asyncio.Lock()
    return lock


class RecordStore:
    """A JSON file holding a list of records.

    Every read goes to disk; nothing is cached between calls. Writers must go
    through ``transaction()`` so that load, mutate and save happen under the
    file's lock and concurrent handlers cannot overwrite each other's changes.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def _read(self) -> list[Record]:
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            logger.error("Error reading data from %s: %s", self.path, e)
            raise InternalError(f"Corrupt data file {self.path.name}") from e

        if not isinstance(data, list):
            raise InternalError(f"Data file {self.path.name} does not hold a list")
        return data

    def _write(self, records: list[Record]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def load(self) -> list[Record]:
        """Return the current list of records, or an empty list if the file is absent."""
        return await asyncio.to_thread(self._read)

    async def save(self, records: list[Record]) -> None:
        """Replace the file contents with ``records``."""
        await asyncio.to_thread(self._write, records)
        logger.debug("Wrote %d records to %s", len(records), self.path)

    @asynccontextmanager
    async def locked(self) -> AsyncIterator[list[Record]]:
        """Hold the file lock and yield the loaded records without saving them."""
        async with self._lock:
            yield await self.load()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[list[Record]]:
        """Hold the file lock, yield the loaded records and save them on success.

        Nothing is written when the block raises.
        """
        async with self._lock:
            records = await self.load()
            yield records
            await self.save(records)


class Database:
    """Bundle of the stores and upload pipeline used by request handlers."""

    def __init__(self, data_dir: Path | str, media_root: Path | str) -> None:
        # Imported here to avoid circular import
        from peakbook.services.mountain_store import MountainStore
        from peakbook.services.uploads import UploadPipeline
        from peakbook.services.user_store import UserStore

        data_dir = Path(data_dir)
        self.users = UserStore(RecordStore(data_dir / "users.json"))
        self.mountains = MountainStore(
            RecordStore(data_dir / "mountains.json"),
            RecordStore(data_dir / "sequences.json"),
        )
        self.uploads = UploadPipeline(media_root)


_database: Database | None = None


def get_db() -> Database:
    """Dependency that provides the process-wide Database."""
    global _database
    if _database is None:
        settings = get_settings()
        _database = Database(settings.data_dir, settings.media_root)
    return _database
