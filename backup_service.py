import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Optional

from platform_env import Platform
from snapshot import Valid, decode_snapshot

logger = logging.getLogger(__name__)

BACKUP_PATH = "RepLog/replog-backup.json"


class BackupWriter:
    """Keep a copy of the workout collection in a file outside the database.

    Snapshots are written by a single worker task in the order ``backup``
    was called. Each write replaces the whole file. A failed write is logged
    and the worker moves on to the next snapshot.
    """

    def __init__(self, platform: Platform, backup_path: str = BACKUP_PATH) -> None:
        self.platform = platform
        self.path = Path(platform.documents_dir) / backup_path
        self._queue: asyncio.Queue[str] | None = None
        self._worker: asyncio.Task | None = None

    def backup(self, workouts: list) -> None:
        """Queue ``workouts`` for writing. No-op without file access."""
        if not self.platform.is_native:
            return
        payload = json.dumps(workouts)
        if self._queue is None:
            self._queue = asyncio.Queue()
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._run())
        self._queue.put_nowait(payload)

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            payload = await self._queue.get()
            try:
                await asyncio.to_thread(self._write_file, payload)
            except Exception:
                logger.warning("Backup write failed", exc_info=True)
            finally:
                self._queue.task_done()

    def _write_file(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self.path)

    async def drain(self) -> None:
        """Wait until every queued snapshot has been written or failed."""
        if self._queue is not None:
            await self._queue.join()

    async def close(self) -> None:
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

    async def restore(self) -> Optional[list]:
        """Return the backed up collection, or None when it is unusable."""
        if not self.platform.is_native:
            return None
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("No readable backup at %s", self.path)
            return None
        result = decode_snapshot(text)
        if not isinstance(result, Valid):
            logger.warning("Ignoring invalid backup: %s", result.reason)
            return None
        return result.workouts

    def exists(self) -> Optional[str]:
        if not self.platform.is_native:
            return None
        if not self.path.is_file():
            return None
        return self.path.resolve().as_uri()
