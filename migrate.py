import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from db import LegacyStorage, WorkoutStore

logger = logging.getLogger(__name__)

LEGACY_STORAGE_KEY = "replog_workouts"


class LegacyStoreBridge:
    """Move workouts from the legacy key/value slot into the workout store.

    Safe to rerun after a crash: when the store already holds workouts the
    legacy payload is discarded instead of written again.
    """

    def __init__(self, legacy: "LegacyStorage", store: "WorkoutStore") -> None:
        self.legacy = legacy
        self.store = store

    async def run(self) -> bool:
        """Return True when legacy workouts were written into the store."""
        raw = self.legacy.get_item(LEGACY_STORAGE_KEY)
        if not raw:
            return False
        payload = json.loads(raw)
        if not isinstance(payload, list) or not payload:
            logger.info("Legacy slot holds no workouts, skipping migration")
            return False
        existing = await self.store.read_record()
        if isinstance(existing, list) and existing:
            logger.info("Workout store already populated, discarding legacy data")
            self.legacy.remove_item(LEGACY_STORAGE_KEY)
            return False
        await self.store.write_record(payload)
        self.legacy.remove_item(LEGACY_STORAGE_KEY)
        logger.info("Migrated %d workouts from legacy storage", len(payload))
        return True


def migrate(db_path: str = "replog.db", legacy_path: str = "replog_legacy.db") -> bool:
    from db import LegacyStorage, WorkoutStore

    store = WorkoutStore(db_path)
    bridge = LegacyStoreBridge(LegacyStorage(legacy_path), store)
    return asyncio.run(bridge.run())


if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else "replog.db"
    legacy = sys.argv[2] if len(sys.argv) > 2 else "replog_legacy.db"
    migrate(path, legacy)
