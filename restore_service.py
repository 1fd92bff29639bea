import logging

from backup_service import BackupWriter
from db import WorkoutStore

logger = logging.getLogger(__name__)


class RestoreOrchestrator:
    """Seed an empty workout store from the backup file at startup."""

    def __init__(self, store: WorkoutStore, backup: BackupWriter) -> None:
        self.store = store
        self.backup = backup

    async def run(self) -> bool:
        """Return True when the store was filled from the backup."""
        try:
            if await self.store.load():
                return False
            workouts = await self.backup.restore()
            if not workouts:
                return False
            await self.store.save_restored(workouts)
        except Exception:
            logger.warning("Restore from backup failed", exc_info=True)
            return False
        logger.info("Restored %d workouts from backup", len(workouts))
        return True
