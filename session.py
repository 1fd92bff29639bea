from backup_service import BackupWriter
from config import StoreConfig
from db import LegacyStorage, UserPreferencesRepository, WorkoutStore
from exercise_service import ExerciseService, LogService
from export_import_service import ExportImportService
from platform_env import Platform
from restore_service import RestoreOrchestrator
from workout_service import MuscleGroupService, WorkoutService


class StoreSession:
    """Owns the store and its collaborators for the lifetime of the process."""

    def __init__(self, config: StoreConfig | None = None) -> None:
        self.config = config or StoreConfig()
        self.platform = Platform.detect(
            self.config.documents_path, self.config.native_platform
        )
        self.legacy = LegacyStorage(self.config.legacy_path)
        self.preferences = UserPreferencesRepository(self.config.legacy_path)
        self.backup = BackupWriter(self.platform)
        self.store = WorkoutStore(self.config.db_path, self.backup, self.legacy)
        self.restorer = RestoreOrchestrator(self.store, self.backup)
        self.transfer = ExportImportService(
            self.store, self.config.export_prefix, self.config.export_extension
        )
        self.workouts = WorkoutService(self.store)
        self.muscle_groups = MuscleGroupService(self.store)
        self.exercises = ExerciseService(self.store)
        self.logs = LogService(self.store)

    async def start(self) -> bool:
        """Run startup restore; True when workouts came from the backup."""
        return await self.restorer.run()

    async def close(self) -> None:
        await self.backup.close()
