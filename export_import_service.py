import datetime
import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from db import WorkoutStore
from snapshot import Valid, decode_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: str


@dataclass(frozen=True)
class ExportResult:
    status: str
    path: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class ImportResult:
    status: str
    count: int = 0


class ExportImportService:
    """Dump the collection to a shareable file and merge files back in."""

    def __init__(
        self,
        store: WorkoutStore,
        prefix: str = "replog-backup",
        extension: str = "json",
    ) -> None:
        self.store = store
        self.prefix = prefix
        self.extension = extension

    def file_name(self, today: datetime.date | None = None) -> str:
        day = today or datetime.date.today()
        return f"{self.prefix}-{day:%Y-%m-%d}.{self.extension}"

    async def prepare_export(
        self, today: datetime.date | None = None
    ) -> Optional[ExportFile]:
        workouts = await self.store.load()
        if not workouts:
            return None
        content = json.dumps(workouts, indent=2, ensure_ascii=False)
        return ExportFile(self.file_name(today), content)

    async def export_workouts(
        self, directory: str, today: datetime.date | None = None
    ) -> ExportResult:
        """Write the export file into ``directory``."""
        export = await self.prepare_export(today)
        if export is None:
            return ExportResult("empty")
        path = os.path.join(directory, export.filename)
        try:
            os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(export.content)
        except OSError as e:
            logger.warning("Export to %s failed: %s", path, e)
            return ExportResult("error", message=str(e))
        return ExportResult("success", path=path)

    async def import_workouts(self, text: str) -> ImportResult:
        """Append workouts from ``text`` whose ids are not stored yet."""
        result = decode_snapshot(text)
        if not isinstance(result, Valid):
            logger.info("Rejected import: %s", result.reason)
            return ImportResult("invalid_file")
        current = await self.store.load()
        existing_ids = {w["id"] for w in current}
        new_workouts = [w for w in result.workouts if w["id"] not in existing_ids]
        if not new_workouts:
            return ImportResult("all_duplicates")
        await self.store.save(current + new_workouts)
        return ImportResult("success", len(new_workouts))

    async def import_file(self, path: str) -> ImportResult:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.info("Could not read import file %s: %s", path, e)
            return ImportResult("invalid_file")
        return await self.import_workouts(text)
