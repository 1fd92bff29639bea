import argparse
import asyncio
import datetime
import logging

from config import StoreConfig, configure_logging
from localization import translator
from migrate import LegacyStoreBridge
from session import StoreSession

logger = logging.getLogger(__name__)

_ = translator.gettext


async def export_workouts(session: StoreSession, output_dir: str) -> str:
    result = await session.transfer.export_workouts(output_dir)
    if result.status == "empty":
        return _("Nothing to export")
    if result.status == "error":
        return _("Export failed: {message}", message=result.message)
    return _("Exported to {path}", path=result.path)


async def import_workouts(session: StoreSession, path: str) -> str:
    result = await session.transfer.import_file(path)
    if result.status == "success":
        return _("Imported {count} workouts", count=result.count)
    if result.status == "all_duplicates":
        return _("All workouts already exist")
    return _("Invalid backup file")


def backup_status(session: StoreSession) -> str:
    uri = session.backup.exists()
    if uri is None:
        return _("No backup found")
    return _("Backup found at {uri}", uri=uri)


async def migrate_legacy(session: StoreSession) -> str:
    try:
        moved = await LegacyStoreBridge(session.legacy, session.store).run()
    except Exception:
        logger.warning("Legacy migration failed", exc_info=True)
        return _("Legacy migration failed")
    session.store.migrated = True
    if moved:
        return _("Migrated legacy workouts")
    return _("No legacy workouts to migrate")


def language(session: StoreSession, lang: str | None) -> str:
    if lang is None:
        return _("Language: {language}", language=session.preferences.get_language())
    try:
        session.preferences.set_language(lang)
    except ValueError:
        return _("Unsupported language: {language}", language=lang)
    translator.set_language(lang)
    return _("Language set to {language}", language=lang)


async def demo_data(session: StoreSession) -> str:
    """Populate the store with a demo workout if empty."""
    if await session.workouts.list_workouts():
        return _("Database already contains workouts")
    today = datetime.date.today().isoformat()
    workout = await session.workouts.add_workout("Demo session", today, "temp-user-demo")
    group = await session.muscle_groups.add_muscle_group(
        workout["id"], "Chest", today, ["Bench Press"]
    )
    exercise_id = group["exercises"][0]["id"]
    await session.logs.add_log(exercise_id, 5, 100.0)
    await session.logs.add_log(exercise_id, 5, 105.0)
    return _("Demo data inserted")


async def run(args: argparse.Namespace, config: StoreConfig) -> str:
    session = StoreSession(config)
    try:
        if args.cmd == "migrate":
            return await migrate_legacy(session)
        if args.cmd == "language":
            return language(session, args.lang)
        if args.cmd == "vacuum":
            session.store.vacuum()
            return _("Database compacted")
        restored = await session.start()
        if args.cmd == "restore":
            return _("Restored workouts from backup") if restored else _("Nothing restored")
        if args.cmd == "export":
            return await export_workouts(session, args.out or config.export_dir)
        if args.cmd == "import":
            return await import_workouts(session, args.file)
        if args.cmd == "backup-status":
            return backup_status(session)
        if args.cmd == "demo":
            return await demo_data(session)
        await session.workouts.clear_all()
        return _("All workouts deleted")
    finally:
        await session.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="RepLog storage utilities")
    parser.add_argument("--config", default="settings.yaml")
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--out", default=None)

    imp = sub.add_parser("import")
    imp.add_argument("file")

    sub.add_parser("backup-status")
    sub.add_parser("restore")
    sub.add_parser("migrate")
    sub.add_parser("vacuum")
    lang = sub.add_parser("language")
    lang.add_argument("lang", nargs="?", default=None)
    sub.add_parser("demo")
    sub.add_parser("clear")

    args = parser.parse_args()
    config = StoreConfig.load(args.config)
    configure_logging(config.log_level)
    translator.set_language(config.language)
    print(asyncio.run(run(args, config)))


if __name__ == "__main__":
    main()
