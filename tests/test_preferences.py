import json
import os
import shutil
import sys
import tempfile
import unittest
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import PREFERENCES_KEY, LegacyStorage, UserPreferencesRepository
from session import StoreSession
from config import StoreConfig


class UserPreferencesTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.mkdtemp()
        self.path = os.path.join(self.tmp, "legacy.db")
        self.prefs = UserPreferencesRepository(self.path)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_defaults(self) -> None:
        self.assertIsNone(self.prefs.get_last_visited_workout())
        self.assertEqual(self.prefs.get_language(), "en")

    def test_last_visited_workout(self) -> None:
        self.prefs.set_last_visited_workout("w1")
        self.assertEqual(self.prefs.get_last_visited_workout(), "w1")
        self.prefs.set_language("pt-BR")
        self.prefs.clear_last_visited_workout()
        self.assertIsNone(self.prefs.get_last_visited_workout())
        self.assertEqual(self.prefs.get_language(), "pt-BR")

    def test_language(self) -> None:
        self.prefs.set_last_visited_workout("w2")
        self.prefs.set_language("pt-BR")
        self.assertEqual(self.prefs.get_language(), "pt-BR")
        self.assertEqual(self.prefs.get_last_visited_workout(), "w2")
        with self.assertRaises(ValueError):
            self.prefs.set_language("fr")
        self.assertEqual(self.prefs.get_language(), "pt-BR")

    def test_stored_as_one_json_item(self) -> None:
        self.prefs.set_last_visited_workout("w1")
        raw = LegacyStorage(self.path).get_item(PREFERENCES_KEY)
        self.assertEqual(json.loads(raw), {"lastVisitedWorkoutId": "w1", "language": "en"})

    def test_clear_all_preferences(self) -> None:
        self.prefs.set_last_visited_workout("w1")
        self.prefs.set_language("pt-BR")
        self.prefs.clear_all_preferences()
        self.assertIsNone(self.prefs.get_last_visited_workout())
        self.assertEqual(self.prefs.get_language(), "en")

    def test_corrupt_item_falls_back_to_defaults(self) -> None:
        legacy = LegacyStorage(self.path)
        legacy.set_item(PREFERENCES_KEY, "{not json")
        self.assertEqual(self.prefs.get_language(), "en")
        legacy.set_item(PREFERENCES_KEY, "[1, 2]")
        self.assertIsNone(self.prefs.get_last_visited_workout())
        self.prefs.set_last_visited_workout("w3")
        self.assertEqual(self.prefs.get_last_visited_workout(), "w3")

    def test_session_shares_legacy_database(self) -> None:
        config = StoreConfig(
            db_path=os.path.join(self.tmp, "replog.db"),
            legacy_path=self.path,
            documents_dir=os.path.join(self.tmp, "docs"),
        )
        StoreSession(config).preferences.set_last_visited_workout("w9")
        self.assertEqual(self.prefs.get_last_visited_workout(), "w9")


if __name__ == "__main__":
    unittest.main()
