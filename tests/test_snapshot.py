import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from snapshot import Invalid, Valid, decode_snapshot, is_valid_snapshot, parse_snapshot


WORKOUT = {"id": "w1", "title": "Leg Day", "date": "2026-01-01", "muscleGroup": []}


class SnapshotTestCase(unittest.TestCase):
    def test_accepts_workout_list(self) -> None:
        result = parse_snapshot([WORKOUT])
        self.assertIsInstance(result, Valid)
        self.assertEqual(result.workouts, [WORKOUT])

    def test_accepts_empty_list(self) -> None:
        self.assertTrue(is_valid_snapshot([]))

    def test_extra_fields_allowed(self) -> None:
        item = dict(WORKOUT, userId="u1")
        self.assertTrue(is_valid_snapshot([item]))

    def test_rejects_non_list(self) -> None:
        self.assertIsInstance(parse_snapshot({"workouts": []}), Invalid)
        self.assertFalse(is_valid_snapshot(None))

    def test_rejects_missing_title(self) -> None:
        item = {"id": "w1", "date": "2026-01-01", "muscleGroup": []}
        result = parse_snapshot([WORKOUT, item])
        self.assertIsInstance(result, Invalid)
        self.assertIn("item 1", result.reason)
        self.assertIn("title", result.reason)

    def test_rejects_wrong_types(self) -> None:
        self.assertFalse(is_valid_snapshot([dict(WORKOUT, id=1)]))
        self.assertFalse(is_valid_snapshot([dict(WORKOUT, muscleGroup="x")]))
        self.assertFalse(is_valid_snapshot(["w1"]))

    def test_nested_shape_not_checked(self) -> None:
        item = dict(WORKOUT, muscleGroup=[{"broken": True}])
        self.assertTrue(is_valid_snapshot([item]))

    def test_decode(self) -> None:
        self.assertIsInstance(decode_snapshot('[{"id": "w1", "title": "A", "date": "d", "muscleGroup": []}]'), Valid)
        result = decode_snapshot("{not json")
        self.assertIsInstance(result, Invalid)
        self.assertIn("malformed JSON", result.reason)

    def test_decode_deeply_nested_is_invalid(self) -> None:
        result = decode_snapshot("[" * 200000 + "]" * 200000)
        self.assertIsInstance(result, Invalid)
        self.assertIn("malformed JSON", result.reason)


if __name__ == "__main__":
    unittest.main()
