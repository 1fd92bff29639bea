import datetime
import math
import uuid
from typing import Optional

from db import WorkoutStore
from workout_service import reordered, clean_title


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _find_group(workouts: list, group_id: str) -> dict:
    for workout in workouts:
        for group in workout["muscleGroup"]:
            if group["id"] == group_id:
                return group
    raise ValueError("muscle group not found")


def _find_exercise(workouts: list, exercise_id: str) -> tuple[dict, dict]:
    for workout in workouts:
        for group in workout["muscleGroup"]:
            for exercise in group["exercises"]:
                if exercise["id"] == exercise_id:
                    return group, exercise
    raise ValueError("exercise not found")


def _check_log(reps: int, weight: float) -> None:
    if isinstance(reps, bool) or not isinstance(reps, int) or reps <= 0:
        raise ValueError("reps must be positive")
    if not math.isfinite(weight):
        raise ValueError("weight must be a finite number")
    if weight < 0:
        raise ValueError("weight must be non-negative")


class ExerciseService:
    """Manage exercises inside muscle groups."""

    def __init__(self, store: WorkoutStore) -> None:
        self.store = store

    async def get_exercise(self, exercise_id: str) -> Optional[dict]:
        """Return an exercise, stamping logs saved without a date.

        The stamped dates are saved before the exercise is returned so later
        reads see the same timestamps.
        """
        workouts = await self.store.load()
        try:
            _group, exercise = _find_exercise(workouts, exercise_id)
        except ValueError:
            return None
        needs_save = False
        for log in exercise["log"]:
            if not log.get("date"):
                log["date"] = _now()
                needs_save = True
        if needs_save:
            await self.store.save(workouts)
        return exercise

    async def list_for_muscle_group(self, group_id: str) -> list[dict]:
        workouts = await self.store.load()
        try:
            return _find_group(workouts, group_id)["exercises"]
        except ValueError:
            return []

    async def add_exercise(self, group_id: str, title: str) -> dict:
        workouts = await self.store.load()
        group = _find_group(workouts, group_id)
        exercise = {
            "id": str(uuid.uuid4()),
            "muscleGroupId": group_id,
            "title": clean_title(title),
            "log": [],
        }
        group["exercises"].append(exercise)
        await self.store.save(workouts)
        return exercise

    async def update_exercise(self, exercise_id: str, title: str) -> dict:
        workouts = await self.store.load()
        _group, exercise = _find_exercise(workouts, exercise_id)
        exercise["title"] = clean_title(title)
        await self.store.save(workouts)
        return exercise

    async def delete_exercise(self, exercise_id: str) -> None:
        workouts = await self.store.load()
        group, _exercise = _find_exercise(workouts, exercise_id)
        group["exercises"] = [e for e in group["exercises"] if e["id"] != exercise_id]
        await self.store.save(workouts)

    async def reorder_exercises(self, group_id: str, order: list[str]) -> None:
        workouts = await self.store.load()
        group = _find_group(workouts, group_id)
        group["exercises"] = reordered(group["exercises"], order)
        await self.store.save(workouts)

    async def clear_all(self, group_id: str) -> None:
        workouts = await self.store.load()
        _find_group(workouts, group_id)["exercises"] = []
        await self.store.save(workouts)


class LogService:
    """Record sets logged against an exercise."""

    def __init__(self, store: WorkoutStore) -> None:
        self.store = store

    async def add_log(
        self, exercise_id: str, reps: int, weight: float, date: str | None = None
    ) -> str:
        _check_log(reps, weight)
        workouts = await self.store.load()
        _group, exercise = _find_exercise(workouts, exercise_id)
        log_id = str(uuid.uuid4())
        exercise["log"].append(
            {
                "id": log_id,
                "numberReps": reps,
                "maxWeight": float(weight),
                "date": date or _now(),
            }
        )
        await self.store.save(workouts)
        return log_id

    async def update_log(
        self, exercise_id: str, log_id: str, reps: int, weight: float
    ) -> None:
        _check_log(reps, weight)
        workouts = await self.store.load()
        _group, exercise = _find_exercise(workouts, exercise_id)
        for log in exercise["log"]:
            if log["id"] == log_id:
                log["numberReps"] = reps
                log["maxWeight"] = float(weight)
                break
        else:
            raise ValueError("log not found")
        await self.store.save(workouts)

    async def delete_log(self, exercise_id: str, log_id: str) -> None:
        workouts = await self.store.load()
        _group, exercise = _find_exercise(workouts, exercise_id)
        exercise["log"] = [log for log in exercise["log"] if log["id"] != log_id]
        await self.store.save(workouts)

    async def clear_all_logs(self, exercise_id: str) -> None:
        workouts = await self.store.load()
        _group, exercise = _find_exercise(workouts, exercise_id)
        exercise["log"] = []
        await self.store.save(workouts)
