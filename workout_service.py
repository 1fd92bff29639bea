import uuid
from typing import Iterable, Optional

from db import WorkoutStore

TEMP_USER_PREFIX = "temp-user-"


def reordered(items: list, order: list[str]) -> list:
    by_id = {item["id"]: item for item in items}
    if len(order) != len(items) or set(order) != set(by_id):
        raise ValueError("invalid order")
    return [by_id[i] for i in order]


def clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise ValueError("title must not be empty")
    return title


class WorkoutService:
    """Create and edit workouts, the top level of the collection."""

    def __init__(self, store: WorkoutStore) -> None:
        self.store = store

    async def list_workouts(self) -> list[dict]:
        return await self.store.load()

    async def get_workout(self, workout_id: str) -> Optional[dict]:
        for workout in await self.store.load():
            if workout["id"] == workout_id:
                return workout
        return None

    async def add_workout(self, title: str, date: str, user_id: str) -> dict:
        workouts = await self.store.load()
        workout = {
            "id": str(uuid.uuid4()),
            "title": clean_title(title),
            "date": date,
            "userId": user_id,
            "muscleGroup": [],
        }
        workouts.append(workout)
        await self.store.save(workouts)
        return workout

    async def update_workout(
        self, workout_id: str, title: str | None = None, date: str | None = None
    ) -> dict:
        workouts = await self.store.load()
        for workout in workouts:
            if workout["id"] == workout_id:
                if title is not None:
                    workout["title"] = clean_title(title)
                if date is not None:
                    workout["date"] = date
                await self.store.save(workouts)
                return workout
        raise ValueError("workout not found")

    async def delete_workout(self, workout_id: str) -> None:
        workouts = await self.store.load()
        remaining = [w for w in workouts if w["id"] != workout_id]
        if len(remaining) == len(workouts):
            raise ValueError("workout not found")
        await self.store.save(remaining)

    async def reorder_workouts(self, order: list[str]) -> None:
        workouts = await self.store.load()
        await self.store.save(reordered(workouts, order))

    async def clear_all(self) -> None:
        await self.store.clear()

    async def reassign_temporary_users(self, user_id: str) -> int:
        """Give workouts created before sign-in to ``user_id``."""
        workouts = await self.store.load()
        changed = 0
        for workout in workouts:
            if str(workout.get("userId", "")).startswith(TEMP_USER_PREFIX):
                workout["userId"] = user_id
                changed += 1
        if changed:
            await self.store.save(workouts)
        return changed


class MuscleGroupService:
    """Manage the muscle groups nested in each workout."""

    def __init__(self, store: WorkoutStore) -> None:
        self.store = store

    @staticmethod
    def _find_workout(workouts: list, workout_id: str) -> dict:
        for workout in workouts:
            if workout["id"] == workout_id:
                return workout
        raise ValueError("workout not found")

    @staticmethod
    def _find_group(workouts: list, group_id: str) -> tuple[dict, dict]:
        for workout in workouts:
            for group in workout["muscleGroup"]:
                if group["id"] == group_id:
                    return workout, group
        raise ValueError("muscle group not found")

    async def list_for_workout(self, workout_id: str) -> list[dict]:
        workouts = await self.store.load()
        for workout in workouts:
            if workout["id"] == workout_id:
                return workout["muscleGroup"]
        return []

    async def add_muscle_group(
        self,
        workout_id: str,
        title: str,
        date: str,
        exercise_titles: Iterable[str] = (),
    ) -> dict:
        workouts = await self.store.load()
        workout = self._find_workout(workouts, workout_id)
        group_id = str(uuid.uuid4())
        group = {
            "id": group_id,
            "workoutId": workout_id,
            "title": clean_title(title),
            "date": date,
            "exercises": [
                {
                    "id": str(uuid.uuid4()),
                    "muscleGroupId": group_id,
                    "title": clean_title(t),
                    "log": [],
                }
                for t in exercise_titles
            ],
        }
        workout["muscleGroup"].append(group)
        await self.store.save(workouts)
        return group

    async def update_muscle_group(
        self, group_id: str, title: str | None = None, date: str | None = None
    ) -> dict:
        workouts = await self.store.load()
        _workout, group = self._find_group(workouts, group_id)
        if title is not None:
            group["title"] = clean_title(title)
        if date is not None:
            group["date"] = date
        await self.store.save(workouts)
        return group

    async def delete_muscle_group(self, group_id: str) -> None:
        workouts = await self.store.load()
        workout, _group = self._find_group(workouts, group_id)
        workout["muscleGroup"] = [
            g for g in workout["muscleGroup"] if g["id"] != group_id
        ]
        await self.store.save(workouts)

    async def reorder_muscle_groups(self, workout_id: str, order: list[str]) -> None:
        workouts = await self.store.load()
        workout = self._find_workout(workouts, workout_id)
        workout["muscleGroup"] = reordered(workout["muscleGroup"], order)
        await self.store.save(workouts)

    async def clear_all(self, workout_id: str) -> None:
        workouts = await self.store.load()
        self._find_workout(workouts, workout_id)["muscleGroup"] = []
        await self.store.save(workouts)
