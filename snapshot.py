"""Structural validation of serialized workout collections.

Only the top-level workout shape is checked. Muscle groups, exercises and
logs nested below a workout are accepted as-is.
"""

import json
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError


class WorkoutShape(BaseModel):
    model_config = ConfigDict(strict=True, extra="allow")

    id: str
    title: str
    date: str
    muscleGroup: list


@dataclass(frozen=True)
class Valid:
    workouts: list


@dataclass(frozen=True)
class Invalid:
    reason: str


ParseResult = Union[Valid, Invalid]


def parse_snapshot(value: Any) -> ParseResult:
    """Return ``Valid`` when ``value`` is a list of workout-shaped objects."""
    if not isinstance(value, list):
        return Invalid(f"expected a list, got {type(value).__name__}")
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            return Invalid(f"item {index} is not an object")
        try:
            WorkoutShape.model_validate(item)
        except ValidationError as e:
            err = e.errors()[0]
            field = ".".join(str(p) for p in err["loc"]) or "item"
            return Invalid(f"item {index}: {field}: {err['msg']}")
    return Valid(value)


def decode_snapshot(text: str) -> ParseResult:
    try:
        value = json.loads(text)
    except (ValueError, RecursionError) as e:
        return Invalid(f"malformed JSON: {e}")
    return parse_snapshot(value)


def is_valid_snapshot(value: Any) -> bool:
    return isinstance(parse_snapshot(value), Valid)
