"""Domain models describing the person a plan is built for."""

from dataclasses import dataclass
from enum import StrEnum

from nutrition_planner.domain.errors import InvalidBiometricsError, InvalidGoalError


class Sex(StrEnum):
    """Biological sex used by the basal metabolic rate formulas."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Daily activity level, ordered from least to most active."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    INTENSE = "intense"


class Goal(StrEnum):
    """Body composition goal."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


_GOAL_ALIASES = {
    "lose_weight": Goal.LOSE,
    "weight_loss": Goal.LOSE,
    "gain_weight": Goal.GAIN,
    "gain_mass": Goal.GAIN,
}

_ACTIVITY_ALIASES = {
    "lightly_active": ActivityLevel.LIGHT,
    "moderately_active": ActivityLevel.MODERATE,
    "very_active": ActivityLevel.INTENSE,
}


@dataclass(frozen=True)
class UserProfile:
    """Biometric input to a single optimization run."""

    weight_kg: float
    height_cm: float
    age: int
    sex: Sex
    activity_level: ActivityLevel
    goal: Goal


@dataclass(frozen=True)
class DietaryPreferences:
    """Food constraints and likes attached to a plan request."""

    allergies: frozenset[str] = frozenset()
    dietary_restrictions: frozenset[str] = frozenset()
    liked_food_ids: frozenset[str] = frozenset()
    disliked_food_ids: frozenset[str] = frozenset()
    training_time: str | None = None


def parse_goal(value: Goal | str) -> Goal:
    """Return the goal for a raw value, accepting legacy aliases."""
    if isinstance(value, Goal):
        return value
    key = str(value).strip().lower()
    if key in _GOAL_ALIASES:
        return _GOAL_ALIASES[key]
    try:
        return Goal(key)
    except ValueError:
        raise InvalidGoalError(f"Unrecognized goal: {value!r}") from None


def parse_activity_level(value: ActivityLevel | str) -> ActivityLevel:
    """Return the activity level for a raw value."""
    if isinstance(value, ActivityLevel):
        return value
    key = str(value).strip().lower()
    if key in _ACTIVITY_ALIASES:
        return _ACTIVITY_ALIASES[key]
    try:
        return ActivityLevel(key)
    except ValueError:
        raise InvalidBiometricsError(
            f"Unrecognized activity level: {value!r}"
        ) from None


def parse_sex(value: Sex | str) -> Sex:
    """Return the biological sex for a raw value."""
    if isinstance(value, Sex):
        return value
    try:
        return Sex(str(value).strip().lower())
    except ValueError:
        raise InvalidBiometricsError(f"Unrecognized sex: {value!r}") from None


def normalize_tag(value: str) -> str:
    """Lowercase a free-form tag and join its words with underscores."""
    return "_".join(value.strip().lower().replace("-", " ").split())
