"""Daily energy expenditure calculations.

Two basal metabolic rate formulas are supported:

- Mifflin-St Jeor (default)
    Male:   10 x weight(kg) + 6.25 x height(cm) - 5 x age(y) + 5
    Female: 10 x weight(kg) + 6.25 x height(cm) - 5 x age(y) - 161
- Harris-Benedict (original 1919 coefficients)
    Male:   66 + 13.7 x weight(kg) + 5 x height(cm) - 6.8 x age(y)
    Female: 655 + 9.6 x weight(kg) + 1.8 x height(cm) - 4.7 x age(y)

TDEE is BMR times an activity factor, then shifted by a fixed goal offset.
"""

from enum import StrEnum

from nutrition_planner.domain.errors import InvalidBiometricsError
from nutrition_planner.domain.nutrition import EnergyBreakdown
from nutrition_planner.domain.profile import (
    ActivityLevel,
    Goal,
    Sex,
    UserProfile,
    parse_activity_level,
    parse_goal,
)


class BmrFormula(StrEnum):
    """Supported basal metabolic rate formulas."""

    MIFFLIN_ST_JEOR = "mifflin_st_jeor"
    HARRIS_BENEDICT = "harris_benedict"


ACTIVITY_FACTORS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.INTENSE: 1.9,
}

GOAL_CALORIE_OFFSETS: dict[Goal, int] = {
    Goal.LOSE: -500,
    Goal.MAINTAIN: 0,
    Goal.GAIN: 500,
}


def calculate_bmr(
    profile: UserProfile, formula: BmrFormula = BmrFormula.MIFFLIN_ST_JEOR
) -> float:
    """Calculate basal metabolic rate in kcal/day."""
    _check_biometrics(profile)
    weight, height, age = profile.weight_kg, profile.height_cm, profile.age
    male = profile.sex == Sex.MALE
    if BmrFormula(formula) == BmrFormula.HARRIS_BENEDICT:
        if male:
            return 66 + 13.7 * weight + 5 * height - 6.8 * age
        return 655 + 9.6 * weight + 1.8 * height - 4.7 * age
    bmr = 10 * weight + 6.25 * height - 5 * age
    return bmr + 5 if male else bmr - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel | str) -> float:
    """Scale basal calories by the activity factor."""
    level = parse_activity_level(activity_level)
    return bmr * ACTIVITY_FACTORS[level]


def adjust_for_goal(calories: float, goal: Goal | str) -> float:
    """Apply the fixed deficit or surplus for a goal."""
    return calories + GOAL_CALORIE_OFFSETS[parse_goal(goal)]


def calculate_energy(
    profile: UserProfile, formula: BmrFormula = BmrFormula.MIFFLIN_ST_JEOR
) -> EnergyBreakdown:
    """Compute BMR, TDEE and the goal-adjusted daily calorie target."""
    bmr = calculate_bmr(profile, formula)
    tdee = calculate_tdee(bmr, profile.activity_level)
    target = round(adjust_for_goal(tdee, profile.goal))
    if target <= 0:
        raise InvalidBiometricsError(
            f"Biometrics produce a non-positive calorie target ({target} kcal)"
        )
    return EnergyBreakdown(bmr=bmr, tdee=tdee, target_calories=target)


def calculate_target_calories(
    profile: UserProfile, formula: BmrFormula = BmrFormula.MIFFLIN_ST_JEOR
) -> int:
    """Return the goal-adjusted daily calorie target rounded to whole kcal."""
    return calculate_energy(profile, formula).target_calories


def _check_biometrics(profile: UserProfile) -> None:
    for name in ("weight_kg", "height_cm", "age"):
        value = getattr(profile, name)
        if not isinstance(value, int | float) or value <= 0:
            raise InvalidBiometricsError(f"{name} must be positive, got {value!r}")
