"""Output-contract validation for assembled plans.

Validation is a gate, not a repair step: every problem found is reported as a
Violation addressed by its dotted field path, and the plan is left untouched.
"""

import logging
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nutrition_planner.domain.errors import PlanValidationError, Violation
from nutrition_planner.domain.nutrition import MacroTargets
from nutrition_planner.domain.plans import WEEK_DAYS

DEFAULT_TOLERANCE = 0.10
# Meal aggregates are rounded to 0.1 g and whole kcal, so sums may drift.
SUM_TOLERANCE = 1.0
TIMING_NOTES = 5

_logger = logging.getLogger(__name__)


class NutrientsSchema(BaseModel):
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)
    fiber: float = Field(ge=0)


class MacroSchema(BaseModel):
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)
    fiber: float = Field(ge=0)


class FoodEntrySchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = Field(min_length=1)
    portion: float = Field(gt=0)
    unit: str = Field(min_length=1)
    details: str = Field(min_length=1)
    calculated_nutrients: NutrientsSchema | None = Field(
        default=None, alias="calculatedNutrients"
    )


class MealSchema(BaseModel):
    foods: list[FoodEntrySchema] = Field(min_length=1)
    calories: float = Field(ge=0)
    macros: MacroSchema
    description: str | None = None


class DailyPlanSchema(BaseModel):
    """The five required meal slots."""

    model_config = ConfigDict(populate_by_name=True)

    breakfast: MealSchema
    morning_snack: MealSchema = Field(alias="morningSnack")
    lunch: MealSchema
    afternoon_snack: MealSchema = Field(alias="afternoonSnack")
    dinner: MealSchema

    def meals(self) -> list[MealSchema]:
        return [
            self.breakfast,
            self.morning_snack,
            self.lunch,
            self.afternoon_snack,
            self.dinner,
        ]


class RecommendationsSchema(BaseModel):
    general: str
    preworkout: str
    postworkout: str
    timing: list[str] = Field(min_length=TIMING_NOTES, max_length=TIMING_NOTES)
    substitutions: list[str] | None = None


class MealPlanSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    daily_plan: DailyPlanSchema = Field(alias="dailyPlan")
    total_nutrition: NutrientsSchema = Field(alias="totalNutrition")
    recommendations: RecommendationsSchema


class DaySchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_name: str = Field(alias="dayName")
    daily_plan: DailyPlanSchema = Field(alias="dailyPlan")
    total_nutrition: NutrientsSchema = Field(alias="totalNutrition")


class WeeklyPlanSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weekly_plan: dict[str, DaySchema] = Field(alias="weeklyPlan")
    recommendations: RecommendationsSchema


def validate_plan(
    payload: Mapping[str, object],
    targets: MacroTargets,
    tolerance: float = DEFAULT_TOLERANCE,
) -> MealPlanSchema:
    """Check a daily plan payload against the schema and the macro targets.

    Raises PlanValidationError listing every violated path.
    """
    violations: list[Violation] = []
    parsed = _parse(MealPlanSchema, payload, violations)
    violations.extend(
        _tolerance_violations(
            payload.get("totalNutrition"), targets, tolerance, "totalNutrition"
        )
    )
    if parsed is not None:
        violations.extend(
            _sum_violations(parsed.daily_plan, parsed.total_nutrition, "totalNutrition")
        )
    if violations:
        _logger.info("Plan rejected with %s violation(s)", len(violations))
        raise PlanValidationError(violations)
    return parsed


def validate_weekly_plan(
    payload: Mapping[str, object],
    targets: MacroTargets,
    tolerance: float = DEFAULT_TOLERANCE,
) -> WeeklyPlanSchema:
    """Check every day of a weekly plan payload; paths are prefixed by day."""
    violations: list[Violation] = []
    parsed = _parse(WeeklyPlanSchema, payload, violations)
    days = payload.get("weeklyPlan")
    if isinstance(days, Mapping):
        for day in WEEK_DAYS:
            if day not in days:
                violations.append(Violation(f"weeklyPlan.{day}", "Day is missing"))
        for name, day_payload in days.items():
            if isinstance(day_payload, Mapping):
                violations.extend(
                    _tolerance_violations(
                        day_payload.get("totalNutrition"),
                        targets,
                        tolerance,
                        f"weeklyPlan.{name}.totalNutrition",
                    )
                )
    if parsed is not None:
        for name, day_schema in parsed.weekly_plan.items():
            violations.extend(
                _sum_violations(
                    day_schema.daily_plan,
                    day_schema.total_nutrition,
                    f"weeklyPlan.{name}.totalNutrition",
                )
            )
    if violations:
        _logger.info("Weekly plan rejected with %s violation(s)", len(violations))
        raise PlanValidationError(violations)
    return parsed


def _parse(
    model: type[BaseModel],
    payload: Mapping[str, object],
    violations: list[Violation],
) -> BaseModel | None:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        for error in exc.errors():
            path = ".".join(str(part) for part in error["loc"])
            violations.append(Violation(path=path, message=error["msg"]))
        return None


def _tolerance_violations(
    totals: object, targets: MacroTargets, tolerance: float, prefix: str
) -> list[Violation]:
    if not isinstance(totals, Mapping):
        return []
    violations: list[Violation] = []
    bounded = {
        "protein": targets.protein_g,
        "carbs": targets.carbs_g,
        "fats": targets.fats_g,
    }
    for key, target in bounded.items():
        actual = totals.get(key)
        if not isinstance(actual, int | float) or target <= 0:
            continue
        low, high = target * (1 - tolerance), target * (1 + tolerance)
        if not low <= actual <= high:
            violations.append(
                Violation(
                    f"{prefix}.{key}",
                    f"{actual:g} g is outside {low:.1f}-{high:.1f} g",
                )
            )
    fiber = totals.get("fiber")
    if isinstance(fiber, int | float) and fiber < targets.fiber_g:
        violations.append(
            Violation(
                f"{prefix}.fiber",
                f"{fiber:g} g is below the {targets.fiber_g:g} g target",
            )
        )
    return violations


def _sum_violations(
    daily_plan: DailyPlanSchema, totals: NutrientsSchema, prefix: str
) -> list[Violation]:
    meals = daily_plan.meals()
    sums = {
        "calories": sum(meal.calories for meal in meals),
        "protein": sum(meal.macros.protein for meal in meals),
        "carbs": sum(meal.macros.carbs for meal in meals),
        "fats": sum(meal.macros.fats for meal in meals),
        "fiber": sum(meal.macros.fiber for meal in meals),
    }
    violations: list[Violation] = []
    for key, expected in sums.items():
        actual = getattr(totals, key)
        if abs(actual - expected) > SUM_TOLERANCE:
            violations.append(
                Violation(
                    f"{prefix}.{key}",
                    f"Total {actual:g} does not match the sum of meals {expected:g}",
                )
            )
    return violations
