"""Tests for plan validation."""

import pytest

from nutrition_planner.domain.errors import PlanValidationError
from nutrition_planner.domain.nutrition import MacroTargets
from nutrition_planner.domain.profile import DietaryPreferences, UserProfile
from nutrition_planner.services.planner import PlanOptions, optimize_day, optimize_week
from nutrition_planner.services.validation import validate_plan, validate_weekly_plan


@pytest.fixture
def payload(profile: UserProfile, foods) -> dict[str, object]:
    plan = optimize_day(profile, DietaryPreferences(), foods, PlanOptions(validate=False))
    return plan.to_payload()


def _matching_targets(payload: dict[str, object]) -> MacroTargets:
    totals = payload["totalNutrition"]
    return MacroTargets(
        calories=totals["calories"],
        protein_g=totals["protein"],
        carbs_g=totals["carbs"],
        fats_g=totals["fats"],
        fiber_g=totals["fiber"],
    )


def test_accepts_plan_within_tolerance(payload: dict[str, object]) -> None:
    targets = _matching_targets(payload)
    scaled = MacroTargets(
        calories=targets.calories,
        protein_g=targets.protein_g * 1.05,
        carbs_g=targets.carbs_g * 0.95,
        fats_g=targets.fats_g * 1.08,
        fiber_g=targets.fiber_g - 1,
    )
    parsed = validate_plan(payload, scaled)
    assert parsed.daily_plan.lunch.foods
    assert len(parsed.recommendations.timing) == 5


def test_missing_slot_reports_its_path(payload: dict[str, object]) -> None:
    del payload["dailyPlan"]["lunch"]
    with pytest.raises(PlanValidationError) as exc_info:
        validate_plan(payload, _matching_targets(payload))
    assert "dailyPlan.lunch" in exc_info.value.paths


def test_reports_every_violation(payload: dict[str, object]) -> None:
    targets = _matching_targets(payload)
    off_targets = MacroTargets(
        calories=targets.calories,
        protein_g=targets.protein_g * 2,
        carbs_g=targets.carbs_g,
        fats_g=targets.fats_g * 0.5,
        fiber_g=targets.fiber_g + 10,
    )
    payload["dailyPlan"]["breakfast"]["foods"][0]["name"] = ""
    payload["recommendations"]["timing"] = ["Eat well"]
    with pytest.raises(PlanValidationError) as exc_info:
        validate_plan(payload, off_targets)
    paths = exc_info.value.paths
    assert "dailyPlan.breakfast.foods.0.name" in paths
    assert "recommendations.timing" in paths
    assert "totalNutrition.protein" in paths
    assert "totalNutrition.fats" in paths
    assert "totalNutrition.fiber" in paths
    assert "totalNutrition.carbs" not in paths


def test_negative_values_rejected(payload: dict[str, object]) -> None:
    payload["dailyPlan"]["dinner"]["macros"]["fats"] = -1
    with pytest.raises(PlanValidationError) as exc_info:
        validate_plan(payload, _matching_targets(payload))
    assert exc_info.value.paths == ["dailyPlan.dinner.macros.fats"]


def test_total_must_match_sum_of_meals(payload: dict[str, object]) -> None:
    targets = _matching_targets(payload)
    payload["dailyPlan"]["dinner"]["calories"] += 150
    with pytest.raises(PlanValidationError) as exc_info:
        validate_plan(payload, targets)
    assert exc_info.value.paths == ["totalNutrition.calories"]


def test_weekly_plan_paths_are_prefixed_by_day(profile: UserProfile, foods) -> None:
    weekly = optimize_week(profile, DietaryPreferences(), foods, PlanOptions(validate=False))
    payload = weekly.to_payload()
    lenient = MacroTargets(calories=1, protein_g=1, carbs_g=1, fats_g=1, fiber_g=0)
    validate_weekly_plan(payload, lenient, tolerance=1000)

    del payload["weeklyPlan"]["friday"]
    payload["weeklyPlan"]["monday"]["dailyPlan"]["breakfast"]["foods"] = []
    with pytest.raises(PlanValidationError) as exc_info:
        validate_weekly_plan(payload, lenient, tolerance=1000)
    assert "weeklyPlan.friday" in exc_info.value.paths
    assert "weeklyPlan.monday.dailyPlan.breakfast.foods" in exc_info.value.paths
