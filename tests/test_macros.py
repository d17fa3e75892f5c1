"""Tests for macro distribution."""

import pytest

from nutrition_planner.domain.errors import InvalidBiometricsError, InvalidGoalError
from nutrition_planner.domain.profile import Goal
from nutrition_planner.services.macros import distribute_macros


def test_lose_scenario() -> None:
    targets = distribute_macros(2127, "lose", 70)
    assert targets.protein_g == 154
    assert targets.carbs_g == 232
    assert targets.fats_g == 65
    assert targets.fiber_g == 30


def test_maintain_scenario() -> None:
    targets = distribute_macros(2627, Goal.MAINTAIN, 70)
    assert targets.protein_g == 126
    assert targets.carbs_g == 341
    assert targets.fats_g == 84
    assert targets.fiber_g == 37


def test_small_budget_caps_protein() -> None:
    targets = distribute_macros(1000, "gain", 120)
    assert targets.protein_g == 100
    assert targets.carbs_g > 0
    assert targets.fats_g > 0


@pytest.mark.parametrize("goal", list(Goal))
@pytest.mark.parametrize("calories", [1200, 1695, 2127, 2627, 3500])
def test_macro_calories_close_to_budget(goal: Goal, calories: int) -> None:
    targets = distribute_macros(calories, goal, 70)
    assert abs(targets.macro_calories() - calories) <= calories * 0.05
    assert min(targets.protein_g, targets.carbs_g, targets.fats_g) >= 0


def test_unknown_goal_rejected() -> None:
    with pytest.raises(InvalidGoalError):
        distribute_macros(2000, "cut", 70)


def test_non_positive_inputs_rejected() -> None:
    with pytest.raises(InvalidBiometricsError):
        distribute_macros(0, "maintain", 70)
    with pytest.raises(InvalidBiometricsError):
        distribute_macros(2000, "maintain", -1)
