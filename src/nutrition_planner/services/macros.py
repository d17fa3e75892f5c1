"""Split a calorie budget into macro targets."""

from nutrition_planner.domain.errors import InvalidBiometricsError
from nutrition_planner.domain.nutrition import CALORIES_PER_GRAM, MacroTargets
from nutrition_planner.domain.profile import Goal, parse_goal

PROTEIN_PER_KG: dict[Goal, float] = {
    Goal.LOSE: 2.2,
    Goal.MAINTAIN: 1.8,
    Goal.GAIN: 2.0,
}

# Goal carb/fat percentages; calories left after protein are split in this ratio.
CARB_FAT_SHARES: dict[Goal, dict[str, float]] = {
    Goal.LOSE: {"carbs": 0.40, "fats": 0.25},
    Goal.MAINTAIN: {"carbs": 0.45, "fats": 0.25},
    Goal.GAIN: {"carbs": 0.50, "fats": 0.20},
}

FIBER_PER_1000_KCAL = 14
MAX_PROTEIN_SHARE = 0.40


def distribute_macros(
    calories: float, goal: Goal | str, weight_kg: float
) -> MacroTargets:
    """Return protein/carbs/fats/fiber targets in grams for a calorie budget.

    Protein is anchored to body weight (capped at 40% of calories), the rest
    of the budget goes to carbs and fats in the goal's ratio, and fiber
    follows 14 g per 1000 kcal.
    """
    resolved_goal = parse_goal(goal)
    if calories <= 0:
        raise InvalidBiometricsError(f"Calorie budget must be positive, got {calories}")
    if weight_kg <= 0:
        raise InvalidBiometricsError(f"weight_kg must be positive, got {weight_kg}")

    protein_cap_g = calories * MAX_PROTEIN_SHARE / CALORIES_PER_GRAM["protein"]
    protein_g = round(min(weight_kg * PROTEIN_PER_KG[resolved_goal], protein_cap_g))
    remaining = calories - protein_g * CALORIES_PER_GRAM["protein"]

    shares = CARB_FAT_SHARES[resolved_goal]
    carb_ratio = shares["carbs"] / (shares["carbs"] + shares["fats"])
    carbs_g = round(remaining * carb_ratio / CALORIES_PER_GRAM["carbs"])
    fats_g = round(remaining * (1 - carb_ratio) / CALORIES_PER_GRAM["fats"])

    return MacroTargets(
        calories=calories,
        protein_g=float(protein_g),
        carbs_g=float(max(carbs_g, 0)),
        fats_g=float(max(fats_g, 0)),
        fiber_g=float(round(calories / 1000 * FIBER_PER_1000_KCAL)),
    )
