"""Nutritional-fit scoring and ranking of candidate foods."""

from collections.abc import Iterable
from dataclasses import dataclass

from nutrition_planner.domain.foods import Food
from nutrition_planner.domain.profile import Goal, parse_goal

LIKED_BONUS = 2.0
DISLIKED_PENALTY = 3.0
MICRONUTRIENT_WEIGHT = 0.2
LOW_GLYCEMIC_INDEX = 55

_CATEGORY_BONUSES = {
    "vegetables": 1.0,
    "protein": 1.0,
    "healthy_fats": 1.0,
    "carbs_complex": 1.0,
}


@dataclass(frozen=True)
class ScoredFood:
    """A food with its suitability score and catalog position."""

    food: Food
    score: float
    position: int


def score_food(
    food: Food,
    goal: Goal | str,
    liked_ids: Iterable[str] = (),
    disliked_ids: Iterable[str] = (),
) -> float:
    """Return an unbounded suitability score; higher is better."""
    resolved_goal = parse_goal(goal)
    score = 0.0

    if food.protein_g > 0:
        score += 2
    if food.fiber_g > 0:
        score += 1
    score += MICRONUTRIENT_WEIGHT * len(food.micronutrients)
    score += sum(
        bonus for category, bonus in _CATEGORY_BONUSES.items()
        if category in food.categories
    )

    if resolved_goal == Goal.LOSE:
        if food.fiber_g > 3:
            score += 2
        if food.glycemic_index is not None and food.glycemic_index < LOW_GLYCEMIC_INDEX:
            score += 2
        if food.protein_density > 0.4:
            score += 2
    elif resolved_goal == Goal.GAIN:
        if food.calories > 200:
            score += 1
        if food.protein_g > 20:
            score += 2
        if food.carb_density > 0.5:
            score += 1
    else:
        if food.fiber_g > 2:
            score += 1
        if food.protein_density > 0.6:
            score += 1

    if food.id in set(liked_ids):
        score += LIKED_BONUS
    if food.id in set(disliked_ids):
        score -= DISLIKED_PENALTY
    return score


def rank_foods(
    foods: Iterable[Food],
    goal: Goal | str,
    liked_ids: Iterable[str] = (),
    disliked_ids: Iterable[str] = (),
) -> list[ScoredFood]:
    """Score foods and order them by descending score.

    The sort is stable, so equal scores keep catalog order.
    """
    liked = frozenset(liked_ids)
    disliked = frozenset(disliked_ids)
    scored = [
        ScoredFood(food=food, score=score_food(food, goal, liked, disliked), position=index)
        for index, food in enumerate(foods)
    ]
    return sorted(scored, key=lambda item: -item.score)
