"""Daily and weekly plan orchestration."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from nutrition_planner.domain.foods import Food
from nutrition_planner.domain.nutrition import MacroTargets
from nutrition_planner.domain.plans import WEEK_DAYS, DayPlan, MealPlan, WeeklyMealPlan
from nutrition_planner.domain.profile import DietaryPreferences, UserProfile
from nutrition_planner.services.catalog import FoodCatalogRepository, filter_safe_foods
from nutrition_planner.services.energy import BmrFormula, calculate_energy
from nutrition_planner.services.macros import distribute_macros
from nutrition_planner.services.optimizer import MAX_FOODS_PER_MEAL, build_day
from nutrition_planner.services.recommendations import (
    RecommendationService,
    build_recommendations,
)
from nutrition_planner.services.scoring import rank_foods
from nutrition_planner.services.timing import adjust_for_training, workout_slots
from nutrition_planner.services.validation import (
    DEFAULT_TOLERANCE,
    validate_plan,
    validate_weekly_plan,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanOptions:
    """Tunables for a single optimization run."""

    bmr_formula: BmrFormula = BmrFormula.MIFFLIN_ST_JEOR
    tolerance: float = DEFAULT_TOLERANCE
    max_foods_per_meal: int = MAX_FOODS_PER_MEAL
    renormalize_timing: bool = True
    validate: bool = True


def build_targets(
    profile: UserProfile, formula: BmrFormula = BmrFormula.MIFFLIN_ST_JEOR
) -> MacroTargets:
    """Derive daily calorie and macro targets for a profile."""
    energy = calculate_energy(profile, formula)
    return distribute_macros(energy.target_calories, profile.goal, profile.weight_kg)


def optimize_day(
    profile: UserProfile,
    preferences: DietaryPreferences,
    foods: Sequence[Food],
    options: PlanOptions = PlanOptions(),
    previous_day: MealPlan | None = None,
) -> MealPlan:
    """Build, adjust and validate one day of meals.

    ``previous_day`` pushes its foods to the back of each slot's candidates.
    """
    targets = build_targets(profile, options.bmr_formula)
    safe_foods = filter_safe_foods(foods, preferences)
    ranked = rank_foods(
        safe_foods,
        profile.goal,
        preferences.liked_food_ids,
        preferences.disliked_food_ids,
    )
    pre_slot, post_slot = workout_slots(preferences.training_time)
    meals = build_day(
        ranked,
        targets,
        pre_workout_slot=pre_slot,
        post_workout_slot=post_slot,
        recent_picks=previous_day.food_ids() if previous_day else None,
        max_foods=options.max_foods_per_meal,
    )
    plan = MealPlan(
        meals=meals,
        targets=targets,
        recommendations=build_recommendations(profile.goal, preferences.training_time),
    )
    plan = adjust_for_training(
        plan, preferences.training_time, renormalize=options.renormalize_timing
    )
    if options.validate:
        validate_plan(plan.to_payload(), targets, options.tolerance)
    _logger.info(
        "Built daily plan: target_kcal=%.0f total_kcal=%.0f candidates=%s",
        targets.calories,
        plan.total_nutrition.calories,
        len(safe_foods),
    )
    return plan


def optimize_week(
    profile: UserProfile,
    preferences: DietaryPreferences,
    foods: Sequence[Food],
    options: PlanOptions = PlanOptions(),
) -> WeeklyMealPlan:
    """Build seven days, varying each slot against the day before."""
    day_options = replace(options, validate=False)
    days: list[DayPlan] = []
    previous: MealPlan | None = None
    for day_name in WEEK_DAYS:
        plan = optimize_day(profile, preferences, foods, day_options, previous)
        days.append(DayPlan(day_name=day_name, plan=plan))
        previous = plan
    weekly = WeeklyMealPlan(
        days=tuple(days),
        targets=days[0].plan.targets,
        recommendations=days[0].plan.recommendations,
    )
    if options.validate:
        validate_weekly_plan(weekly.to_payload(), weekly.targets, options.tolerance)
    return weekly


@dataclass
class MealPlanService:
    """Service that loads the catalog and produces narrated plans."""

    catalog: FoodCatalogRepository
    recommendation_service: RecommendationService | None = None
    options: PlanOptions = field(default_factory=PlanOptions)

    async def generate_day(
        self,
        profile: UserProfile,
        preferences: DietaryPreferences,
        foods: list[Food] | None = None,
    ) -> MealPlan:
        """Generate a daily plan from inline foods or the catalog."""
        plan = optimize_day(profile, preferences, self._foods(foods), self.options)
        if self.recommendation_service is None:
            return plan
        recommendations = await self.recommendation_service.narrate(
            plan.recommendations, plan.to_payload(), profile, preferences
        )
        return replace(plan, recommendations=recommendations)

    async def generate_week(
        self,
        profile: UserProfile,
        preferences: DietaryPreferences,
        foods: list[Food] | None = None,
    ) -> WeeklyMealPlan:
        """Generate a weekly plan from inline foods or the catalog."""
        weekly = optimize_week(profile, preferences, self._foods(foods), self.options)
        if self.recommendation_service is None:
            return weekly
        recommendations = await self.recommendation_service.narrate(
            weekly.recommendations, weekly.days[0].plan.to_payload(), profile, preferences
        )
        return replace(weekly, recommendations=recommendations)

    def _foods(self, foods: list[Food] | None) -> list[Food]:
        if foods is not None:
            return foods
        catalog_foods = self.catalog.list_foods()
        _logger.info("Loaded %s foods from catalog", len(catalog_foods))
        return catalog_foods
