"""Domain models for the food catalog."""

from dataclasses import dataclass

from nutrition_planner.domain.nutrition import Nutrients

PROTEIN_CATEGORY = "protein"


@dataclass(frozen=True)
class Food:
    """A read-only catalog entry; nutrients are per reference serving."""

    id: str
    name: str
    serving_size: float
    serving_unit: str
    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    fiber_g: float = 0.0
    allergens: frozenset[str] = frozenset()
    dietary_tags: frozenset[str] = frozenset()
    meal_types: frozenset[str] = frozenset()
    categories: frozenset[str] = frozenset()
    micronutrients: frozenset[str] = frozenset()
    pre_workout_compatible: bool = False
    post_workout_compatible: bool = False
    glycemic_index: float | None = None
    preparation_time_minutes: int | None = None

    @property
    def nutrients(self) -> Nutrients:
        """Nutrients for one reference serving."""
        return Nutrients(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fats_g=self.fats_g,
            fiber_g=self.fiber_g,
        )

    @property
    def is_protein_source(self) -> bool:
        return PROTEIN_CATEGORY in self.categories

    @property
    def protein_density(self) -> float:
        """Share of calories that come from protein."""
        if self.calories <= 0:
            return 0.0
        return self.protein_g * 4 / self.calories

    @property
    def carb_density(self) -> float:
        """Share of calories that come from carbohydrates."""
        if self.calories <= 0:
            return 0.0
        return self.carbs_g * 4 / self.calories
