"""Nutrient value objects."""

from dataclasses import dataclass

CALORIES_PER_GRAM = {
    "protein": 4,
    "carbs": 4,
    "fats": 9,
}


@dataclass(frozen=True)
class Nutrients:
    """Calories and macros for an amount of food."""

    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    fiber_g: float = 0.0

    def scaled(self, factor: float) -> "Nutrients":
        """Return nutrients scaled linearly by a factor."""
        return Nutrients(
            calories=self.calories * factor,
            protein_g=self.protein_g * factor,
            carbs_g=self.carbs_g * factor,
            fats_g=self.fats_g * factor,
            fiber_g=self.fiber_g * factor,
        )

    def rounded(self) -> "Nutrients":
        """Round calories to whole units and macros to one decimal."""
        return Nutrients(
            calories=float(round(self.calories)),
            protein_g=round(self.protein_g, 1),
            carbs_g=round(self.carbs_g, 1),
            fats_g=round(self.fats_g, 1),
            fiber_g=round(self.fiber_g, 1),
        )

    def __add__(self, other: "Nutrients") -> "Nutrients":
        return Nutrients(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fats_g=self.fats_g + other.fats_g,
            fiber_g=self.fiber_g + other.fiber_g,
        )

    @staticmethod
    def zero() -> "Nutrients":
        return Nutrients(0.0, 0.0, 0.0, 0.0, 0.0)

    def to_payload(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein_g,
            "carbs": self.carbs_g,
            "fats": self.fats_g,
            "fiber": self.fiber_g,
        }


@dataclass(frozen=True)
class EnergyBreakdown:
    """Intermediate energy figures for a profile."""

    bmr: float
    tdee: float
    target_calories: int


@dataclass(frozen=True)
class MacroTargets:
    """Calorie budget and macro targets in grams."""

    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    fiber_g: float

    def scaled(self, share: float) -> "MacroTargets":
        """Return targets for a fraction of the budget, e.g. one meal slot."""
        return MacroTargets(
            calories=self.calories * share,
            protein_g=self.protein_g * share,
            carbs_g=self.carbs_g * share,
            fats_g=self.fats_g * share,
            fiber_g=self.fiber_g * share,
        )

    def macro_calories(self) -> float:
        """Calories implied by protein, carbs and fats (fiber excluded)."""
        return (
            self.protein_g * CALORIES_PER_GRAM["protein"]
            + self.carbs_g * CALORIES_PER_GRAM["carbs"]
            + self.fats_g * CALORIES_PER_GRAM["fats"]
        )

    def to_payload(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein_g,
            "carbs": self.carbs_g,
            "fats": self.fats_g,
            "fiber": self.fiber_g,
        }
