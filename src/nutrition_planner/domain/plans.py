"""Domain models for assembled meal plans."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from nutrition_planner.domain.foods import Food
from nutrition_planner.domain.nutrition import MacroTargets, Nutrients


class MealSlot(StrEnum):
    """The five fixed meal positions in a day, in eating order."""

    BREAKFAST = "breakfast"
    MORNING_SNACK = "morningSnack"
    LUNCH = "lunch"
    AFTERNOON_SNACK = "afternoonSnack"
    DINNER = "dinner"


SLOT_ORDER: tuple[MealSlot, ...] = tuple(MealSlot)

# Fraction of daily calories per slot; sums to 1.0.
SLOT_CALORIE_SHARES: dict[MealSlot, float] = {
    MealSlot.BREAKFAST: 0.25,
    MealSlot.MORNING_SNACK: 0.15,
    MealSlot.LUNCH: 0.30,
    MealSlot.AFTERNOON_SNACK: 0.10,
    MealSlot.DINNER: 0.20,
}

SLOT_DESCRIPTIONS: dict[MealSlot, str] = {
    MealSlot.BREAKFAST: "Balanced breakfast",
    MealSlot.MORNING_SNACK: "Light morning snack",
    MealSlot.LUNCH: "Nutritious lunch",
    MealSlot.AFTERNOON_SNACK: "Afternoon snack",
    MealSlot.DINNER: "Light and nutritious dinner",
}

WEEK_DAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True)
class PortionedFood:
    """A food with a computed portion and the nutrients of that portion."""

    food: Food
    portion: float
    unit: str
    amount: float
    nutrients: Nutrients

    @property
    def details(self) -> str:
        """Human-readable summary used by the rendering layer."""
        n = self.nutrients
        return (
            f"{_format_number(self.amount)} {self.food.serving_unit} | "
            f"{n.calories:.0f} kcal | P:{n.protein_g:g}g "
            f"C:{n.carbs_g:g}g F:{n.fats_g:g}g"
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.food.id,
            "name": self.food.name,
            "portion": self.portion,
            "unit": self.unit,
            "details": self.details,
            "calculatedNutrients": self.nutrients.to_payload(),
        }


@dataclass(frozen=True)
class IntensityAdjustment:
    """Per-nutrient multipliers applied to a meal's aggregate."""

    calories: float = 1.0
    protein: float = 1.0
    carbs: float = 1.0
    fats: float = 1.0
    fiber: float = 1.0

    def apply(self, nutrients: Nutrients) -> Nutrients:
        return Nutrients(
            calories=nutrients.calories * self.calories,
            protein_g=nutrients.protein_g * self.protein,
            carbs_g=nutrients.carbs_g * self.carbs,
            fats_g=nutrients.fats_g * self.fats,
            fiber_g=nutrients.fiber_g * self.fiber,
        )

    def combine(self, other: "IntensityAdjustment") -> "IntensityAdjustment":
        """Return the adjustment equivalent to applying both in sequence."""
        return IntensityAdjustment(
            calories=self.calories * other.calories,
            protein=self.protein * other.protein,
            carbs=self.carbs * other.carbs,
            fats=self.fats * other.fats,
            fiber=self.fiber * other.fiber,
        )

    def scaled(self, factor: float) -> "IntensityAdjustment":
        return IntensityAdjustment(
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fats=self.fats * factor,
            fiber=self.fiber * factor,
        )

    @property
    def is_identity(self) -> bool:
        return self == IntensityAdjustment()


@dataclass(frozen=True)
class Meal:
    """A meal slot holding ordered portioned foods."""

    slot: MealSlot
    foods: tuple[PortionedFood, ...]
    adjustment: IntensityAdjustment = field(default_factory=IntensityAdjustment)

    @property
    def food_nutrients(self) -> Nutrients:
        """Plain sum of the foods' nutrients, before any adjustment."""
        total = Nutrients.zero()
        for item in self.foods:
            total = total + item.nutrients
        return total

    @property
    def nutrients(self) -> Nutrients:
        """Aggregated nutrients for the slot."""
        return self.adjustment.apply(self.food_nutrients).rounded()

    def to_payload(self) -> dict[str, object]:
        nutrients = self.nutrients
        return {
            "foods": [item.to_payload() for item in self.foods],
            "calories": nutrients.calories,
            "macros": {
                "protein": nutrients.protein_g,
                "carbs": nutrients.carbs_g,
                "fats": nutrients.fats_g,
                "fiber": nutrients.fiber_g,
            },
            "description": SLOT_DESCRIPTIONS[self.slot],
        }


@dataclass(frozen=True)
class Recommendations:
    """Narrative guidance attached to a plan."""

    general: str
    preworkout: str
    postworkout: str
    timing: tuple[str, ...]
    substitutions: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "general": self.general,
            "preworkout": self.preworkout,
            "postworkout": self.postworkout,
            "timing": list(self.timing),
        }
        if self.substitutions:
            payload["substitutions"] = list(self.substitutions)
        return payload


def aggregate_meals(meals: Iterable[Meal]) -> Nutrients:
    """Sum the aggregated nutrients of several meals."""
    total = Nutrients.zero()
    for meal in meals:
        total = total + meal.nutrients
    return total.rounded()


@dataclass(frozen=True)
class MealPlan:
    """A full day of meals plus totals and recommendations."""

    meals: Mapping[MealSlot, Meal]
    targets: MacroTargets
    recommendations: Recommendations

    @property
    def total_nutrition(self) -> Nutrients:
        return aggregate_meals(self.meals.values())

    def meal(self, slot: MealSlot) -> Meal:
        return self.meals[slot]

    def food_ids(self) -> dict[MealSlot, set[str]]:
        """Food ids chosen per slot."""
        return {
            slot: {item.food.id for item in meal.foods}
            for slot, meal in self.meals.items()
        }

    def to_payload(self) -> dict[str, object]:
        """Serialize to the output contract consumed by the rendering layer."""
        return {
            "dailyPlan": {
                slot.value: self.meals[slot].to_payload()
                for slot in SLOT_ORDER
                if slot in self.meals
            },
            "totalNutrition": self.total_nutrition.to_payload(),
            "recommendations": self.recommendations.to_payload(),
        }


@dataclass(frozen=True)
class DayPlan:
    """One named day of a weekly plan."""

    day_name: str
    plan: MealPlan

    def to_payload(self) -> dict[str, object]:
        payload = self.plan.to_payload()
        return {
            "dayName": self.day_name.capitalize(),
            "dailyPlan": payload["dailyPlan"],
            "totalNutrition": payload["totalNutrition"],
        }


@dataclass(frozen=True)
class WeeklyMealPlan:
    """Seven day plans sharing targets and recommendations."""

    days: tuple[DayPlan, ...]
    targets: MacroTargets
    recommendations: Recommendations

    @property
    def weekly_averages(self) -> Nutrients:
        if not self.days:
            return Nutrients.zero()
        total = Nutrients.zero()
        for day in self.days:
            total = total + day.plan.total_nutrition
        return total.scaled(1.0 / len(self.days)).rounded()

    def to_payload(self) -> dict[str, object]:
        averages = self.weekly_averages
        return {
            "weeklyPlan": {day.day_name: day.to_payload() for day in self.days},
            "weeklyTotals": {
                "averageCalories": averages.calories,
                "averageProtein": averages.protein_g,
                "averageCarbs": averages.carbs_g,
                "averageFats": averages.fats_g,
                "averageFiber": averages.fiber_g,
            },
            "recommendations": self.recommendations.to_payload(),
        }


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
