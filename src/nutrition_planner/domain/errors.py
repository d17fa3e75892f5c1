"""Error types raised by the plan optimizer."""

from dataclasses import dataclass


class NutritionPlanError(Exception):
    """Base class for optimizer failures."""

    kind = "nutrition_plan_error"


class InvalidBiometricsError(NutritionPlanError):
    """Raised when weight, height, age or activity data is unusable."""

    kind = "invalid_biometrics"


class InvalidGoalError(NutritionPlanError):
    """Raised for an unrecognized goal."""

    kind = "invalid_goal"


class DegenerateFoodError(NutritionPlanError):
    """Raised when a food has no calories per reference serving."""

    kind = "degenerate_food"

    def __init__(self, food_id: str) -> None:
        super().__init__(f"Food {food_id!r} has zero reference calories")
        self.food_id = food_id


class InsufficientCandidatesError(NutritionPlanError):
    """Raised when filtering leaves no foods for a required meal slot."""

    kind = "insufficient_candidates"

    def __init__(self, slot: str) -> None:
        super().__init__(f"No candidate foods left for meal slot {slot!r}")
        self.slot = slot


@dataclass(frozen=True)
class Violation:
    """A single failed check, addressed by its field path."""

    path: str
    message: str


class PlanValidationError(NutritionPlanError):
    """Raised when an assembled plan fails schema or tolerance checks."""

    kind = "plan_validation_failed"

    def __init__(self, violations: list[Violation]) -> None:
        paths = ", ".join(violation.path for violation in violations)
        super().__init__(f"Plan failed validation at: {paths}")
        self.violations = violations

    @property
    def paths(self) -> list[str]:
        return [violation.path for violation in self.violations]
