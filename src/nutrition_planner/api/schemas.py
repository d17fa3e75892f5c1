"""Pydantic models for plan requests."""

from pydantic import BaseModel, ConfigDict, Field

from nutrition_planner.domain.foods import Food
from nutrition_planner.domain.profile import (
    DietaryPreferences,
    UserProfile,
    parse_activity_level,
    parse_goal,
    parse_sex,
)
from nutrition_planner.services.catalog import parse_food_record

TRAINING_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ProfilePayload(BaseModel):
    """Biometric data for a plan request."""

    model_config = ConfigDict(populate_by_name=True)

    weight_kg: float = Field(alias="weight")
    height_cm: float = Field(alias="height")
    age: int
    sex: str = Field(alias="gender")
    activity_level: str = Field(alias="activityLevel")
    goal: str

    def to_profile(self) -> UserProfile:
        return UserProfile(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age=self.age,
            sex=parse_sex(self.sex),
            activity_level=parse_activity_level(self.activity_level),
            goal=parse_goal(self.goal),
        )


class PreferencesPayload(BaseModel):
    """Dietary preferences and training time for a plan request."""

    model_config = ConfigDict(populate_by_name=True)

    allergies: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(
        default_factory=list, alias="dietaryRestrictions"
    )
    liked_foods: list[str] = Field(default_factory=list, alias="likedFoods")
    disliked_foods: list[str] = Field(default_factory=list, alias="dislikedFoods")
    training_time: str | None = Field(
        default=None, alias="trainingTime", pattern=TRAINING_TIME_PATTERN
    )

    def to_preferences(self) -> DietaryPreferences:
        return DietaryPreferences(
            allergies=frozenset(self.allergies),
            dietary_restrictions=frozenset(self.dietary_restrictions),
            liked_food_ids=frozenset(self.liked_foods),
            disliked_food_ids=frozenset(self.disliked_foods),
            training_time=self.training_time,
        )


class PlanRequest(BaseModel):
    """Request body for plan generation.

    ``foods`` replaces the stored catalog when provided.
    """

    profile: ProfilePayload
    preferences: PreferencesPayload = Field(default_factory=PreferencesPayload)
    foods: list[dict[str, object]] | None = None

    def parsed_foods(self) -> list[Food] | None:
        if self.foods is None:
            return None
        return [parse_food_record(row) for row in self.foods]
