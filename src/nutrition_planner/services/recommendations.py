"""Plan recommendations: deterministic timing notes plus optional LLM narrative."""

import asyncio
import json
import logging
from dataclasses import dataclass, replace
from typing import Protocol

from pydantic import BaseModel, Field

from nutrition_planner.domain.plans import Recommendations
from nutrition_planner.domain.profile import DietaryPreferences, Goal, UserProfile, parse_goal
from nutrition_planner.services.timing import TrainingWindow, classify_training_window

_logger = logging.getLogger(__name__)

GENERAL_ADVICE = (
    "Stay hydrated by drinking water throughout the day. Avoid processed foods."
)
DEFAULT_PREWORKOUT = (
    "Eat a meal rich in carbohydrates and moderate in protein 1-2 hours before training."
)
DEFAULT_POSTWORKOUT = (
    "After training, combine protein and carbohydrates to support muscle recovery."
)

_WINDOW_ADVICE: dict[TrainingWindow, tuple[str, str, tuple[str, str]]] = {
    TrainingWindow.MORNING: (
        "Have a light breakfast 30-45 minutes before training, focused on fast "
        "carbohydrates and easily digested protein.",
        "Eat a complete post-workout meal with protein and carbohydrates within "
        "30 minutes of training.",
        (
            "Schedule the heavier meals after the morning session",
            "Keep the pre-workout breakfast light and easy to digest",
        ),
    ),
    TrainingWindow.AFTERNOON: (
        "Have a pre-workout snack 1 hour before, combining carbohydrates and "
        "protein in moderate amounts.",
        "Use lunch or the afternoon snack as the post-workout meal, favoring lean "
        "protein and complex carbohydrates.",
        (
            "Keep breakfast nutritious and substantial",
            "Avoid heavy foods in the 2 hours before training",
        ),
    ),
    TrainingWindow.EVENING: (
        "Have a pre-workout snack 1-2 hours before, avoiding fats and favoring "
        "easily digested carbohydrates.",
        "Eat a balanced dinner after training, with emphasis on protein for "
        "overnight recovery.",
        (
            "Spread meals evenly across the day",
            "Keep the last meal lighter if going to bed soon after",
        ),
    ),
}

_REST_DAY_TIMING = (
    "Eat at consistent times each day",
    "Avoid long gaps between meals",
)

_GOAL_TIMING: dict[Goal, tuple[str, str, str]] = {
    Goal.LOSE: (
        "Concentrate carbohydrates in the meals closest to training",
        "Spread protein-rich meals across the day",
        "Prioritize fiber in the main meals for satiety",
    ),
    Goal.GAIN: (
        "Increase the volume of the main meals",
        "Add protein shakes between meals if needed",
        "Include complex carbohydrates in every meal",
    ),
    Goal.MAINTAIN: (
        "Keep regular intervals between meals",
        "Balance macronutrients in every meal",
        "Vary protein sources throughout the day",
    ),
}


def build_recommendations(
    goal: Goal | str, training_time: str | None = None
) -> Recommendations:
    """Return deterministic recommendations with exactly five timing notes."""
    resolved_goal = parse_goal(goal)
    preworkout, postworkout = DEFAULT_PREWORKOUT, DEFAULT_POSTWORKOUT
    window_notes = _REST_DAY_TIMING
    if training_time:
        preworkout, postworkout, window_notes = _WINDOW_ADVICE[
            classify_training_window(training_time)
        ]
    return Recommendations(
        general=GENERAL_ADVICE,
        preworkout=preworkout,
        postworkout=postworkout,
        timing=(*window_notes, *_GOAL_TIMING[resolved_goal]),
    )


NARRATIVE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "general": {"type": "string"},
        "preworkout": {"type": "string"},
        "postworkout": {"type": "string"},
        "substitutions": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["general", "preworkout", "postworkout", "substitutions"],
    "additionalProperties": False,
}


class NarrativeRecommendations(BaseModel):
    """Narrative fields returned by the text-generation model."""

    general: str = Field(min_length=1)
    preworkout: str = Field(min_length=1)
    postworkout: str = Field(min_length=1)
    substitutions: list[str] = Field(default_factory=list)


class TextGenerationClient(Protocol):
    """Interface for structured text generation."""

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return a JSON object matching the schema."""


@dataclass
class RecommendationService:
    """Rewrites deterministic recommendations into personalized narrative text.

    A failed or slow call never fails the plan: the deterministic text is kept.
    Timing notes are always the deterministic ones.
    """

    client: TextGenerationClient
    model: str
    timeout_seconds: float = 20.0

    async def narrate(
        self,
        recommendations: Recommendations,
        plan_payload: dict[str, object],
        profile: UserProfile,
        preferences: DietaryPreferences,
    ) -> Recommendations:
        prompt = _build_prompt(recommendations, plan_payload, profile, preferences)
        try:
            raw = await asyncio.wait_for(
                self.client.generate(
                    model=self.model, prompt=prompt, schema=NARRATIVE_SCHEMA
                ),
                timeout=self.timeout_seconds,
            )
            narrative = NarrativeRecommendations.model_validate(raw)
        except Exception:
            _logger.warning(
                "Narrative recommendations unavailable; keeping defaults",
                exc_info=True,
            )
            return recommendations
        return replace(
            recommendations,
            general=narrative.general,
            preworkout=narrative.preworkout,
            postworkout=narrative.postworkout,
            substitutions=tuple(item for item in narrative.substitutions if item.strip()),
        )


def _build_prompt(
    recommendations: Recommendations,
    plan_payload: dict[str, object],
    profile: UserProfile,
    preferences: DietaryPreferences,
) -> str:
    context = {
        "profile": {
            "weight_kg": profile.weight_kg,
            "height_cm": profile.height_cm,
            "age": profile.age,
            "sex": profile.sex.value,
            "activity_level": profile.activity_level.value,
            "goal": profile.goal.value,
        },
        "allergies": sorted(preferences.allergies),
        "dietary_restrictions": sorted(preferences.dietary_restrictions),
        "training_time": preferences.training_time,
        "daily_plan": plan_payload.get("dailyPlan"),
        "total_nutrition": plan_payload.get("totalNutrition"),
        "draft": {
            "general": recommendations.general,
            "preworkout": recommendations.preworkout,
            "postworkout": recommendations.postworkout,
        },
    }
    return (
        "You are a sports nutritionist. Using the meal plan below, rewrite the "
        "draft advice into short, personalized guidance: general advice, "
        "pre-workout and post-workout tips, and up to five food substitutions "
        "that respect the allergies and dietary restrictions. Do not change the "
        "meals.\n\n" + json.dumps(context, ensure_ascii=False)
    )
