"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_planner.adapters.openai_text_client import OpenAITextClient
from nutrition_planner.adapters.supabase_food_catalog_repository import (
    SupabaseFoodCatalogRepository,
)
from nutrition_planner.config import Settings
from nutrition_planner.services.energy import BmrFormula
from nutrition_planner.services.planner import MealPlanService, PlanOptions
from nutrition_planner.services.recommendations import RecommendationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_plan_service: MealPlanService
    close_resources: Callable[[], Awaitable[None]]


def plan_options_from_settings(settings: Settings) -> PlanOptions:
    """Translate optimizer settings into run options."""
    return PlanOptions(
        bmr_formula=BmrFormula(settings.bmr_formula),
        tolerance=settings.plan_tolerance,
        max_foods_per_meal=settings.max_foods_per_meal,
        renormalize_timing=settings.renormalize_timing,
        validate=settings.validate_plans,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog = SupabaseFoodCatalogRepository(
        supabase_client, table=resolved_settings.food_catalog_table
    )
    text_client: OpenAITextClient | None = None
    recommendation_service: RecommendationService | None = None
    if resolved_settings.openai_api_key:
        text_client = OpenAITextClient.create(resolved_settings.openai_api_key)
        recommendation_service = RecommendationService(
            client=text_client,
            model=resolved_settings.openai_model,
            timeout_seconds=resolved_settings.narrative_timeout_seconds,
        )
    meal_plan_service = MealPlanService(
        catalog=catalog,
        recommendation_service=recommendation_service,
        options=plan_options_from_settings(resolved_settings),
    )

    async def close_resources() -> None:
        if text_client is not None:
            await text_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_plan_service=meal_plan_service,
        close_resources=close_resources,
    )
