"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nutrition_planner.api.schemas import PlanRequest
from nutrition_planner.app_logging import configure_logging
from nutrition_planner.containers import AppContainer
from nutrition_planner.domain.errors import NutritionPlanError, PlanValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level.upper())
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NutritionPlanError)
    async def handle_plan_error(
        _request: Request, exc: NutritionPlanError
    ) -> JSONResponse:
        logger.warning("Plan generation failed: %s: %s", exc.kind, exc)
        return JSONResponse(status_code=422, content=_error_payload(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meal-plans")
    async def create_meal_plan(
        payload: PlanRequest, request: Request
    ) -> dict[str, object]:
        """Generate a validated daily meal plan."""
        state_container: AppContainer = request.app.state.container
        plan = await state_container.meal_plan_service.generate_day(
            payload.profile.to_profile(),
            payload.preferences.to_preferences(),
            payload.parsed_foods(),
        )
        return plan.to_payload()

    @app.post("/meal-plans/weekly")
    async def create_weekly_meal_plan(
        payload: PlanRequest, request: Request
    ) -> dict[str, object]:
        """Generate a validated seven-day meal plan."""
        state_container: AppContainer = request.app.state.container
        weekly = await state_container.meal_plan_service.generate_week(
            payload.profile.to_profile(),
            payload.preferences.to_preferences(),
            payload.parsed_foods(),
        )
        return weekly.to_payload()

    return app


def _error_payload(exc: NutritionPlanError) -> dict[str, object]:
    payload: dict[str, object] = {"error": exc.kind, "message": str(exc)}
    if isinstance(exc, PlanValidationError):
        payload["violations"] = [
            {"path": violation.path, "message": violation.message}
            for violation in exc.violations
        ]
    return payload
