"""Supabase implementation for the food catalog."""

import logging
from dataclasses import dataclass

from supabase import Client

from nutrition_planner.domain.foods import Food
from nutrition_planner.services.catalog import FoodCatalogRepository, parse_food_record

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseFoodCatalogRepository(FoodCatalogRepository):
    """Supabase-backed read repository for catalog foods."""

    client: Client
    table: str = "foods"

    def list_foods(self) -> list[Food]:
        """Return every catalog food, skipping rows without calories."""
        response = self.client.table(self.table).select("*").execute()
        if response.data is None:
            raise RuntimeError(f"Failed to load foods from {self.table}")
        foods = [parse_food_record(row) for row in response.data]
        usable = [food for food in foods if food.id and food.calories > 0]
        if len(usable) < len(foods):
            _logger.info("Skipped %s catalog rows without calories", len(foods) - len(usable))
        return usable
