"""Food search against a model-simulated nutrition database."""

import asyncio
import logging
from dataclasses import dataclass

from calorie_tracker.domain.ai import CatalogItem, CatalogSearchResult
from calorie_tracker.domain.errors import AIServiceError
from calorie_tracker.domain.nutrition import CatalogFood, MacroProfile, ServingUnit
from calorie_tracker.services.cache import Cache
from calorie_tracker.services.scaling import with_gram_unit
from calorie_tracker.services.structured import (
    StructuredModel,
    items_schema,
    nullable,
    object_schema,
)

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 8

_NUMBER = {"type": "number", "minimum": 0}

SEARCH_SCHEMA = items_schema(
    object_schema(
        {
            "name": {"type": "string"},
            "brand": nullable({"type": "string"}),
            "calories": _NUMBER,
            "protein_g": _NUMBER,
            "carbs_g": _NUMBER,
            "fat_g": _NUMBER,
            "serving_units": {
                "type": "array",
                "items": object_schema(
                    {
                        "name": {"type": "string"},
                        "grams": {"type": "number", "exclusiveMinimum": 0},
                    }
                ),
            },
        }
    )
)

_logger = logging.getLogger(__name__)


@dataclass
class FoodSearchService:
    """Service for food searches with caching."""

    model: StructuredModel
    cache: Cache
    search_ttl_seconds: int = 3600
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str) -> list[CatalogFood]:
        """Return up to eight foods matching ``query`` with per-100g macros."""
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        cache_key = f"search:{query.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        result = await self._call_with_retry(query)
        foods = [to_catalog_food(item) for item in result.items[:MAX_RESULTS]]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Food search: query=%s results=%s", query, len(foods))
        return foods

    async def _call_with_retry(self, query: str) -> CatalogSearchResult:
        """Call the model with a short retry."""
        attempt = 0
        while True:
            try:
                return await self.model.request(
                    CatalogSearchResult,
                    prompt=_search_prompt(query),
                    schema=SEARCH_SCHEMA,
                    schema_name="food_search",
                )
            except AIServiceError as exc:
                attempt += 1
                if self.debug:
                    _logger.warning(
                        "Food search failed (attempt %s/%s): %s",
                        attempt,
                        self.retry_attempts + 1,
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def to_catalog_food(item: CatalogItem) -> CatalogFood:
    """Convert a search hit into a catalog food that always offers grams."""
    units = with_gram_unit(
        ServingUnit(name=unit.name, grams=unit.grams) for unit in item.serving_units
    )
    return CatalogFood(
        name=item.name,
        brand=item.brand or None,
        per_100g=MacroProfile(
            calories=item.calories,
            protein_g=item.protein_g,
            carbs_g=item.carbs_g,
            fat_g=item.fat_g,
        ),
        serving_units=units,
    )


def _search_prompt(query: str) -> str:
    return (
        "You are a comprehensive, verified nutrition database. A user is "
        "searching for a food to log in a calorie tracker. List the most likely "
        f'foods matching the query "{query}". For each food give its common '
        "name, the brand if it is a branded product, calories, protein, carbs "
        "and fat per 100 g, and common serving units with their weight in grams. "
        'Always include a "g" serving unit of 1 gram. Return between 3 and 8 '
        "results; a single result is fine for a very specific query."
    )
