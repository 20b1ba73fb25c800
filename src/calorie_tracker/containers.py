"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from supabase import create_client

from calorie_tracker.adapters.json_file_store import JsonFileKeyValueStore
from calorie_tracker.adapters.openai_structured_client import OpenAIStructuredClient
from calorie_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from calorie_tracker.config import Settings
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.food_search import FoodSearchService
from calorie_tracker.services.persistence import KeyValueStore, SnapshotRepository
from calorie_tracker.services.recipes import RecipeService
from calorie_tracker.services.session import TrackerSession
from calorie_tracker.services.structured import StructuredModel
from calorie_tracker.services.text_log import TextLogService
from calorie_tracker.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session: TrackerSession
    vision_service: VisionService
    food_search_service: FoodSearchService
    text_log_service: TextLogService
    recipe_service: RecipeService
    today: Callable[[], date]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = ZoneInfo(resolved_settings.timezone)

    def today() -> date:
        return datetime.now(tz=timezone).date()

    repository = SnapshotRepository(
        store=build_store(resolved_settings),
        entries_key=resolved_settings.food_items_key,
        profile_key=resolved_settings.user_profile_key,
    )
    session = TrackerSession.load(repository, selected_date=today())
    openai_client = OpenAIStructuredClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    model = StructuredModel(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    food_search_service = FoodSearchService(
        model=model,
        cache=InMemoryCache(),
        search_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        vision_service=VisionService(model),
        food_search_service=food_search_service,
        text_log_service=TextLogService(model),
        recipe_service=RecipeService(model),
        today=today,
        close_resources=close_resources,
    )


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store for the configured backend."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase storage backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    return JsonFileKeyValueStore(settings.storage_path)
