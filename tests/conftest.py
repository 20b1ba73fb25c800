"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.models import FoodDraft, MealType
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.food_search import FoodSearchService
from calorie_tracker.services.persistence import KeyValueStore, SnapshotRepository
from calorie_tracker.services.recipes import RecipeService
from calorie_tracker.services.scaling import draft_from_portion
from calorie_tracker.services.session import TrackerSession
from calorie_tracker.services.structured import StructuredModel, StructuredModelClient
from calorie_tracker.services.text_log import TextLogService
from calorie_tracker.services.vision import VisionService

TODAY = date(2024, 5, 10)


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store for tests."""

    values: dict[str, str] = field(default_factory=dict)
    fail_writes: bool = False
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes.append(key)
        self.values[key] = value


@dataclass
class FakeStructuredClient(StructuredModelClient):
    """Fake model client returning canned outputs per schema name."""

    outputs: dict[str, list[object]] = field(default_factory=dict)
    calls: list[dict[str, object]] = field(default_factory=list)

    def queue(self, schema_name: str, *outputs: object) -> None:
        self.outputs.setdefault(schema_name, []).extend(outputs)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "schema_name": schema_name,
                "prompt": prompt,
                "image_data_url": image_data_url,
            }
        )
        queued = self.outputs.get(schema_name)
        if not queued:
            raise RuntimeError(f"No output queued for {schema_name}")
        output = queued.pop(0)
        if isinstance(output, Exception):
            raise output
        return output  # type: ignore[return-value]


def make_draft(
    name: str = "Oatmeal",
    meal_type: MealType = "Breakfast",
    weight_g: float = 200,
    calories: float = 140,
    protein_g: float = 5,
    carbs_g: float = 24,
    fat_g: float = 3,
) -> FoodDraft:
    return draft_from_portion(
        name, meal_type, weight_g, MacroProfile(calories, protein_g, carbs_g, fat_g)
    )


def sequential_ids():
    counter = iter(range(1, 10_000))
    return lambda: f"entry-{next(counter)}"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        storage_path=tmp_path / "tracker.json",
        environment="test",
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> SnapshotRepository:
    return SnapshotRepository(store)


@pytest.fixture
def session(repository: SnapshotRepository) -> TrackerSession:
    return TrackerSession.load(repository, TODAY, id_factory=sequential_ids())


@pytest.fixture
def model_client() -> FakeStructuredClient:
    return FakeStructuredClient()


@pytest.fixture
def structured_model(model_client: FakeStructuredClient) -> StructuredModel:
    return StructuredModel(
        client=model_client, model="gpt-5.2", reasoning_effort="high", store=False
    )


@pytest.fixture
def container(
    settings: Settings,
    session: TrackerSession,
    structured_model: StructuredModel,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session=session,
        vision_service=VisionService(structured_model),
        food_search_service=FoodSearchService(
            model=structured_model, cache=InMemoryCache(), retry_delay_seconds=0
        ),
        text_log_service=TextLogService(structured_model),
        recipe_service=RecipeService(structured_model),
        today=lambda: TODAY,
        close_resources=close_resources,
    )
