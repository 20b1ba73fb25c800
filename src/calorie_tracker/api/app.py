"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.schemas import (
    AddEntriesRequest,
    CatalogEntryRequest,
    EntriesResponse,
    MacroSplitRequest,
    ParseRequest,
    ParseResponse,
    ProfileModel,
    ProgressResponse,
    RecipeRequest,
    ReplaceFoodRequest,
    RescaleRequest,
    ScanEntriesRequest,
    ScanRequest,
    SearchRequest,
    SearchResponse,
    SelectDateRequest,
    SelectedDateResponse,
    SummaryResponse,
    TdeeRequest,
    TdeeResponse,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.ai import (
    CatalogItem,
    CatalogServingUnit,
    RecipeMakeover,
    ScanResult,
)
from calorie_tracker.domain.energy import TdeeEstimate
from calorie_tracker.domain.errors import (
    AIServiceError,
    EntryNotFoundError,
    InvalidInputError,
    PersistenceError,
)
from calorie_tracker.domain.models import FoodDraft, FoodLogEntry
from calorie_tracker.domain.nutrition import CatalogFood, MacroProfile
from calorie_tracker.domain.state import (
    AddEntries,
    AppState,
    ApplyMacroSplit,
    ApplyTdeeEstimate,
    DeleteEntry,
    ReplaceEntryFood,
    RescaleEntry,
    SelectDate,
    UpdateProfile,
)
from calorie_tracker.domain.stats import DailySummary
from calorie_tracker.services.energy import estimate_tdee, metrics_from_profile
from calorie_tracker.services.food_search import to_catalog_food
from calorie_tracker.services.goals import evaluate_goals
from calorie_tracker.services.log_store import find_entry
from calorie_tracker.services.scaling import (
    draft_from_catalog,
    draft_from_portion,
    resolve_serving_grams,
)
from calorie_tracker.services.stats import (
    aggregate_day,
    aggregate_period,
    macro_distribution,
)
from calorie_tracker.services.text_log import drafts_from_parsed
from calorie_tracker.services.vision import drafts_from_scan

_AI_FALLBACK = "The AI service could not complete the request. Please try again."


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidInputError)
    async def invalid_input(_: Request, exc: InvalidInputError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(EntryNotFoundError)
    async def entry_not_found(_: Request, exc: EntryNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(AIServiceError)
    async def ai_failed(request: Request, exc: AIServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": _format_ai_error(request.app.state.container, exc)},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_failed(_: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Change not saved: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Your change could not be saved. Please try again."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/session/date")
    async def selected_date(request: Request) -> SelectedDateResponse:
        state = _container(request).session.state
        return SelectedDateResponse(day=state.selected_date)

    @app.put("/session/date")
    async def select_date(
        payload: SelectDateRequest, request: Request
    ) -> SelectedDateResponse:
        """Change the date new entries are logged to."""
        state = _container(request).session.dispatch(SelectDate(payload.day))
        return SelectedDateResponse(day=state.selected_date)

    @app.get("/log")
    async def daily_log(request: Request, day: date | None = None) -> DailySummary:
        """Return the day's entries grouped by meal."""
        state = _container(request).session.state
        return aggregate_day(state.entries, day or state.selected_date)

    @app.post("/log/entries", status_code=status.HTTP_201_CREATED)
    async def add_entries(
        payload: AddEntriesRequest, request: Request
    ) -> EntriesResponse:
        """Log manually entered food."""
        drafts = tuple(
            draft_from_portion(
                entry.name,
                entry.meal_type,
                entry.weight_g,
                MacroProfile(
                    entry.calories, entry.protein_g, entry.carbs_g, entry.fat_g
                ),
            )
            for entry in payload.entries
        )
        return _add(_container(request), drafts)

    @app.post("/log/entries/from-catalog", status_code=status.HTTP_201_CREATED)
    async def add_catalog_entry(
        payload: CatalogEntryRequest, request: Request
    ) -> EntriesResponse:
        """Log servings of a food search result."""
        draft = draft_from_catalog(
            to_catalog_food(payload.food),
            payload.meal_type,
            payload.unit,
            payload.count,
        )
        return _add(_container(request), (draft,))

    @app.post("/log/entries/from-scan", status_code=status.HTTP_201_CREATED)
    async def add_scan_entries(
        payload: ScanEntriesRequest, request: Request
    ) -> EntriesResponse:
        """Log the complete items of an accepted photo scan."""
        drafts = tuple(drafts_from_scan(payload.items, payload.meal_type))
        return _add(_container(request), drafts)

    @app.patch("/log/entries/{entry_id}")
    async def rescale_entry(
        entry_id: str, payload: RescaleRequest, request: Request
    ) -> FoodLogEntry:
        """Change an entry's portion, recomputing its values from base."""
        if payload.weight_g is not None:
            grams = payload.weight_g
        else:
            grams = resolve_serving_grams(
                payload.units(), payload.unit or "", payload.count or 0
            )
        state = _container(request).session.dispatch(RescaleEntry(entry_id, grams))
        return find_entry(state, entry_id)

    @app.put("/log/entries/{entry_id}/food")
    async def replace_entry_food(
        entry_id: str, payload: ReplaceFoodRequest, request: Request
    ) -> FoodLogEntry:
        """Swap an entry's food, keeping its weight, meal and date."""
        message = ReplaceEntryFood(entry_id, to_catalog_food(payload.food))
        state = _container(request).session.dispatch(message)
        return find_entry(state, entry_id)

    @app.delete("/log/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(entry_id: str, request: Request) -> None:
        _container(request).session.dispatch(DeleteEntry(entry_id))

    @app.get("/summary")
    async def summary(request: Request, day: date | None = None) -> SummaryResponse:
        """Return the day's totals compared with the profile goals."""
        state = _container(request).session.state
        daily = aggregate_day(state.entries, day or state.selected_date)
        return SummaryResponse(
            summary=daily, goals=evaluate_goals(daily.totals, state.profile)
        )

    @app.get("/progress")
    async def progress(
        request: Request, days: int = Query(default=7, ge=1, le=366)
    ) -> ProgressResponse:
        """Return daily totals ending today and the overall macro split."""
        container = _container(request)
        entries = container.session.state.entries
        return ProgressResponse(
            period=aggregate_period(entries, container.today(), days),
            distribution=macro_distribution(entries),
        )

    @app.get("/profile")
    async def get_profile(request: Request) -> ProfileModel:
        return ProfileModel.from_domain(_container(request).session.state.profile)

    @app.put("/profile")
    async def update_profile(payload: ProfileModel, request: Request) -> ProfileModel:
        state = _container(request).session.dispatch(
            UpdateProfile(payload.to_domain())
        )
        return ProfileModel.from_domain(state.profile)

    @app.post("/profile/macros")
    async def apply_macro_split(
        payload: MacroSplitRequest, request: Request
    ) -> ProfileModel:
        """Derive macro gram goals from calorie percentages."""
        state = _container(request).session.dispatch(
            ApplyMacroSplit(payload.to_domain())
        )
        return ProfileModel.from_domain(state.profile)

    @app.post("/profile/tdee")
    async def tdee(payload: TdeeRequest, request: Request) -> TdeeResponse:
        """Estimate maintenance calories without changing the profile."""
        state = _container(request).session.state
        return TdeeResponse(estimate=_estimate(state, payload))

    @app.post("/profile/tdee/apply")
    async def apply_tdee(payload: TdeeRequest, request: Request) -> ProfileModel:
        """Estimate maintenance calories and use the suggestion as daily goal."""
        session = _container(request).session
        estimate = _estimate(session.state, payload)
        state = session.dispatch(ApplyTdeeEstimate(estimate))
        return ProfileModel.from_domain(state.profile)

    @app.post("/ai/scan")
    async def scan_meal(payload: ScanRequest, request: Request) -> ScanResult:
        """Estimate the food on a meal photo."""
        container = _container(request)
        return await container.vision_service.estimate_and_augment(
            payload.image_bytes()
        )

    @app.post("/ai/search")
    async def search_food(payload: SearchRequest, request: Request) -> SearchResponse:
        foods = await _container(request).food_search_service.search(payload.query)
        return SearchResponse(items=[_catalog_item(food) for food in foods])

    @app.post("/ai/parse")
    async def parse_text(payload: ParseRequest, request: Request) -> ParseResponse:
        """Parse a meal description and optionally log the result."""
        container = _container(request)
        token = container.session.begin_request()
        items = await container.text_log_service.parse(payload.query)
        if not payload.log:
            return ParseResponse(items=items)
        drafts = tuple(drafts_from_parsed(items, payload.meal_type))
        before = len(container.session.state.entries)
        state = container.session.dispatch_if_current(token, AddEntries(drafts))
        if state is None:
            return ParseResponse(items=items, stale=True)
        return ParseResponse(items=items, logged=list(state.entries[before:]))

    @app.post("/ai/recipes/reimagine")
    async def reimagine_recipe(
        payload: RecipeRequest, request: Request
    ) -> RecipeMakeover:
        return await _container(request).recipe_service.reimagine(
            payload.ingredients, payload.instructions, payload.goal
        )

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _add(container: AppContainer, drafts: tuple[FoodDraft, ...]) -> EntriesResponse:
    before = len(container.session.state.entries)
    state = container.session.dispatch(AddEntries(drafts))
    return EntriesResponse(entries=list(state.entries[before:]))


def _estimate(state: AppState, payload: TdeeRequest) -> TdeeEstimate:
    metrics = metrics_from_profile(
        state.profile,
        weight_kg=payload.weight_kg,
        height_cm=payload.height_cm,
        age=payload.age,
        gender=payload.gender,
        activity_level=payload.activity_level,
    )
    return estimate_tdee(metrics, payload.weekly_goal)


def _catalog_item(food: CatalogFood) -> CatalogItem:
    return CatalogItem(
        name=food.name,
        brand=food.brand,
        calories=food.per_100g.calories,
        protein_g=food.per_100g.protein_g,
        carbs_g=food.per_100g.carbs_g,
        fat_g=food.per_100g.fat_g,
        serving_units=[
            CatalogServingUnit(name=unit.name, grams=unit.grams)
            for unit in food.serving_units
        ],
    )


def _format_ai_error(container: AppContainer, exc: Exception) -> str:
    """Return a user-facing AI error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{_AI_FALLBACK} (debug: {detail})"
    return _AI_FALLBACK
