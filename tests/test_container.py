"""Tests for container wiring."""

import asyncio

import pytest

from calorie_tracker.adapters.json_file_store import JsonFileKeyValueStore
from calorie_tracker.containers import build_container, build_store
from calorie_tracker.domain.models import DEFAULT_PROFILE


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.session.state.entries == ()
    assert container.session.state.profile == DEFAULT_PROFILE
    assert container.session.state.selected_date == container.today()
    assert container.food_search_service is not None
    asyncio.run(container.close_resources())


def test_build_store_defaults_to_file(settings) -> None:
    assert isinstance(build_store(settings), JsonFileKeyValueStore)


def test_supabase_backend_requires_credentials(settings) -> None:
    settings = settings.model_copy(update={"storage_backend": "supabase"})

    with pytest.raises(ValueError, match="SUPABASE_URL"):
        build_store(settings)
