import copy
from datetime import date

import pytest
from fastapi.testclient import TestClient

from journey_ai.api.models.schemas import TripRequest
from journey_ai.core.config import Settings
from journey_ai.dependencies import get_config, get_language_model_dep, get_plan_repo, get_settings_store
from journey_ai.domain.repositories import InMemoryPlanSessionRepository
from journey_ai.domain.settings_store import GEMINI_API_KEY, LocalSettingsStorage, SettingsStore
from journey_ai.main import app

PLAN_PAYLOAD = {
    "summary": {
        "source": "New York",
        "destination": "Paris",
        "duration": "4 days",
        "bestTimeToVisit": "April to June",
    },
    "budget": {
        "total": "$2000",
        "accommodation": "$800",
        "transportation": "$600",
        "foodAndActivities": "$600",
    },
    "itinerary": [
        {
            "day": 1,
            "title": "Louvre and the Seine",
            "activities": [
                {"time": "Morning", "title": "Louvre Museum", "description": "Start with the Denon wing."},
                {"time": "Evening", "title": "Seine cruise", "description": "Sunset boat ride."},
            ],
        },
        {
            "day": 2,
            "title": "Montmartre",
            "activities": [
                {"time": "Afternoon", "title": "Sacre-Coeur", "description": "Climb to the dome."},
            ],
        },
    ],
    "recommendations": [
        {"category": "Restaurants", "items": ["Le Comptoir du Relais", "Breizh Cafe"]},
    ],
}


class FakeLanguageModel:
    """Records every call and answers with queued replies or a fixed error."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    async def generate(self, turns, *, api_key, temperature, max_output_tokens):
        self.calls.append(
            {
                "turns": list(turns),
                "api_key": api_key,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def plan_payload():
    return copy.deepcopy(PLAN_PAYLOAD)


@pytest.fixture
def config(tmp_path):
    return Settings(
        _env_file=None,
        gemini_api_key="",
        serp_api_key="",
        flight_provider="static",
        settings_store_path=str(tmp_path / "settings.json"),
    )


@pytest.fixture
def settings_store(config):
    store = SettingsStore(LocalSettingsStorage(config.settings_store_path), build_time={})
    store.save(GEMINI_API_KEY, "test-gemini-key")
    return store


@pytest.fixture
def trip_request():
    return TripRequest(
        source="New York",
        destination="Paris",
        startDate=date(2025, 6, 1),
        endDate=date(2025, 6, 5),
        budget="$2000",
        travelers=2,
        interests="art, food",
    )


@pytest.fixture
def fake_model():
    return FakeLanguageModel()


@pytest.fixture
def client(config, settings_store, fake_model):
    repo = InMemoryPlanSessionRepository()
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_plan_repo] = lambda: repo
    app.dependency_overrides[get_settings_store] = lambda: settings_store
    app.dependency_overrides[get_language_model_dep] = lambda: fake_model
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
