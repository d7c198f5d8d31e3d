import json
from datetime import date

import pytest

from journey_ai.ai.plan_graph import generate_travel_plan
from journey_ai.core.errors import CredentialMissingError, UpstreamServiceError, ValidationError
from journey_ai.domain.repositories import InMemoryPlanSessionRepository
from journey_ai.domain.services.plan_service import TravelPlanService
from journey_ai.domain.settings_store import GEMINI_API_KEY, LocalSettingsStorage, SettingsStore
from journey_ai.external.flights import StaticFlightProvider

from conftest import FakeLanguageModel

pytestmark = pytest.mark.anyio


def _service(config, store, model):
    return TravelPlanService(
        repo=InMemoryPlanSessionRepository(), settings_store=store, language_model=model, config=config
    )


async def test_prose_reply_yields_fallback_plan(config, settings_store, trip_request):
    model = FakeLanguageModel(replies=["Paris is lovely in June! Pack an umbrella."])

    session = await _service(config, settings_store, model).create_plan(trip_request)

    assert session.plan.summary.duration == "4 days"
    assert len(session.plan.itinerary) == 2
    assert session.plan.transportation is None


async def test_model_plan_is_returned_with_prompt_and_parameters(config, settings_store, trip_request, plan_payload):
    model = FakeLanguageModel(replies=[json.dumps(plan_payload)])

    session = await _service(config, settings_store, model).create_plan(trip_request)

    assert session.plan.model_dump(exclude_none=True) == plan_payload
    call = model.calls[0]
    assert call["api_key"] == "test-gemini-key"
    assert call["temperature"] == config.plan_temperature
    assert call["max_output_tokens"] == config.plan_max_output_tokens
    assert len(call["turns"]) == 1
    assert "Destination: Paris" in call["turns"][0].text


@pytest.mark.parametrize("model_json", [True, False])
async def test_transportation_attached_when_requested(config, settings_store, trip_request, plan_payload, model_json):
    reply = json.dumps(plan_payload) if model_json else "not json"
    request = trip_request.model_copy(update={"includeTransportation": True})

    session = await _service(config, settings_store, FakeLanguageModel(replies=[reply])).create_plan(request)

    assert session.plan.transportation is not None
    assert session.plan.transportation.best_flights


async def test_model_supplied_transportation_dropped_when_not_requested(config, settings_store, trip_request, plan_payload):
    plan_payload["transportation"] = {"best_flights": []}
    model = FakeLanguageModel(replies=[json.dumps(plan_payload)])

    session = await _service(config, settings_store, model).create_plan(trip_request)

    assert session.plan.transportation is None


async def test_missing_credential_blocks_network_call(config, trip_request, tmp_path):
    store = SettingsStore(LocalSettingsStorage(tmp_path / "empty.json"), build_time={})
    model = FakeLanguageModel(replies=["{}"])

    with pytest.raises(CredentialMissingError) as excinfo:
        await _service(config, store, model).create_plan(trip_request)

    assert excinfo.value.setting == GEMINI_API_KEY
    assert model.calls == []


async def test_upstream_failure_propagates_and_stores_nothing(config, settings_store, trip_request):
    model = FakeLanguageModel(error=UpstreamServiceError("Gemini API error: quota"))
    repo = InMemoryPlanSessionRepository()
    svc = TravelPlanService(repo=repo, settings_store=settings_store, language_model=model, config=config)

    with pytest.raises(UpstreamServiceError):
        await svc.create_plan(trip_request)

    assert repo._store == {}


@pytest.mark.parametrize(
    "update,field",
    [
        ({"source": "  "}, "source"),
        ({"interests": ""}, "interests"),
        ({"startDate": None}, "startDate"),
        ({"endDate": None}, "endDate"),
        ({"endDate": date(2025, 5, 30)}, "endDate"),
    ],
)
async def test_invalid_requests_are_rejected(config, settings_store, trip_request, update, field):
    model = FakeLanguageModel(replies=["{}"])

    with pytest.raises(ValidationError) as excinfo:
        await _service(config, settings_store, model).create_plan(trip_request.model_copy(update=update))

    assert excinfo.value.details["field"] == field
    assert model.calls == []


async def test_each_generation_creates_new_session(config, settings_store, trip_request):
    svc = _service(config, settings_store, FakeLanguageModel(replies=["a", "b"]))

    first = await svc.create_plan(trip_request)
    second = await svc.create_plan(trip_request)

    assert first.id != second.id
    assert (await svc.get_plan(first.id)) is first


async def test_generate_travel_plan_runs_graph_directly(trip_request):
    plan = await generate_travel_plan(
        trip_request,
        api_key="k",
        language_model=FakeLanguageModel(replies=["no json here"]),
        flight_provider=StaticFlightProvider(),
        temperature=0.2,
        max_output_tokens=100,
    )

    assert [day.title for day in plan.itinerary] == ["Arrival Day", "Exploring the Highlights"]
