import json
from datetime import date

from journey_ai.ai.interpreter import build_fallback_plan
from journey_ai.ai.prompts import (
    build_chat_turns,
    build_plan_context,
    build_plan_prompt,
    format_travel_date,
    greeting_for,
)
from journey_ai.api.models.schemas import ChatMessage


def test_format_travel_date():
    assert format_travel_date(date(2025, 6, 1)) == "Jun 1, 2025"
    assert format_travel_date(date(2025, 12, 24)) == "Dec 24, 2025"
    assert format_travel_date(None) == ""


def test_plan_prompt_states_trip_parameters(trip_request):
    prompt = build_plan_prompt(trip_request)

    assert "Source: New York" in prompt
    assert "Destination: Paris" in prompt
    assert "Travel Dates: Jun 1, 2025 to Jun 5, 2025" in prompt
    assert "Budget: $2000" in prompt
    assert "Number of Travelers: 2" in prompt
    assert "Interests: art, food" in prompt


def test_plan_prompt_embeds_schema_and_json_only_instruction(trip_request):
    prompt = build_plan_prompt(trip_request)

    for key in ('"summary"', '"budget"', '"itinerary"', '"recommendations"', '"bestTimeToVisit"', '"foodAndActivities"'):
        assert key in prompt
    assert "JSON only" in prompt
    assert "without any markdown" in prompt


def test_plan_prompt_is_deterministic(trip_request):
    assert build_plan_prompt(trip_request) == build_plan_prompt(trip_request)


def test_plan_context_contains_day_titles_only(trip_request):
    plan = build_fallback_plan(trip_request)
    context = json.loads(build_plan_context(plan))

    assert context == {
        "destination": "Paris",
        "duration": "4 days",
        "budget": "$2000",
        "itinerary": [{"day": 1, "title": "Arrival Day"}, {"day": 2, "title": "Exploring the Highlights"}],
    }


def test_chat_turns_replay_history_then_question(trip_request):
    plan = build_fallback_plan(trip_request)
    history = [
        ChatMessage(role="assistant", content=greeting_for(plan)),
        ChatMessage(role="user", content="Is day 1 busy?"),
        ChatMessage(role="assistant", content="Not really."),
    ]

    turns = build_chat_turns(plan, history, "What should I eat?")

    assert [turn.role for turn in turns] == ["model", "user", "model", "user"]
    assert turns[1].text == "Is day 1 busy?"
    last = turns[-1].text
    assert last.startswith("Travel Plan Context: {")
    assert "User Question: What should I eat?" in last
    assert "based only on the travel plan context" in last


def test_greeting_names_destination(trip_request):
    plan = build_fallback_plan(trip_request)
    assert "your trip to Paris" in greeting_for(plan)
