"""Prompt templates and builders for plan generation and follow-up chat."""

from __future__ import annotations

import json
import textwrap
from datetime import date
from typing import List, Optional, Sequence

from journey_ai.ai.llm import Turn
from journey_ai.api.models.schemas import ChatMessage, TravelPlan, TripRequest

PLAN_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    You are a professional travel planner. Please create a detailed travel plan based on the following information:

    Source: {source}
    Destination: {destination}
    Travel Dates: {start} to {end}
    Budget: {budget}
    Number of Travelers: {travelers}
    Interests: {interests}

    Please provide a detailed itinerary for the trip, including:
    1. Trip summary (source, destination, duration, best time to visit)
    2. Budget breakdown (accommodation, transportation, food and activities)
    3. Day-by-day itinerary with activities
    4. Recommendations (where to eat, what to see, local tips, etc.)

    Format your response as JSON with the following structure:
    {{
      "summary": {{
        "source": "...",
        "destination": "...",
        "duration": "X days",
        "bestTimeToVisit": "..."
      }},
      "budget": {{
        "total": "...",
        "accommodation": "...",
        "transportation": "...",
        "foodAndActivities": "..."
      }},
      "itinerary": [
        {{
          "day": 1,
          "title": "...",
          "activities": [
            {{"time": "Morning", "title": "...", "description": "..."}},
            {{"time": "Afternoon", "title": "...", "description": "..."}},
            {{"time": "Evening", "title": "...", "description": "..."}}
          ]
        }}
      ],
      "recommendations": [
        {{"category": "Restaurants", "items": ["...", "...", "..."]}},
        {{"category": "Local Tips", "items": ["...", "...", "..."]}}
      ]
    }}

    Add one itinerary entry per day of the trip, numbered from 1, and as many recommendation categories as useful.
    Include specific details, suggestions, and tips that would be useful for the traveler.
    Keep the output as JSON only, without any markdown, explanations, or text outside of the JSON.
    """
)

CHAT_TURN_TEMPLATE = (
    "Travel Plan Context: {context}\n\n"
    "User Question: {question}\n\n"
    "Answer the user's question based only on the travel plan context provided."
)

GREETING_TEMPLATE = (
    "Hello! I'm your travel assistant. I can answer questions about your trip to {destination}. "
    "What would you like to know?"
)


def format_travel_date(value: Optional[date]) -> str:
    """Format a date as e.g. 'Jun 1, 2025'; missing dates render as an empty string."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def build_plan_prompt(request: TripRequest) -> str:
    return PLAN_PROMPT_TEMPLATE.format(
        source=request.source,
        destination=request.destination,
        start=format_travel_date(request.startDate),
        end=format_travel_date(request.endDate),
        budget=request.budget,
        travelers=request.travelers,
        interests=request.interests,
    )


def build_plan_context(plan: TravelPlan) -> str:
    """Condensed view of the plan sent with every chat turn."""
    return json.dumps(
        {
            "destination": plan.summary.destination,
            "duration": plan.summary.duration,
            "budget": plan.budget.total,
            "itinerary": [{"day": day.day, "title": day.title} for day in plan.itinerary],
        },
        ensure_ascii=False,
    )


def build_chat_turns(plan: TravelPlan, history: Sequence[ChatMessage], question: str) -> List[Turn]:
    turns = [Turn(role="model" if msg.role == "assistant" else "user", text=msg.content) for msg in history]
    turns.append(
        Turn(
            role="user",
            text=CHAT_TURN_TEMPLATE.format(context=build_plan_context(plan), question=question),
        )
    )
    return turns


def greeting_for(plan: TravelPlan) -> str:
    return GREETING_TEMPLATE.format(destination=plan.summary.destination)
