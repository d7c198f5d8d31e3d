"""
Turns the language model's free-text reply into a TravelPlan.

The model is asked for bare JSON but frequently wraps it in prose or code
fences. Anything that cannot be coerced into a complete plan is replaced by a
deterministic placeholder built from the trip request alone.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from journey_ai.api.models.schemas import (
    BudgetBreakdown,
    DayPlan,
    PlanActivity,
    RecommendationCategory,
    TravelPlan,
    TripRequest,
    TripSummary,
)

logger = logging.getLogger(__name__)

_DECODER = json.JSONDecoder()
_SECONDS_PER_DAY = 24 * 60 * 60


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first top-level JSON object embedded in ``text``, if any."""
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        try:
            value, _ = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def parse_travel_plan(text: str) -> Optional[TravelPlan]:
    """
    Validate the reply's JSON object as a plan. Extra keys are carried through
    unchanged; a ``transportation`` key is discarded because flight data is only
    ever attached from the flight provider.
    """
    payload = extract_json_object(text)
    if payload is None:
        logger.info("Model reply did not contain a JSON object")
        return None
    payload.pop("transportation", None)
    try:
        return TravelPlan.model_validate(payload)
    except PydanticValidationError as exc:
        logger.info("Model reply JSON does not match the plan schema: %s", exc.errors()[:3])
        return None


def fallback_duration_days(request: TripRequest) -> int:
    if request.startDate is None or request.endDate is None:
        return 0
    delta = request.endDate - request.startDate
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def build_fallback_plan(request: TripRequest) -> TravelPlan:
    return TravelPlan(
        summary=TripSummary(
            source=request.source,
            destination=request.destination,
            duration=f"{fallback_duration_days(request)} days",
            bestTimeToVisit="Information not available",
        ),
        budget=BudgetBreakdown(
            total=request.budget,
            accommodation="40% of budget",
            transportation="30% of budget",
            foodAndActivities="30% of budget",
        ),
        itinerary=[
            DayPlan(
                day=1,
                title="Arrival Day",
                activities=[
                    PlanActivity(
                        time="Morning",
                        title="Arrival and Check-in",
                        description="Arrive at your destination and check into your accommodation.",
                    ),
                    PlanActivity(
                        time="Afternoon",
                        title="Local Exploration",
                        description="Take a walk around the local area to get oriented.",
                    ),
                    PlanActivity(
                        time="Evening",
                        title="Welcome Dinner",
                        description="Enjoy a local restaurant to sample the cuisine.",
                    ),
                ],
            ),
            DayPlan(
                day=2,
                title="Exploring the Highlights",
                activities=[
                    PlanActivity(
                        time="Morning",
                        title="Main Attractions",
                        description="Visit the top attractions in the destination.",
                    ),
                    PlanActivity(
                        time="Afternoon",
                        title="Cultural Experience",
                        description="Immerse yourself in the local culture.",
                    ),
                    PlanActivity(
                        time="Evening",
                        title="Leisure Time",
                        description="Relax and enjoy the evening at your leisure.",
                    ),
                ],
            ),
        ],
        recommendations=[
            RecommendationCategory(
                category="Places to Eat",
                items=["Research local restaurants", "Try local specialties", "Ask your accommodation for recommendations"],
            ),
            RecommendationCategory(
                category="Things to See",
                items=["Main tourist attractions", "Off-the-beaten-path locations", "Natural wonders in the area"],
            ),
            RecommendationCategory(
                category="Local Tips",
                items=["Learn a few local phrases", "Respect local customs", "Check local transportation options"],
            ),
        ],
    )


def interpret_reply(text: str, request: TripRequest) -> Tuple[TravelPlan, bool]:
    """Returns the parsed plan, or the fallback plan and ``True`` when parsing failed."""
    plan = parse_travel_plan(text)
    if plan is not None:
        return plan, False
    logger.warning("Using fallback plan for %s -> %s", request.source, request.destination)
    return build_fallback_plan(request), True
