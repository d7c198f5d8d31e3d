from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------- TripRequest ----------


class TripRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    destination: str
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    budget: str
    travelers: int = Field(default=1, ge=1, le=20)
    interests: str
    includeTransportation: bool = False


# ---------- TravelPlan ----------


class TripSummary(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="allow")

    source: str
    destination: str
    duration: str
    bestTimeToVisit: str


class BudgetBreakdown(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="allow")

    total: str
    accommodation: str
    transportation: str
    foodAndActivities: str


class PlanActivity(BaseModel):
    model_config = ConfigDict(extra="allow")

    time: str
    title: str
    description: str


class DayPlan(BaseModel):
    model_config = ConfigDict(extra="allow")

    day: int = Field(ge=1)
    title: str
    activities: List[PlanActivity]


class RecommendationCategory(BaseModel):
    model_config = ConfigDict(extra="allow")

    category: str
    items: List[str]


# ---------- Transportation ----------


class AirportTime(BaseModel):
    name: str
    id: str
    time: str


class FlightSegment(BaseModel):
    departure_airport: AirportTime
    arrival_airport: AirportTime
    duration: int
    airplane: str = ""
    airline: str
    airline_logo: str = ""
    travel_class: str = ""
    flight_number: str
    legroom: Optional[str] = None
    extensions: Optional[List[str]] = None
    overnight: Optional[bool] = None
    often_delayed_by_over_30_min: Optional[bool] = None
    ticket_also_sold_by: Optional[List[str]] = None


class Layover(BaseModel):
    duration: int
    name: str
    id: str


class CarbonEmissions(BaseModel):
    this_flight: int
    typical_for_this_route: int
    difference_percent: int


class FlightOption(BaseModel):
    flights: List[FlightSegment] = Field(min_length=1)
    layovers: Optional[List[Layover]] = None
    total_duration: int
    carbon_emissions: CarbonEmissions
    price: int
    type: str = ""
    airline_logo: str = ""
    booking_token: str = ""


class TransportationDetails(BaseModel):
    best_flights: List[FlightOption] = Field(default_factory=list)


class TravelPlan(BaseModel):
    # Keys the model adds beyond the requested schema are kept as-is.
    model_config = ConfigDict(extra="allow")

    summary: TripSummary
    budget: BudgetBreakdown
    itinerary: List[DayPlan] = Field(min_length=1)
    recommendations: List[RecommendationCategory] = Field(min_length=1)
    transportation: Optional[TransportationDetails] = None


# ---------- Chat ----------


ChatRole = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    role: ChatRole
    content: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


# ---------- Request/Response models ----------


class PlanSessionResponse(BaseModel):
    id: str
    request: TripRequest
    plan: TravelPlan
    createdAt: datetime


class ChatRequest(BaseModel):
    message: str


class ConversationResponse(BaseModel):
    messages: List[ChatMessage]


class ChatResponse(BaseModel):
    reply: ChatMessage
    messages: List[ChatMessage]


CredentialSource = Literal["environment", "stored", "unset"]


class CredentialView(BaseModel):
    configured: bool
    maskedValue: str
    source: CredentialSource
    locked: bool


class SettingsResponse(BaseModel):
    gemini_api_key: CredentialView
    serp_api_key: CredentialView


class UpdateSettingsRequest(BaseModel):
    gemini_api_key: Optional[str] = None
    serp_api_key: Optional[str] = None
