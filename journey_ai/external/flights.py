from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from journey_ai.api.models.schemas import FlightOption, TransportationDetails, TripRequest

logger = logging.getLogger(__name__)

_IATA_CODE = re.compile(r"^[A-Za-z]{3}$")

SAMPLE_BEST_FLIGHTS: List[Dict[str, Any]] = [
    {
        "flights": [
            {
                "departure_airport": {
                    "name": "John F. Kennedy International Airport",
                    "id": "JFK",
                    "time": "2025-06-01 18:30",
                },
                "arrival_airport": {
                    "name": "Paris Charles de Gaulle Airport",
                    "id": "CDG",
                    "time": "2025-06-02 07:45",
                },
                "duration": 435,
                "airplane": "Boeing 777",
                "airline": "Air France",
                "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/AF.png",
                "travel_class": "Economy",
                "flight_number": "AF 7",
                "legroom": "31 in",
                "extensions": ["Average legroom (31 in)", "Wi-Fi for a fee", "In-seat power & USB outlets"],
                "overnight": True,
            }
        ],
        "total_duration": 435,
        "carbon_emissions": {"this_flight": 412000, "typical_for_this_route": 420000, "difference_percent": -2},
        "price": 684,
        "type": "Round trip",
        "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/AF.png",
        "booking_token": "sample-af7-nonstop",
    },
    {
        "flights": [
            {
                "departure_airport": {
                    "name": "Newark Liberty International Airport",
                    "id": "EWR",
                    "time": "2025-06-01 16:05",
                },
                "arrival_airport": {"name": "Dublin Airport", "id": "DUB", "time": "2025-06-02 03:20"},
                "duration": 375,
                "airplane": "Airbus A321neo",
                "airline": "Aer Lingus",
                "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/EI.png",
                "travel_class": "Economy",
                "flight_number": "EI 110",
                "legroom": "30 in",
                "overnight": True,
                "often_delayed_by_over_30_min": True,
            },
            {
                "departure_airport": {"name": "Dublin Airport", "id": "DUB", "time": "2025-06-02 05:10"},
                "arrival_airport": {
                    "name": "Paris Charles de Gaulle Airport",
                    "id": "CDG",
                    "time": "2025-06-02 08:35",
                },
                "duration": 85,
                "airplane": "Airbus A320",
                "airline": "Aer Lingus",
                "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/EI.png",
                "travel_class": "Economy",
                "flight_number": "EI 520",
                "ticket_also_sold_by": ["British Airways"],
            },
        ],
        "layovers": [{"duration": 110, "name": "Dublin Airport", "id": "DUB"}],
        "total_duration": 570,
        "carbon_emissions": {"this_flight": 468000, "typical_for_this_route": 420000, "difference_percent": 11},
        "price": 521,
        "type": "Round trip",
        "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/EI.png",
        "booking_token": "sample-ei110-ei520",
    },
]


class FlightProvider(Protocol):
    async def search(self, request: TripRequest) -> TransportationDetails:
        ...


class StaticFlightProvider:
    """Returns the bundled sample flights regardless of the trip parameters."""

    async def search(self, request: TripRequest) -> TransportationDetails:
        return TransportationDetails.model_validate({"best_flights": SAMPLE_BEST_FLIGHTS})


class SerpApiFlightProvider:
    """
    Google Flights search through SerpApi.
    Source and destination must be IATA airport codes; anything else yields no options.
    Errors are logged and produce an empty result so plan generation is never blocked on flights.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        currency: str = "USD",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.currency = currency
        self._transport = transport

    async def search(self, request: TripRequest) -> TransportationDetails:
        departure = request.source.strip()
        arrival = request.destination.strip()
        if not (_IATA_CODE.match(departure) and _IATA_CODE.match(arrival)) or request.startDate is None:
            logger.info("Skipping flight search for %s -> %s: airport codes and start date required", departure, arrival)
            return TransportationDetails()

        params: Dict[str, Any] = {
            "engine": "google_flights",
            "departure_id": departure.upper(),
            "arrival_id": arrival.upper(),
            "outbound_date": request.startDate.isoformat(),
            "adults": request.travelers,
            "currency": self.currency,
            "api_key": self.api_key,
        }
        if request.endDate is not None:
            params["return_date"] = request.endDate.isoformat()
        else:
            params["type"] = 2  # one-way

        try:
            async with httpx.AsyncClient(timeout=15.0, transport=self._transport) as client:
                resp = await client.get(self.base_url, params=params)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Flight search failed for %s -> %s: %s", departure, arrival, exc)
            return TransportationDetails()

        options: List[FlightOption] = []
        for raw in data.get("best_flights") or []:
            try:
                options.append(FlightOption.model_validate(raw))
            except PydanticValidationError as exc:
                logger.info("Dropping malformed flight option: %s", exc.errors()[:1])
        return TransportationDetails(best_flights=options)


def get_flight_provider(provider: str, serp_api_key: str, base_url: str, currency: str) -> FlightProvider:
    if provider == "serpapi":
        if serp_api_key:
            return SerpApiFlightProvider(api_key=serp_api_key, base_url=base_url, currency=currency)
        logger.info("SerpApi key not configured; using sample flight data.")
    return StaticFlightProvider()
