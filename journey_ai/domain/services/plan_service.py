from __future__ import annotations

import logging
from datetime import datetime
from uuid import uuid4

from journey_ai.ai.llm import LanguageModel
from journey_ai.ai.plan_graph import generate_travel_plan
from journey_ai.api.models.schemas import TripRequest
from journey_ai.core.config import Settings
from journey_ai.core.errors import ValidationError
from journey_ai.domain.models import PlanSession
from journey_ai.domain.repositories import PlanSessionRepository
from journey_ai.domain.settings_store import GEMINI_API_KEY, SERP_API_KEY, SettingsStore
from journey_ai.external.flights import get_flight_provider

logger = logging.getLogger(__name__)

MAX_TRAVELERS = 20


class TravelPlanService:
    def __init__(
        self,
        repo: PlanSessionRepository,
        settings_store: SettingsStore,
        language_model: LanguageModel,
        config: Settings,
    ):
        self.repo = repo
        self.settings_store = settings_store
        self.language_model = language_model
        self.config = config

    async def create_plan(self, request: TripRequest) -> PlanSession:
        self._validate_request(request)
        api_key = self.settings_store.require(GEMINI_API_KEY)
        flight_provider = get_flight_provider(
            self.config.flight_provider,
            self.settings_store.get(SERP_API_KEY),
            self.config.serpapi_base_url,
            self.config.flight_currency,
        )
        plan = await generate_travel_plan(
            request,
            api_key=api_key,
            language_model=self.language_model,
            flight_provider=flight_provider,
            temperature=self.config.plan_temperature,
            max_output_tokens=self.config.plan_max_output_tokens,
        )
        session = PlanSession(
            id=f"plan_{uuid4().hex[:12]}",
            request=request,
            plan=plan,
            created_at=datetime.utcnow(),
        )
        await self.repo.save(session)
        logger.info("Created plan session %s for %s", session.id, request.destination)
        return session

    async def get_plan(self, session_id: str) -> PlanSession:
        return await self.repo.get(session_id)

    def _validate_request(self, request: TripRequest) -> None:
        for field in ("source", "destination", "budget", "interests"):
            if not getattr(request, field).strip():
                raise ValidationError(f"{field} is required", {"field": field, "reason": "This field is required."})
        if request.startDate is None or request.endDate is None:
            raise ValidationError(
                "travel dates are required",
                {"field": "startDate" if request.startDate is None else "endDate", "reason": "Select travel dates."},
            )
        if request.startDate > request.endDate:
            raise ValidationError(
                "dateRange is invalid",
                {"field": "endDate", "reason": "The end date must be on or after the start date."},
            )
        if not 1 <= request.travelers <= MAX_TRAVELERS:
            raise ValidationError(
                "travelers is out of range",
                {"field": "travelers", "reason": f"Between 1 and {MAX_TRAVELERS} travelers are supported."},
            )
