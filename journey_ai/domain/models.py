from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from journey_ai.api.models.schemas import ChatMessage, TravelPlan, TripRequest


@dataclass
class PlanSession:
    id: str
    request: TripRequest
    plan: TravelPlan
    created_at: datetime
    conversation: List[ChatMessage] = field(default_factory=list)
    chat_in_flight: bool = False

    def to_api_model(self):
        from journey_ai.api.models.schemas import PlanSessionResponse

        return PlanSessionResponse(
            id=self.id,
            request=self.request,
            plan=self.plan,
            createdAt=self.created_at,
        )
