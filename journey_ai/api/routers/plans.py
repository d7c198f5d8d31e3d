from fastapi import APIRouter, Depends, status

from journey_ai.api.models.schemas import PlanSessionResponse, TripRequest
from journey_ai.core.errors import NotFoundError
from journey_ai.dependencies import get_plan_service
from journey_ai.domain.services.plan_service import TravelPlanService

router = APIRouter(prefix="/plans", tags=["plans"])


@router.post(
    "",
    response_model=PlanSessionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_plan(body: TripRequest, svc: TravelPlanService = Depends(get_plan_service)):
    session = await svc.create_plan(body)
    return session.to_api_model()


@router.get("/{session_id}", response_model=PlanSessionResponse, response_model_exclude_none=True)
async def get_plan(session_id: str, svc: TravelPlanService = Depends(get_plan_service)):
    try:
        session = await svc.get_plan(session_id)
    except KeyError:
        raise NotFoundError("Travel plan not found")
    return session.to_api_model()
