from __future__ import annotations

import logging
from typing import Any, Dict, Optional, TypedDict

from langgraph.graph import END, StateGraph

from journey_ai.ai.interpreter import interpret_reply
from journey_ai.ai.llm import LanguageModel, Turn
from journey_ai.ai.prompts import build_plan_prompt
from journey_ai.api.models.schemas import TravelPlan, TripRequest
from journey_ai.external.flights import FlightProvider

logger = logging.getLogger(__name__)


class PlanState(TypedDict):
    trip_request: TripRequest
    api_key: str
    prompt: str
    raw_reply: Optional[str]
    plan: Optional[TravelPlan]
    used_fallback: bool


async def build_prompt(state: PlanState) -> Dict[str, Any]:
    return {"prompt": build_plan_prompt(state["trip_request"])}


async def interpret(state: PlanState) -> Dict[str, Any]:
    plan, used_fallback = interpret_reply(state["raw_reply"] or "", state["trip_request"])
    return {"plan": plan, "used_fallback": used_fallback}


def _route_after_interpret(state: PlanState) -> str:
    return "transportation" if state["trip_request"].includeTransportation else "done"


def build_plan_graph(
    language_model: LanguageModel,
    flight_provider: FlightProvider,
    temperature: float,
    max_output_tokens: int,
):
    async def call_model(state: PlanState) -> Dict[str, Any]:
        reply = await language_model.generate(
            [Turn(role="user", text=state["prompt"])],
            api_key=state["api_key"],
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        return {"raw_reply": reply}

    async def attach_transportation(state: PlanState) -> Dict[str, Any]:
        plan = state["plan"]
        details = await flight_provider.search(state["trip_request"])
        logger.info("Attached %d flight options to plan", len(details.best_flights))
        return {"plan": plan.model_copy(update={"transportation": details})}

    builder = StateGraph(PlanState)
    builder.add_node("build_prompt", build_prompt)
    builder.add_node("call_model", call_model)
    builder.add_node("interpret_reply", interpret)
    builder.add_node("attach_transportation", attach_transportation)

    builder.set_entry_point("build_prompt")
    builder.add_edge("build_prompt", "call_model")
    builder.add_edge("call_model", "interpret_reply")
    builder.add_conditional_edges(
        "interpret_reply",
        _route_after_interpret,
        {"transportation": "attach_transportation", "done": END},
    )
    builder.add_edge("attach_transportation", END)
    return builder.compile()


async def generate_travel_plan(
    request: TripRequest,
    *,
    api_key: str,
    language_model: LanguageModel,
    flight_provider: FlightProvider,
    temperature: float,
    max_output_tokens: int,
) -> TravelPlan:
    """
    Run the LangGraph plan pipeline. Language model failures propagate to the caller;
    unparseable replies are replaced by the fallback plan inside the graph.
    """
    graph = build_plan_graph(language_model, flight_provider, temperature, max_output_tokens)
    initial_state: PlanState = {
        "trip_request": request,
        "api_key": api_key,
        "prompt": "",
        "raw_reply": None,
        "plan": None,
        "used_fallback": False,
    }
    result = await graph.ainvoke(initial_state)
    if result["used_fallback"]:
        logger.info("Plan for %s built from fallback template", request.destination)
    return result["plan"]
