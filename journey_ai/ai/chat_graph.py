from __future__ import annotations

import logging
from typing import Any, Dict, List, TypedDict

from langgraph.graph import END, StateGraph

from journey_ai.ai.llm import LanguageModel, Turn
from journey_ai.ai.prompts import build_chat_turns
from journey_ai.api.models.schemas import ChatMessage, TravelPlan
from journey_ai.core.errors import EmptyModelReplyError, UpstreamServiceError

logger = logging.getLogger(__name__)

EMPTY_REPLY_TEXT = "Sorry, I couldn't generate a response."
CHAT_ERROR_TEXT = (
    "Sorry, there was an error processing your request. Please try again or check your API key in settings."
)


class ChatState(TypedDict):
    plan: TravelPlan
    history: List[ChatMessage]
    question: str
    api_key: str
    turns: List[Turn]
    reply_text: str
    failed: bool


async def build_turns(state: ChatState) -> Dict[str, Any]:
    return {"turns": build_chat_turns(state["plan"], state["history"], state["question"])}


def build_chat_graph(language_model: LanguageModel, temperature: float, max_output_tokens: int):
    async def call_model(state: ChatState) -> Dict[str, Any]:
        try:
            text = await language_model.generate(
                state["turns"],
                api_key=state["api_key"],
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            )
        except EmptyModelReplyError:
            logger.info("Chat reply came back without text")
            return {"reply_text": EMPTY_REPLY_TEXT, "failed": False}
        except UpstreamServiceError as exc:
            logger.warning("Chat reply failed: %s", exc.detail)
            return {"reply_text": CHAT_ERROR_TEXT, "failed": True}
        return {"reply_text": text.strip() or EMPTY_REPLY_TEXT, "failed": False}

    builder = StateGraph(ChatState)
    builder.add_node("build_turns", build_turns)
    builder.add_node("call_model", call_model)
    builder.set_entry_point("build_turns")
    builder.add_edge("build_turns", "call_model")
    builder.add_edge("call_model", END)
    return builder.compile()


async def generate_chat_reply(
    plan: TravelPlan,
    history: List[ChatMessage],
    question: str,
    *,
    api_key: str,
    language_model: LanguageModel,
    temperature: float,
    max_output_tokens: int,
) -> ChatMessage:
    """
    Answer one follow-up question about ``plan``. Model failures are returned as an
    assistant message instead of being raised.
    """
    graph = build_chat_graph(language_model, temperature, max_output_tokens)
    state: ChatState = {
        "plan": plan,
        "history": list(history),
        "question": question,
        "api_key": api_key,
        "turns": [],
        "reply_text": "",
        "failed": False,
    }
    try:
        result = await graph.ainvoke(state)
    except Exception as exc:
        logger.exception("Chat graph failed, returning error reply: %s", exc)
        return ChatMessage(role="assistant", content=CHAT_ERROR_TEXT)
    return ChatMessage(role="assistant", content=result["reply_text"])
