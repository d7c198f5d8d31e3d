from fastapi import APIRouter, Depends

from journey_ai.api.models.schemas import ChatRequest, ChatResponse, ConversationResponse
from journey_ai.core.errors import NotFoundError
from journey_ai.dependencies import get_chat_service
from journey_ai.domain.services.chat_service import ChatService

router = APIRouter(prefix="/plans", tags=["chat"])


@router.get("/{session_id}/chat", response_model=ConversationResponse)
async def open_conversation(session_id: str, chat_svc: ChatService = Depends(get_chat_service)):
    try:
        messages = await chat_svc.open_conversation(session_id)
    except KeyError:
        raise NotFoundError("Generate a travel plan before starting a chat")
    return ConversationResponse(messages=messages)


@router.post("/{session_id}/chat", response_model=ChatResponse)
async def send_chat_message(
    session_id: str,
    body: ChatRequest,
    chat_svc: ChatService = Depends(get_chat_service),
):
    try:
        reply = await chat_svc.send_message(session_id, body.message)
        messages = await chat_svc.open_conversation(session_id)
    except KeyError:
        raise NotFoundError("Generate a travel plan before starting a chat")
    return ChatResponse(reply=reply, messages=messages)
