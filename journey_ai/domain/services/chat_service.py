from __future__ import annotations

import logging
from typing import List

from journey_ai.ai.chat_graph import CHAT_ERROR_TEXT, generate_chat_reply
from journey_ai.ai.llm import LanguageModel
from journey_ai.ai.prompts import greeting_for
from journey_ai.api.models.schemas import ChatMessage
from journey_ai.core.config import Settings
from journey_ai.core.errors import ConflictError, CredentialMissingError, ValidationError
from journey_ai.domain.models import PlanSession
from journey_ai.domain.repositories import PlanSessionRepository
from journey_ai.domain.settings_store import GEMINI_API_KEY, SettingsStore

logger = logging.getLogger(__name__)


class ChatService:
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

    async def open_conversation(self, session_id: str) -> List[ChatMessage]:
        session = await self.repo.get(session_id)
        self._seed(session)
        return list(session.conversation)

    async def send_message(self, session_id: str, text: str) -> ChatMessage:
        session = await self.repo.get(session_id)
        question = text.strip()
        if not question:
            raise ValidationError("message is required", {"field": "message", "reason": "Type a question first."})
        if session.chat_in_flight:
            raise ConflictError("A chat reply is still being generated")

        self._seed(session)
        history = list(session.conversation)
        session.conversation.append(ChatMessage(role="user", content=question))
        session.chat_in_flight = True
        try:
            reply = await self._reply(session, history, question)
        finally:
            session.chat_in_flight = False
        session.conversation.append(reply)
        return reply

    async def _reply(self, session: PlanSession, history: List[ChatMessage], question: str) -> ChatMessage:
        try:
            api_key = self.settings_store.require(GEMINI_API_KEY)
        except CredentialMissingError:
            logger.info("Chat on %s attempted without a model API key", session.id)
            return ChatMessage(role="assistant", content=CHAT_ERROR_TEXT)
        return await generate_chat_reply(
            session.plan,
            history,
            question,
            api_key=api_key,
            language_model=self.language_model,
            temperature=self.config.chat_temperature,
            max_output_tokens=self.config.chat_max_output_tokens,
        )

    def _seed(self, session: PlanSession) -> None:
        if not session.conversation:
            session.conversation.append(ChatMessage(role="assistant", content=greeting_for(session.plan)))
