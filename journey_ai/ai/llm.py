from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence

import httpx
from openai import AsyncOpenAI, OpenAIError

from journey_ai.core.config import Settings
from journey_ai.core.errors import EmptyModelReplyError, UpstreamServiceError

logger = logging.getLogger(__name__)

TurnRole = Literal["user", "model"]


@dataclass(frozen=True)
class Turn:
    role: TurnRole
    text: str


class LanguageModel(Protocol):
    async def generate(
        self,
        turns: Sequence[Turn],
        *,
        api_key: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        ...


class GeminiClient:
    """
    Thin adapter over the Gemini generateContent REST endpoint.
    The API key is supplied per call; nothing is cached between requests.
    """

    def __init__(
        self,
        model: str,
        base_url: str,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(
        self,
        turns: Sequence[Turn],
        *,
        api_key: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}
        body = {
            "contents": [{"role": turn.role, "parts": [{"text": turn.text}]} for turn in turns],
            "generationConfig": {"temperature": temperature, "maxOutputTokens": max_output_tokens},
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.endpoint, headers=headers, json=body)
        except httpx.HTTPError as exc:
            logger.warning("Gemini request failed: %s", exc)
            raise UpstreamServiceError("Language model request failed", {"reason": str(exc)}) from exc

        if resp.is_error:
            reason = _error_message(resp)
            logger.warning("Gemini returned %s: %s", resp.status_code, reason)
            raise UpstreamServiceError(
                f"Gemini API error: {reason}", {"status": resp.status_code, "reason": reason}
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.warning("Gemini returned a non-JSON body (status %s)", resp.status_code)
            raise UpstreamServiceError("Gemini returned a non-JSON body", {"status": resp.status_code}) from exc

        text = _candidate_text(payload)
        if text is None:
            raise EmptyModelReplyError("No content returned from the Gemini API")
        return text


def _error_message(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return resp.reason_phrase or f"HTTP {resp.status_code}"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return resp.reason_phrase or f"HTTP {resp.status_code}"


def _candidate_text(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


class OpenAIChatClient:
    """Same contract as GeminiClient, backed by the OpenAI chat completions API."""

    def __init__(
        self,
        model: str,
        timeout: float | None = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self.timeout = timeout
        self._http_client = http_client

    async def generate(
        self,
        turns: Sequence[Turn],
        *,
        api_key: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        client = AsyncOpenAI(api_key=api_key, timeout=self.timeout, max_retries=0, http_client=self._http_client)
        messages: List[Dict[str, str]] = [
            {"role": "assistant" if turn.role == "model" else "user", "content": turn.text} for turn in turns
        ]
        try:
            resp = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_output_tokens,
            )
        except OpenAIError as exc:
            logger.warning("OpenAI request failed: %s", exc)
            raise UpstreamServiceError("Language model request failed", {"reason": str(exc)}) from exc

        if not resp.choices or resp.choices[0].message.content is None:
            raise EmptyModelReplyError("No content returned from the OpenAI API")
        return resp.choices[0].message.content


def get_language_model(config: Settings) -> LanguageModel:
    if config.llm_provider == "openai":
        return OpenAIChatClient(model=config.openai_model, timeout=config.llm_timeout_seconds)
    return GeminiClient(
        model=config.gemini_model,
        base_url=config.gemini_base_url,
        timeout=config.llm_timeout_seconds,
    )
