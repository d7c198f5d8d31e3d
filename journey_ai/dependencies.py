from fastapi import Depends

from journey_ai.ai.llm import LanguageModel, get_language_model
from journey_ai.core.config import Settings, settings
from journey_ai.domain.repositories import InMemoryPlanSessionRepository, PlanSessionRepository
from journey_ai.domain.services.chat_service import ChatService
from journey_ai.domain.services.plan_service import TravelPlanService
from journey_ai.domain.services.settings_service import SettingsService
from journey_ai.domain.settings_store import GEMINI_API_KEY, SERP_API_KEY, LocalSettingsStorage, SettingsStore

_repo: PlanSessionRepository = InMemoryPlanSessionRepository()
_settings_store = SettingsStore(
    LocalSettingsStorage(settings.settings_store_path),
    build_time={GEMINI_API_KEY: settings.gemini_api_key, SERP_API_KEY: settings.serp_api_key},
)
_language_model: LanguageModel = get_language_model(settings)


def get_config() -> Settings:
    return settings


def get_plan_repo() -> PlanSessionRepository:
    return _repo


def get_settings_store() -> SettingsStore:
    return _settings_store


def get_language_model_dep() -> LanguageModel:
    return _language_model


def get_plan_service(
    repo: PlanSessionRepository = Depends(get_plan_repo),
    store: SettingsStore = Depends(get_settings_store),
    language_model: LanguageModel = Depends(get_language_model_dep),
    config: Settings = Depends(get_config),
) -> TravelPlanService:
    return TravelPlanService(repo=repo, settings_store=store, language_model=language_model, config=config)


def get_chat_service(
    repo: PlanSessionRepository = Depends(get_plan_repo),
    store: SettingsStore = Depends(get_settings_store),
    language_model: LanguageModel = Depends(get_language_model_dep),
    config: Settings = Depends(get_config),
) -> ChatService:
    return ChatService(repo=repo, settings_store=store, language_model=language_model, config=config)


def get_settings_service(store: SettingsStore = Depends(get_settings_store)) -> SettingsService:
    return SettingsService(store)


__all__ = [
    "get_config",
    "get_plan_repo",
    "get_settings_store",
    "get_language_model_dep",
    "get_plan_service",
    "get_chat_service",
    "get_settings_service",
    "settings",
]
