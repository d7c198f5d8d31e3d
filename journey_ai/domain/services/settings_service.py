from __future__ import annotations

from journey_ai.api.models.schemas import CredentialView, SettingsResponse, UpdateSettingsRequest
from journey_ai.domain.settings_store import GEMINI_API_KEY, SERP_API_KEY, SettingsStore


def mask_secret(value: str) -> str:
    if not value:
        return ""
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"


class SettingsService:
    def __init__(self, store: SettingsStore):
        self.store = store

    def _view(self, key: str) -> CredentialView:
        value = self.store.get(key)
        return CredentialView(
            configured=bool(value),
            maskedValue=mask_secret(value),
            source=self.store.source(key),
            locked=self.store.is_locked(key),
        )

    def get_settings(self) -> SettingsResponse:
        return SettingsResponse(gemini_api_key=self._view(GEMINI_API_KEY), serp_api_key=self._view(SERP_API_KEY))

    def update_settings(self, body: UpdateSettingsRequest) -> SettingsResponse:
        if body.gemini_api_key is not None:
            self.store.save(GEMINI_API_KEY, body.gemini_api_key)
        if body.serp_api_key is not None:
            self.store.save(SERP_API_KEY, body.serp_api_key)
        return self.get_settings()
