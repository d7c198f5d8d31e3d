import pytest

from journey_ai.core.errors import CredentialMissingError, ValidationError
from journey_ai.domain.services.settings_service import SettingsService, mask_secret
from journey_ai.api.models.schemas import UpdateSettingsRequest
from journey_ai.domain.settings_store import GEMINI_API_KEY, SERP_API_KEY, LocalSettingsStorage, SettingsStore


def _store(path, **build_time):
    return SettingsStore(LocalSettingsStorage(path), build_time=build_time)


def test_build_time_value_wins_over_saved_value(tmp_path):
    path = tmp_path / "settings.json"
    store = _store(path, gemini_api_key="env-key")

    store.save(GEMINI_API_KEY, "typed-in-key")

    assert store.get(GEMINI_API_KEY) == "env-key"
    assert store.is_locked(GEMINI_API_KEY)
    assert store.source(GEMINI_API_KEY) == "environment"
    assert not path.exists()


def test_saved_value_survives_fresh_load(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    _store(path).save(SERP_API_KEY, "  serp-123  ")

    reloaded = _store(path)

    assert reloaded.get(SERP_API_KEY) == "serp-123"
    assert reloaded.source(SERP_API_KEY) == "stored"
    assert reloaded.get(GEMINI_API_KEY) == ""
    assert reloaded.source(GEMINI_API_KEY) == "unset"


def test_empty_build_time_value_does_not_lock(tmp_path):
    store = _store(tmp_path / "settings.json", gemini_api_key="")
    store.save(GEMINI_API_KEY, "mine")

    assert not store.is_locked(GEMINI_API_KEY)
    assert store.get(GEMINI_API_KEY) == "mine"


def test_saving_empty_string_clears_value(tmp_path):
    store = _store(tmp_path / "settings.json")
    store.save(GEMINI_API_KEY, "mine")
    store.save(GEMINI_API_KEY, "")

    assert store.get(GEMINI_API_KEY) == ""


def test_require_raises_typed_error(tmp_path):
    store = _store(tmp_path / "settings.json")

    with pytest.raises(CredentialMissingError) as excinfo:
        store.require(GEMINI_API_KEY)

    assert excinfo.value.code == "CREDENTIAL_MISSING"
    assert excinfo.value.details == {"field": GEMINI_API_KEY}


def test_unknown_key_is_rejected(tmp_path):
    with pytest.raises(ValidationError):
        _store(tmp_path / "settings.json").get("openweather_key")


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert _store(path).get(GEMINI_API_KEY) == ""


def test_mask_secret():
    assert mask_secret("") == ""
    assert mask_secret("short") == "*****"
    assert mask_secret("AIzaSyExample1234") == "AIza*********1234"


def test_settings_service_reports_sources(tmp_path):
    svc = SettingsService(_store(tmp_path / "settings.json", serp_api_key="env-serp-key"))

    view = svc.update_settings(UpdateSettingsRequest(gemini_api_key="AIzaSyExample1234", serp_api_key="other"))

    assert view.gemini_api_key.configured
    assert view.gemini_api_key.source == "stored"
    assert not view.gemini_api_key.locked
    assert view.serp_api_key.locked
    assert view.serp_api_key.maskedValue == mask_secret("env-serp-key")
