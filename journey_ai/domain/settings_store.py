"""
Credential settings with build-time precedence.

Values injected through the environment are authoritative and never written
to disk; everything else lives in a small JSON key-value file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Literal, Mapping, Optional

from journey_ai.core.errors import CredentialMissingError, ValidationError

logger = logging.getLogger(__name__)

GEMINI_API_KEY = "gemini_api_key"
SERP_API_KEY = "serp_api_key"
CREDENTIAL_KEYS = (GEMINI_API_KEY, SERP_API_KEY)

CredentialSource = Literal["environment", "stored", "unset"]


class LocalSettingsStorage:
    """JSON-file key-value storage. Reads go to disk every time so separate instances agree."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Mapping[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(dict(data), fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._write(data)


class SettingsStore:
    def __init__(self, storage: LocalSettingsStorage, build_time: Mapping[str, str]):
        self.storage = storage
        self._build_time = {key: value for key, value in build_time.items() if value}

    def _check_key(self, key: str) -> None:
        if key not in CREDENTIAL_KEYS:
            raise ValidationError(f"Unknown setting: {key}", {"field": key, "reason": "unsupported setting"})

    def is_locked(self, key: str) -> bool:
        self._check_key(key)
        return key in self._build_time

    def source(self, key: str) -> CredentialSource:
        if self.is_locked(key):
            return "environment"
        return "stored" if self.storage.get(key) else "unset"

    def get(self, key: str) -> str:
        if self.is_locked(key):
            return self._build_time[key]
        return self.storage.get(key) or ""

    def save(self, key: str, value: str) -> str:
        """
        Persist a user-supplied value and return the effective one.
        Build-time values are left untouched; an empty string clears the stored value.
        """
        if self.is_locked(key):
            logger.info("Ignoring update to %s: value is provided by the environment", key)
            return self.get(key)
        value = value.strip()
        if value:
            self.storage.set(key, value)
        else:
            self.storage.delete(key)
        return self.get(key)

    def require(self, key: str) -> str:
        value = self.get(key)
        if not value:
            raise CredentialMissingError(key)
        return value
