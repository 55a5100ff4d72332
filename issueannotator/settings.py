"""
Plugin settings: defaults, lenient parsing and env overrides.

Persisted as a flat key-value mapping by whatever settings store the host
provides (see host.JsonSettingsStore).
"""

import os
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

DEFAULT_NOTICE_DURATION_MS = 3000
DEFAULT_ERROR_NOTICE_DURATION_MS = 5000

TOKEN_ENV_VAR = "YOUTRACK_API_TOKEN"
HOST_ENV_VAR = "YOUTRACK_HOST"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_duration(value: Any, default: int) -> int:
    """Parse a duration in milliseconds, falling back to default.

    Accepts ints and strings with a leading integer ("4000", "4000ms").
    Zero, negative and unparseable values give the default.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        parsed = int(value)
    elif isinstance(value, str):
        m = _LEADING_INT.match(value)
        if not m:
            return default
        parsed = int(m.group(1))
    else:
        return default
    return parsed if parsed > 0 else default


def _clean_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_host(host: Any) -> str:
    return _clean_str(host).rstrip("/")


@dataclass(frozen=True)
class Settings:
    api_token: str = ""
    host: str = ""
    notice_duration_ms: int = DEFAULT_NOTICE_DURATION_MS
    error_notice_duration_ms: int = DEFAULT_ERROR_NOTICE_DURATION_MS

    @property
    def has_credential(self) -> bool:
        return bool(self.api_token)

    @classmethod
    def from_data(cls, data: Optional[Dict[str, Any]]) -> "Settings":
        """Merge persisted data over the defaults."""
        data = data if isinstance(data, dict) else {}
        return cls(
            api_token=_clean_str(data.get("apiToken")),
            host=normalize_host(data.get("host")),
            notice_duration_ms=parse_duration(
                data.get("noticeDurationMs"), DEFAULT_NOTICE_DURATION_MS
            ),
            error_notice_duration_ms=parse_duration(
                data.get("errorNoticeDurationMs"), DEFAULT_ERROR_NOTICE_DURATION_MS
            ),
        )

    def to_data(self) -> Dict[str, Any]:
        return {
            "apiToken": self.api_token,
            "host": self.host,
            "noticeDurationMs": self.notice_duration_ms,
            "errorNoticeDurationMs": self.error_notice_duration_ms,
        }

    def with_env_overrides(self) -> "Settings":
        """Fill an empty token or host from YOUTRACK_API_TOKEN / YOUTRACK_HOST."""
        token = self.api_token or _clean_str(os.getenv(TOKEN_ENV_VAR))
        host = self.host or normalize_host(os.getenv(HOST_ENV_VAR))
        return replace(self, api_token=token, host=host)

    def updated(self, **changes: Any) -> "Settings":
        """Return a copy with changes applied through the same parsing rules."""
        data = self.to_data()
        keys = {
            "api_token": "apiToken",
            "host": "host",
            "notice_duration_ms": "noticeDurationMs",
            "error_notice_duration_ms": "errorNoticeDurationMs",
        }
        for name, value in changes.items():
            if name not in keys:
                raise TypeError(f"Unknown setting: {name}")
            if value is not None:
                data[keys[name]] = value
        return Settings.from_data(data)

    def masked_token(self) -> str:
        if not self.api_token:
            return "(not set)"
        if len(self.api_token) <= 8:
            return "*" * len(self.api_token)
        return f"{self.api_token[:4]}...{self.api_token[-4:]}"
