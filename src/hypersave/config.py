"""Configuration for the Hypersave SDK."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .exceptions import DEFAULT_TIMEOUT_MS, AuthenticationError, ValidationError

# ============================================
# Environment Variables
# ============================================
HYPERSAVE_API_KEY = 'HYPERSAVE_API_KEY'
HYPERSAVE_BASE_URL = 'HYPERSAVE_BASE_URL'
DEFAULT_HYPERSAVE_BASE_URL = 'https://api.hypersave.io'
HYPERSAVE_TIMEOUT_MS = 'HYPERSAVE_TIMEOUT_MS'
DEFAULT_HYPERSAVE_TIMEOUT_MS = DEFAULT_TIMEOUT_MS
HYPERSAVE_USER_ID = 'HYPERSAVE_USER_ID'


class HypersaveConfig(BaseModel):
    """Immutable client configuration."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    base_url: str = DEFAULT_HYPERSAVE_BASE_URL
    timeout_ms: int = DEFAULT_HYPERSAVE_TIMEOUT_MS
    user_id: Optional[str] = None

    @field_validator("base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, v: Optional[str]) -> str:
        return (v or DEFAULT_HYPERSAVE_BASE_URL).rstrip("/")

    @field_validator("timeout_ms", mode="before")
    @classmethod
    def _default_timeout(cls, v: Optional[int]) -> int:
        return v or DEFAULT_HYPERSAVE_TIMEOUT_MS

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def create(
        cls,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> "HypersaveConfig":
        """
        Build a configuration, failing fast on a missing API key.

        Raises:
            AuthenticationError: api_key is empty or missing
        """
        if not api_key:
            raise AuthenticationError("API key is required")
        return cls(api_key=api_key, base_url=base_url, timeout_ms=timeout_ms, user_id=user_id or None)

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "HypersaveConfig":
        """
        Build a configuration from HYPERSAVE_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            AuthenticationError: HYPERSAVE_API_KEY is not set
            ValidationError: HYPERSAVE_TIMEOUT_MS is not an integer
        """
        env = os.environ if environ is None else environ
        raw_timeout = env.get(HYPERSAVE_TIMEOUT_MS)
        timeout_ms = None
        if raw_timeout:
            try:
                timeout_ms = int(raw_timeout)
            except ValueError as e:
                raise ValidationError(
                    f"{HYPERSAVE_TIMEOUT_MS} must be an integer",
                    details={"value": raw_timeout},
                ) from e

        return cls.create(
            api_key=env.get(HYPERSAVE_API_KEY),
            base_url=env.get(HYPERSAVE_BASE_URL),
            timeout_ms=timeout_ms,
            user_id=env.get(HYPERSAVE_USER_ID),
        )
