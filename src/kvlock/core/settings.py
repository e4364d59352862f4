"""Lock settings loader."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from kvlock.utils.env import get_env, get_float_env, get_int_env


class LockSettings(BaseModel):
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = ""
    default_ttl_ms: int = Field(default=30000, gt=0)
    renew_every_ms: Optional[int] = Field(default=None, gt=0)
    socket_timeout_seconds: float = Field(default=5.0, gt=0)

    @model_validator(mode="after")
    def _renewal_inside_ttl(self) -> "LockSettings":
        if self.renew_every_ms is not None and self.renew_every_ms >= self.default_ttl_ms:
            raise ValueError("renew_every_ms must be shorter than default_ttl_ms")
        return self

    @classmethod
    def _validated(cls, data: Dict[str, Any]) -> "LockSettings":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid lock settings: {exc}") from exc

    @classmethod
    def from_file(cls, path: Path) -> "LockSettings":
        data = yaml.safe_load(path.read_text()) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid lock settings: {path} must contain a mapping")
        return cls._validated(data)

    @classmethod
    def from_env(cls) -> "LockSettings":
        data: Dict[str, Any] = {}
        url = get_env("KVLOCK_REDIS_URL", "REDIS_URL")
        if url is not None:
            data["redis_url"] = url
        prefix = get_env("KVLOCK_KEY_PREFIX")
        if prefix is not None:
            data["key_prefix"] = prefix
        ttl = get_int_env("KVLOCK_DEFAULT_TTL_MS")
        if ttl is not None:
            data["default_ttl_ms"] = ttl
        renew = get_int_env("KVLOCK_RENEW_EVERY_MS")
        if renew is not None:
            data["renew_every_ms"] = renew
        timeout = get_float_env("KVLOCK_SOCKET_TIMEOUT")
        if timeout is not None:
            data["socket_timeout_seconds"] = timeout
        return cls._validated(data)
