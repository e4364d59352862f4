"""Data models shared across the lock client."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field


class Lease(BaseModel):
    """Ownership proof returned by a successful acquisition."""

    name: str
    token: str
    ttl_ms: int = Field(gt=0)
    acquired_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    # Set by the renewal task once the store no longer carries our token.
    lost: bool = False
