"""Environment helper utilities."""

from __future__ import annotations

import os
from typing import Optional


def get_env(*names: str, default: Optional[str] = None) -> Optional[str]:
    """Return the first non-empty value among ``names``."""
    for name in names:
        raw = os.getenv(name)
        if raw is not None and raw.strip():
            return raw.strip()
    return default


def get_int_env(name: str, *, default: Optional[int] = None) -> Optional[int]:
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def get_float_env(name: str, *, default: Optional[float] = None) -> Optional[float]:
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc

