"""Lock error types."""

from __future__ import annotations


class LockError(Exception):
    """Base class for lock failures."""


class StoreUnavailable(LockError):
    """The store could not be reached or timed out.

    The outcome of the interrupted operation is unknown: the write may have
    landed server-side before the response was lost. Callers must not read
    this as "not acquired" or "not held".
    """
