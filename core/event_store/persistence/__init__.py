"""
Tradebook Event Store persistence public API.

The Django-backed service lives in core.event_store.persistence.service
and is imported from there once the app registry is ready.
"""

from core.event_store.persistence.errors import (
    AppendResult,
    Rejection,
    StoreRejectionCode,
)

__all__ = ["AppendResult", "Rejection", "StoreRejectionCode"]
