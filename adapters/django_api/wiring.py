"""
Tradebook Django Adapter Wiring
===============================
Builds the per-request store handle and the process-wide tax
configuration.

This module is adapter-only glue:
- the store is constructed per business and passed explicitly
- tax rules are read once from settings.TRADEBOOK["GST_RULES"]
"""

from __future__ import annotations

import threading
import uuid

from django.conf import settings

from core.config.rules import InMemoryConfigStore, TaxRule
from core.event_store.persistence.service import DjangoTradeStore
from core.time.clock import SystemClock

_CONFIG_LOCK = threading.Lock()
_CONFIG_STORE: InMemoryConfigStore | None = None


def build_store(business_id: uuid.UUID) -> DjangoTradeStore:
    return DjangoTradeStore(business_id, clock=SystemClock())


def _create_config_store() -> InMemoryConfigStore:
    store = InMemoryConfigStore()
    tradebook = getattr(settings, "TRADEBOOK", {}) or {}
    for raw in tradebook.get("GST_RULES", ()):
        store.add_tax_rule(TaxRule(
            tax_type=raw.get("tax_type", "GST"),
            rate_percent=str(raw["rate_percent"]),
            applies_to=tuple(raw.get("applies_to", ())),
            exemptions=tuple(raw.get("exemptions", ())),
        ))
    return store


def get_config_store() -> InMemoryConfigStore:
    """
    Lazy singleton tax configuration for adapter runtime.
    """
    global _CONFIG_STORE
    with _CONFIG_LOCK:
        if _CONFIG_STORE is None:
            _CONFIG_STORE = _create_config_store()
        return _CONFIG_STORE


def reset_config_store() -> None:
    """Drop the cached configuration (settings overrides in tests)."""
    global _CONFIG_STORE
    with _CONFIG_LOCK:
        _CONFIG_STORE = None
