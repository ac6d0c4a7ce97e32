"""
Tradebook Core — Event Store App Configuration
================================================
The append-only record of products, purchases, sales, ledgers and
vouchers. Every derived figure in Tradebook is recomputed from here.

This app:
- Persists immutable trade and voucher rows
- Enforces non-negative stock on the sale write path
- Keeps ledger balances in step with posted vouchers

This app does NOT:
- Store derived stock or profit figures
- Render reports
"""

from django.apps import AppConfig


class EventStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.event_store"
    label = "event_store"
    verbose_name = "Tradebook Event Store"
