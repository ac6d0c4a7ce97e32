"""
Tradebook Core Time — Public API
==================================
Explicit clock protocol. No datetime.now() in engine logic.
"""

from core.time.clock import Clock, FixedClock, SystemClock, today_utc

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "today_utc",
]
