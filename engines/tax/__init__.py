"""
Tradebook Tax Engine
======================
"""

from engines.tax.gst import (
    GSTReport,
    GSTSummary,
    SupplySummary,
    compute_gst_report,
    effective_gst_percent,
    effective_rate,
)

__all__ = [
    "GSTReport",
    "GSTSummary",
    "SupplySummary",
    "compute_gst_report",
    "effective_gst_percent",
    "effective_rate",
]
