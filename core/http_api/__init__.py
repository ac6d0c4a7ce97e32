"""
Tradebook HTTP API - Public API
===============================
"""

from core.http_api.contracts import (
    BusinessReadRequest,
    HttpApiErrorBody,
    HttpApiResponse,
    PeriodReadRequest,
)
from core.http_api.errors import (
    error_response,
    rejection_response,
    rejection_status,
    success_response,
)

__all__ = [
    "BusinessReadRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "PeriodReadRequest",
    "error_response",
    "rejection_response",
    "rejection_status",
    "success_response",
]
