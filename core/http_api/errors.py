"""
Tradebook HTTP API - Error Mapping
==================================
Stable transport error mapping for store rejections.
"""

from __future__ import annotations

from typing import Any, Optional

from core.event_store.persistence.errors import Rejection, StoreRejectionCode
from core.http_api.contracts import HttpApiErrorBody, HttpApiResponse

_STATUS_BY_CODE = {
    StoreRejectionCode.UNKNOWN_PRODUCT: 404,
    StoreRejectionCode.UNKNOWN_LEDGER: 404,
    StoreRejectionCode.UNKNOWN_PARTY: 404,
    StoreRejectionCode.DUPLICATE_PRODUCT: 409,
    StoreRejectionCode.DUPLICATE_PARTY: 409,
    StoreRejectionCode.DUPLICATE_LEDGER: 409,
    StoreRejectionCode.DUPLICATE_ENTRY: 409,
    StoreRejectionCode.INSUFFICIENT_STOCK: 409,
    StoreRejectionCode.NEGATIVE_STOCK: 409,
    StoreRejectionCode.WRITE_CONFLICT: 409,
    StoreRejectionCode.INVALID_PRODUCT: 422,
    StoreRejectionCode.INVALID_PARTY: 422,
    StoreRejectionCode.IMBALANCED_VOUCHER: 422,
    StoreRejectionCode.INVALID_VOUCHER: 422,
    StoreRejectionCode.TRANSACTION_ABORTED: 500,
}


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(data: Any) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data).to_dict()


def rejection_status(rejection: Rejection) -> int:
    return _STATUS_BY_CODE.get(rejection.code, 400)


def rejection_response(rejection: Rejection) -> dict[str, Any]:
    """Store rejection as an error envelope; retryability travels in details."""
    return error_response(
        code=rejection.code,
        message=rejection.message,
        details={"retryable": rejection.retryable},
    )
