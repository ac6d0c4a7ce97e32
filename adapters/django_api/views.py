"""
Tradebook Django Adapter Views
==============================
Thin JSON views over the store and the derivation engines.

Reads take one snapshot from the store and derive from it; writes go
through the store, which enforces every write-path rule.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Callable

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_store, get_config_store
from core.config.settings import get_tradebook_settings
from core.event_store.persistence.errors import AppendResult
from core.http_api.contracts import BusinessReadRequest, PeriodReadRequest
from core.http_api.errors import (
    error_response,
    rejection_response,
    rejection_status,
    success_response,
)
from core.primitives.catalog import Product
from core.primitives.ledger import (
    EntrySide,
    Ledger,
    LedgerEntry,
    LedgerGroup,
    UnknownLedgerError,
    VoucherType,
)
from core.primitives.party import Party, PartyRole
from core.primitives.trade import Purchase, Sale
from engines.accounting.parties import compute_party_outstanding, summarize_outstanding
from engines.accounting.statements import (
    compute_account_statement,
    compute_balance_sheet,
    compute_day_book,
    compute_profit_loss_statement,
    compute_trial_balance,
    trial_balance_totals,
)
from engines.stock.derivation import (
    compute_dashboard_stats,
    compute_profit_loss_items,
    compute_stock_items,
    get_product_by_id,
)
from engines.tax.gst import compute_gst_report, effective_gst_percent

logger = logging.getLogger("tradebook.http")


# ══════════════════════════════════════════════════════════════
# PARSING HELPERS
# ══════════════════════════════════════════════════════════════

def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _parse_uuid(value: Any, field_name: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise ValueError(f"{field_name} must be a valid UUID.") from exc


def _parse_date(value: Any, field_name: str) -> date:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be an ISO date (YYYY-MM-DD).")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"{field_name} must be an ISO date (YYYY-MM-DD).") from exc


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        # amounts arrive as JSON numbers; keep them exact
        parsed = json.loads(request.body.decode("utf-8"), parse_float=Decimal)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _business_read(request: HttpRequest) -> BusinessReadRequest:
    business_id_raw = request.GET.get("business_id")
    if business_id_raw is None:
        raise ValueError("business_id is required.")
    return BusinessReadRequest(business_id=_parse_uuid(business_id_raw, "business_id"))


def _period_read(request: HttpRequest) -> PeriodReadRequest:
    contract = _business_read(request)
    for name in ("start", "end"):
        if request.GET.get(name) is None:
            raise ValueError(f"{name} is required.")
    return PeriodReadRequest(
        business_id=contract.business_id,
        start=_parse_date(request.GET["start"], "start"),
        end=_parse_date(request.GET["end"], "end"),
    )


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


def _write_response(result: AppendResult, status: int = 201) -> JsonResponse:
    if not result.accepted:
        logger.info(
            "write rejected: %s (%s)",
            result.rejection.code, result.rejection.message,
        )
        return JsonResponse(
            rejection_response(result.rejection),
            status=rejection_status(result.rejection),
        )
    return JsonResponse(success_response(result.entity.to_dict()), status=status)


def _dispatch_read(reader: Callable, parse: Callable, request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    try:
        contract = parse(request)
        data = reader(contract, request)
    except ValueError as exc:
        return _json_error("INVALID_REQUEST", str(exc), status=400)
    except UnknownLedgerError as exc:
        return _json_error("UNKNOWN_LEDGER", str(exc), status=404)
    return JsonResponse(success_response(data))


def _dispatch_write(writer: Callable, request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    try:
        body = _parse_json_body(request)
        business_id = _parse_uuid(body["business_id"], "business_id")
        return writer(build_store(business_id), body)
    except KeyError as exc:
        return _json_error("INVALID_REQUEST", f"Missing field: {exc.args[0]}", status=400)
    except (TypeError, ValueError) as exc:
        return _json_error("INVALID_REQUEST", str(exc), status=400)


# ══════════════════════════════════════════════════════════════
# READS
# ══════════════════════════════════════════════════════════════

def _read_stock(contract, request):
    snapshot = build_store(contract.business_id).fetch_all()
    items = compute_stock_items(snapshot.products, snapshot.purchases, snapshot.sales)
    return [item.to_dict() for item in items]


def _read_profit_loss(contract, request):
    snapshot = build_store(contract.business_id).fetch_all()
    items = compute_profit_loss_items(snapshot.products, snapshot.purchases, snapshot.sales)
    return [item.to_dict() for item in items]


def _read_dashboard(contract, request):
    snapshot = build_store(contract.business_id).fetch_all()
    stock_items = compute_stock_items(snapshot.products, snapshot.purchases, snapshot.sales)
    profit_loss_items = compute_profit_loss_items(
        snapshot.products, snapshot.purchases, snapshot.sales,
    )
    return compute_dashboard_stats(snapshot.products, stock_items, profit_loss_items).to_dict()


def _read_trial_balance(contract, request):
    accounts = build_store(contract.business_id).fetch_accounts()
    rows = compute_trial_balance(accounts.ledgers, accounts.vouchers)
    total_debit, total_credit = trial_balance_totals(rows)
    return {
        "rows": [row.to_dict() for row in rows],
        "total_debit": str(total_debit),
        "total_credit": str(total_credit),
    }


def _read_day_book(contract, request):
    on = _parse_date(request.GET.get("date"), "date")
    accounts = build_store(contract.business_id).fetch_accounts()
    return compute_day_book(accounts.vouchers, on).to_dict()


def _read_gst_report(contract, request):
    snapshot = build_store(contract.business_id).fetch_all()
    return compute_gst_report(
        snapshot.sales, snapshot.purchases, contract.start, contract.end,
    ).to_dict()


def _read_profit_loss_statement(contract, request):
    accounts = build_store(contract.business_id).fetch_accounts()
    return compute_profit_loss_statement(
        accounts.ledgers, accounts.vouchers, contract.start, contract.end,
    ).to_dict()


def _read_balance_sheet(contract, request):
    accounts = build_store(contract.business_id).fetch_accounts()
    return compute_balance_sheet(
        accounts.ledgers, accounts.vouchers, contract.start, contract.end,
    ).to_dict()


def _read_account_statement(contract, request):
    ledger_id = request.GET.get("ledger_id")
    if not ledger_id:
        raise ValueError("ledger_id is required.")
    accounts = build_store(contract.business_id).fetch_accounts()
    for ledger in accounts.ledgers:
        if ledger.ledger_id == ledger_id:
            return compute_account_statement(
                ledger, accounts.vouchers, contract.start, contract.end,
            ).to_dict()
    raise UnknownLedgerError(ledger_id)


def _read_parties(contract, request):
    parties = build_store(contract.business_id).fetch_parties()
    role = request.GET.get("role")
    if role:
        wanted = PartyRole(role)
        parties = [p for p in parties if p.role == wanted]
    return [party.to_dict() for party in parties]


def _read_party_outstanding(contract, request):
    store = build_store(contract.business_id)
    snapshot = store.fetch_all()
    rows = compute_party_outstanding(store.fetch_parties(), snapshot.sales, snapshot.purchases)
    return {
        "rows": [row.to_dict() for row in rows],
        "summary": summarize_outstanding(rows).to_dict(),
    }


# ══════════════════════════════════════════════════════════════
# WRITES
# ══════════════════════════════════════════════════════════════

def _parse_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a JSON boolean (true or false).")
    return value


def _write_product(store, body):
    def build(product_id):
        return Product(
            product_id=product_id,
            name=body["name"],
            brand=body.get("brand", ""),
            category=body.get("category", ""),
            purchase_rate=body["purchase_rate"],
            selling_rate=body["selling_rate"],
            gst_percent=body.get("gst_percent", 0),
            opening_stock=body.get("opening_stock", 0),
            reorder_level=body.get("reorder_level", 0),
        )

    if body.get("product_id"):
        return _write_response(store.add_product(build(body["product_id"])))
    prefix = get_tradebook_settings().product_id_prefix
    return _write_response(store.issue_product(id_prefix=prefix, build=build))


def _trade_defaults(store, body):
    """Resolve product, date, GST rate and the inter-state flag for a trade line."""
    product = get_product_by_id(store.fetch_all().products, body["product_id"])
    txn_date = _parse_date(body["date"], "date")
    gst_percent = body.get("gst_percent")
    if gst_percent is None and product is not None:
        gst_percent = effective_gst_percent(product, get_config_store())
    inter_state = _parse_bool(body.get("inter_state", False), "inter_state")
    return product, txn_date, gst_percent or 0, inter_state


def _write_purchase(store, body):
    product, txn_date, gst_percent, inter_state = _trade_defaults(store, body)
    rate = body.get("purchase_rate")
    if rate is None and product is not None:
        rate = product.purchase_rate

    def build(invoice_no):
        return Purchase.record(
            invoice_no=invoice_no,
            supplier=body["supplier"],
            product_id=body["product_id"],
            quantity=body["quantity"],
            purchase_rate=rate if rate is not None else body["purchase_rate"],
            gst_percent=gst_percent,
            date=txn_date,
            inter_state=inter_state,
        )

    if body.get("invoice_no"):
        return _write_response(store.append_purchase(build(body["invoice_no"])))
    return _write_response(store.issue_purchase(
        invoice_prefix=get_tradebook_settings().purchase_invoice_prefix,
        issued_on=txn_date,
        build=build,
    ))


def _write_sale(store, body):
    product, txn_date, gst_percent, inter_state = _trade_defaults(store, body)
    rate = body.get("selling_rate")
    if rate is None and product is not None:
        rate = product.selling_rate

    def build(invoice_no):
        return Sale.record(
            invoice_no=invoice_no,
            customer=body["customer"],
            product_id=body["product_id"],
            quantity=body["quantity"],
            selling_rate=rate if rate is not None else body["selling_rate"],
            gst_percent=gst_percent,
            date=txn_date,
            inter_state=inter_state,
        )

    if body.get("invoice_no"):
        return _write_response(store.append_sale(build(body["invoice_no"])))
    return _write_response(store.issue_sale(
        invoice_prefix=get_tradebook_settings().sale_invoice_prefix,
        issued_on=txn_date,
        build=build,
    ))


def _write_party(store, body):
    role = PartyRole(body["role"])

    def build(party_id):
        return Party(
            party_id=party_id,
            role=role,
            name=body["name"],
            contact_person=body.get("contact_person", ""),
            email=body.get("email", ""),
            phone=body.get("phone", ""),
            address=body.get("address", ""),
            city=body.get("city", ""),
            state=body.get("state", ""),
            pincode=body.get("pincode", ""),
            gstin=body.get("gstin", ""),
            opening_balance=body.get("opening_balance", 0),
        )

    if body.get("party_id"):
        return _write_response(store.add_party(build(body["party_id"])))
    prefix = get_tradebook_settings().party_id_prefix(role)
    return _write_response(store.issue_party(role=role, id_prefix=prefix, build=build))


def _write_ledger(store, body):
    ledger = Ledger(
        ledger_id=body["ledger_id"],
        name=body["name"],
        group=LedgerGroup(body["group"]),
        opening_balance=body.get("opening_balance", 0),
    )
    return _write_response(store.create_ledger(ledger))


def _write_voucher(store, body):
    raw_entries = body["entries"]
    if not isinstance(raw_entries, list):
        raise ValueError("entries must be a list.")
    entries = tuple(
        LedgerEntry(
            ledger_id=raw["ledger_id"],
            side=EntrySide(raw["side"]),
            amount=raw["amount"],
            ledger_name=raw.get("ledger_name", ""),
            description=raw.get("description", ""),
        )
        for raw in raw_entries
    )
    result = store.post_voucher(
        voucher_type=VoucherType(body["voucher_type"]),
        date=_parse_date(body["date"], "date"),
        narration=body.get("narration", ""),
        entries=entries,
        reference_number=body.get("reference_number"),
        party_name=body.get("party_name"),
    )
    return _write_response(result)


# ══════════════════════════════════════════════════════════════
# VIEWS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def stock_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_stock, _business_read, request)


@csrf_exempt
def profit_loss_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_profit_loss, _business_read, request)


@csrf_exempt
def dashboard_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_dashboard, _business_read, request)


@csrf_exempt
def trial_balance_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_trial_balance, _business_read, request)


@csrf_exempt
def day_book_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_day_book, _business_read, request)


@csrf_exempt
def gst_report_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_gst_report, _period_read, request)


@csrf_exempt
def profit_loss_statement_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_profit_loss_statement, _period_read, request)


@csrf_exempt
def balance_sheet_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_balance_sheet, _period_read, request)


@csrf_exempt
def account_statement_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_account_statement, _period_read, request)


@csrf_exempt
def products_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(_write_product, request)


@csrf_exempt
def purchases_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(_write_purchase, request)


@csrf_exempt
def sales_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(_write_sale, request)


@csrf_exempt
def ledgers_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(_write_ledger, request)


@csrf_exempt
def vouchers_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_write(_write_voucher, request)


@csrf_exempt
def parties_view(request: HttpRequest) -> JsonResponse:
    if request.method == "GET":
        return _dispatch_read(_read_parties, _business_read, request)
    return _dispatch_write(_write_party, request)


@csrf_exempt
def party_outstanding_view(request: HttpRequest) -> JsonResponse:
    return _dispatch_read(_read_party_outstanding, _business_read, request)
