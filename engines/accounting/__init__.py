"""
Tradebook Accounting Engine
=============================
Voucher posting, statements, party outstanding and the standard
chart of ledgers.
"""

from engines.accounting.posting import LedgerBook, post_voucher
from engines.accounting.parties import (
    OutstandingStatus,
    OutstandingSummary,
    PartyOutstanding,
    compute_party_outstanding,
    summarize_outstanding,
)
from engines.accounting.statements import (
    AccountStatement,
    BalanceSheet,
    BalanceType,
    DayBook,
    DayBookLine,
    ProfitLossStatement,
    TrialBalanceRow,
    compute_account_statement,
    compute_balance_sheet,
    compute_day_book,
    compute_profit_loss_statement,
    compute_trial_balance,
    trial_balance_totals,
)
from engines.accounting.vouchers import (
    build_purchase_voucher,
    build_sales_voucher,
    purchase_voucher_entries,
    sales_voucher_entries,
    default_ledgers,
)

__all__ = [
    "LedgerBook",
    "post_voucher",
    "OutstandingStatus",
    "OutstandingSummary",
    "PartyOutstanding",
    "compute_party_outstanding",
    "summarize_outstanding",
    "AccountStatement",
    "BalanceSheet",
    "BalanceType",
    "DayBook",
    "DayBookLine",
    "ProfitLossStatement",
    "TrialBalanceRow",
    "compute_account_statement",
    "compute_balance_sheet",
    "compute_day_book",
    "compute_profit_loss_statement",
    "compute_trial_balance",
    "trial_balance_totals",
    "build_purchase_voucher",
    "build_sales_voucher",
    "default_ledgers",
    "purchase_voucher_entries",
    "sales_voucher_entries",
]
