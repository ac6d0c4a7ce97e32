"""
Tradebook Accounting Engine — Statements
==========================================
Engine: Accounting

Read-side aggregations over ledgers and posted vouchers: trial
balance, day book, account statement, profit & loss and balance
sheet. Every figure is recomputed from the vouchers passed in.

RULES:
- Pure functions: no I/O, no clock
- A ledger's opening_balance sits on its normal side; a negative
  opening balance sits on the opposite side
- Date windows are inclusive on both ends
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from core.primitives.ledger import (
    EntrySide,
    Ledger,
    LedgerGroup,
    Voucher,
    VoucherType,
)
from core.primitives.money import ZERO, sum_amounts


class BalanceType(Enum):
    DEBIT = "Debit"
    CREDIT = "Credit"
    ZERO = "Zero"


def _in_window(voucher: Voucher, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and voucher.date < start:
        return False
    if end is not None and voucher.date > end:
        return False
    return True


def _movements(
    vouchers: Iterable[Voucher],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Dict[str, Tuple[Decimal, Decimal]]:
    """ledger_id -> (total debit, total credit) for vouchers in the window."""
    totals: Dict[str, Tuple[Decimal, Decimal]] = {}
    for voucher in vouchers:
        if not _in_window(voucher, start, end):
            continue
        for entry in voucher.entries:
            debit, credit = totals.get(entry.ledger_id, (ZERO, ZERO))
            totals[entry.ledger_id] = (debit + entry.debit, credit + entry.credit)
    return totals


def _opening_sides(ledger: Ledger) -> Tuple[Decimal, Decimal]:
    """Opening balance split into (debit, credit)."""
    opening = ledger.opening_balance
    normal_is_debit = ledger.normal_balance == EntrySide.DEBIT
    if (opening >= ZERO) == normal_is_debit:
        return abs(opening), ZERO
    return ZERO, abs(opening)


def _normal_side_balance(ledger: Ledger, debit: Decimal, credit: Decimal) -> Decimal:
    if ledger.normal_balance == EntrySide.DEBIT:
        return ledger.opening_balance + debit - credit
    return ledger.opening_balance + credit - debit


# ══════════════════════════════════════════════════════════════
# TRIAL BALANCE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TrialBalanceRow:
    ledger_id: str
    ledger_name: str
    group: LedgerGroup
    debit_total: Decimal
    credit_total: Decimal
    balance: Decimal
    type: BalanceType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ledger_id": self.ledger_id,
            "ledger_name": self.ledger_name,
            "group": self.group.value,
            "debit_total": str(self.debit_total),
            "credit_total": str(self.credit_total),
            "balance": str(self.balance),
            "type": self.type.value,
        }


def compute_trial_balance(
    ledgers: Sequence[Ledger],
    vouchers: Iterable[Voucher] = (),
    as_of: Optional[date] = None,
) -> Tuple[TrialBalanceRow, ...]:
    """
    One row per ledger: opening balance plus every posted entry.

    type is Debit when debits exceed credits, Credit when credits
    exceed debits, Zero when they are equal; balance is the absolute
    difference.
    """
    movements = _movements(vouchers, end=as_of)
    rows = []
    for ledger in ledgers:
        opening_debit, opening_credit = _opening_sides(ledger)
        moved_debit, moved_credit = movements.get(ledger.ledger_id, (ZERO, ZERO))
        debit_total = opening_debit + moved_debit
        credit_total = opening_credit + moved_credit
        net = debit_total - credit_total
        if net > ZERO:
            balance_type = BalanceType.DEBIT
        elif net < ZERO:
            balance_type = BalanceType.CREDIT
        else:
            balance_type = BalanceType.ZERO
        rows.append(TrialBalanceRow(
            ledger_id=ledger.ledger_id,
            ledger_name=ledger.name,
            group=ledger.group,
            debit_total=debit_total,
            credit_total=credit_total,
            balance=abs(net),
            type=balance_type,
        ))
    return tuple(rows)


def trial_balance_totals(rows: Iterable[TrialBalanceRow]) -> Tuple[Decimal, Decimal]:
    """(sum of debit balances, sum of credit balances)."""
    rows = tuple(rows)
    return (
        sum_amounts(r.balance for r in rows if r.type == BalanceType.DEBIT),
        sum_amounts(r.balance for r in rows if r.type == BalanceType.CREDIT),
    )


# ══════════════════════════════════════════════════════════════
# DAY BOOK
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DayBookLine:
    voucher_id: str
    voucher_type: VoucherType
    voucher_number: str
    party_name: Optional[str]
    narration: str
    debit_total: Decimal
    credit_total: Decimal
    running_debit: Decimal
    running_credit: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "voucher_id": self.voucher_id,
            "voucher_type": self.voucher_type.value,
            "voucher_number": self.voucher_number,
            "party_name": self.party_name,
            "narration": self.narration,
            "debit_total": str(self.debit_total),
            "credit_total": str(self.credit_total),
            "running_debit": str(self.running_debit),
            "running_credit": str(self.running_credit),
        }


@dataclass(frozen=True)
class DayBook:
    date: date
    lines: Tuple[DayBookLine, ...]
    total_debit: Decimal
    total_credit: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "lines": [line.to_dict() for line in self.lines],
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
        }


def compute_day_book(vouchers: Iterable[Voucher], on: date) -> DayBook:
    """Vouchers dated `on`, ordered by creation time, with running totals."""
    day_vouchers = sorted(
        (v for v in vouchers if v.date == on),
        key=lambda v: v.created_at,
    )
    running_debit = ZERO
    running_credit = ZERO
    lines = []
    for voucher in day_vouchers:
        running_debit += voucher.total_debit
        running_credit += voucher.total_credit
        lines.append(DayBookLine(
            voucher_id=str(voucher.voucher_id),
            voucher_type=voucher.voucher_type,
            voucher_number=voucher.voucher_number,
            party_name=voucher.party_name,
            narration=voucher.narration,
            debit_total=voucher.total_debit,
            credit_total=voucher.total_credit,
            running_debit=running_debit,
            running_credit=running_credit,
        ))
    return DayBook(
        date=on,
        lines=tuple(lines),
        total_debit=running_debit,
        total_credit=running_credit,
    )


# ══════════════════════════════════════════════════════════════
# ACCOUNT STATEMENT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AccountTransaction:
    date: date
    voucher_type: VoucherType
    voucher_number: str
    reference_number: Optional[str]
    narration: str
    debit: Decimal
    credit: Decimal
    balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "voucher_type": self.voucher_type.value,
            "voucher_number": self.voucher_number,
            "reference_number": self.reference_number,
            "narration": self.narration,
            "debit": str(self.debit),
            "credit": str(self.credit),
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class AccountStatement:
    ledger_id: str
    ledger_name: str
    opening_balance: Decimal
    transactions: Tuple[AccountTransaction, ...]
    closing_balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ledger_id": self.ledger_id,
            "ledger_name": self.ledger_name,
            "opening_balance": str(self.opening_balance),
            "transactions": [t.to_dict() for t in self.transactions],
            "closing_balance": str(self.closing_balance),
        }


def compute_account_statement(
    ledger: Ledger,
    vouchers: Iterable[Voucher],
    start: date,
    end: date,
) -> AccountStatement:
    """
    Running balance of one ledger over [start, end].

    Balances are on the ledger's normal side. The opening balance
    includes every voucher dated before start.
    """
    vouchers = tuple(vouchers)
    opening = ledger.opening_balance
    for voucher in vouchers:
        if voucher.date < start:
            for entry in voucher.entries:
                if entry.ledger_id == ledger.ledger_id:
                    opening += ledger.signed_amount(entry.side, entry.amount)

    in_period = sorted(
        (v for v in vouchers if start <= v.date <= end),
        key=lambda v: (v.date, v.created_at),
    )
    balance = opening
    transactions: List[AccountTransaction] = []
    for voucher in in_period:
        for entry in voucher.entries:
            if entry.ledger_id != ledger.ledger_id:
                continue
            balance += ledger.signed_amount(entry.side, entry.amount)
            transactions.append(AccountTransaction(
                date=voucher.date,
                voucher_type=voucher.voucher_type,
                voucher_number=voucher.voucher_number,
                reference_number=voucher.reference_number,
                narration=voucher.narration,
                debit=entry.debit,
                credit=entry.credit,
                balance=balance,
            ))
    return AccountStatement(
        ledger_id=ledger.ledger_id,
        ledger_name=ledger.name,
        opening_balance=opening,
        transactions=tuple(transactions),
        closing_balance=balance,
    )


# ══════════════════════════════════════════════════════════════
# PROFIT & LOSS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerSummary:
    ledger_id: str
    ledger_name: str
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ledger_id": self.ledger_id,
            "ledger_name": self.ledger_name,
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class ProfitLossStatement:
    direct_incomes: Tuple[LedgerSummary, ...]
    direct_expenses: Tuple[LedgerSummary, ...]
    indirect_incomes: Tuple[LedgerSummary, ...]
    indirect_expenses: Tuple[LedgerSummary, ...]
    total_revenue: Decimal
    total_expenses: Decimal
    gross_profit: Decimal
    net_profit: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direct_incomes": [s.to_dict() for s in self.direct_incomes],
            "direct_expenses": [s.to_dict() for s in self.direct_expenses],
            "indirect_incomes": [s.to_dict() for s in self.indirect_incomes],
            "indirect_expenses": [s.to_dict() for s in self.indirect_expenses],
            "total_revenue": str(self.total_revenue),
            "total_expenses": str(self.total_expenses),
            "gross_profit": str(self.gross_profit),
            "net_profit": str(self.net_profit),
        }


_PL_GROUPS = (
    LedgerGroup.DIRECT_INCOMES,
    LedgerGroup.DIRECT_EXPENSES,
    LedgerGroup.INDIRECT_INCOMES,
    LedgerGroup.INDIRECT_EXPENSES,
)


def compute_profit_loss_statement(
    ledgers: Sequence[Ledger],
    vouchers: Iterable[Voucher],
    start: date,
    end: date,
) -> ProfitLossStatement:
    """
    Income and expense ledgers over [start, end].

    gross = direct incomes - direct expenses
    net   = gross + indirect incomes - indirect expenses
    Ledgers with a zero balance are left out.
    """
    movements = _movements(vouchers, start, end)
    buckets: Dict[LedgerGroup, List[LedgerSummary]] = {g: [] for g in _PL_GROUPS}
    for ledger in ledgers:
        if ledger.group not in buckets:
            continue
        debit, credit = movements.get(ledger.ledger_id, (ZERO, ZERO))
        balance = _normal_side_balance(ledger, debit, credit)
        if balance == ZERO:
            continue
        buckets[ledger.group].append(LedgerSummary(
            ledger_id=ledger.ledger_id,
            ledger_name=ledger.name,
            total_debit=debit,
            total_credit=credit,
            balance=balance,
        ))

    def total(group: LedgerGroup) -> Decimal:
        return sum_amounts(s.balance for s in buckets[group])

    total_revenue = total(LedgerGroup.DIRECT_INCOMES)
    total_expenses = total(LedgerGroup.DIRECT_EXPENSES)
    gross_profit = total_revenue - total_expenses
    net_profit = (
        gross_profit
        + total(LedgerGroup.INDIRECT_INCOMES)
        - total(LedgerGroup.INDIRECT_EXPENSES)
    )
    return ProfitLossStatement(
        direct_incomes=tuple(buckets[LedgerGroup.DIRECT_INCOMES]),
        direct_expenses=tuple(buckets[LedgerGroup.DIRECT_EXPENSES]),
        indirect_incomes=tuple(buckets[LedgerGroup.INDIRECT_INCOMES]),
        indirect_expenses=tuple(buckets[LedgerGroup.INDIRECT_EXPENSES]),
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        gross_profit=gross_profit,
        net_profit=net_profit,
    )


# ══════════════════════════════════════════════════════════════
# BALANCE SHEET
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BalanceSheet:
    current_assets: Decimal
    fixed_assets: Decimal
    investments: Decimal
    current_liabilities: Decimal
    loans: Decimal
    capital: Decimal
    net_profit: Decimal

    @property
    def total_assets(self) -> Decimal:
        return self.current_assets + self.fixed_assets + self.investments

    @property
    def total_liabilities(self) -> Decimal:
        return self.current_liabilities + self.loans + self.capital + self.net_profit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assets": {
                "current": str(self.current_assets),
                "fixed": str(self.fixed_assets),
                "investments": str(self.investments),
            },
            "liabilities": {
                "current": str(self.current_liabilities),
                "loans": str(self.loans),
                "capital": str(self.capital),
            },
            "net_profit": str(self.net_profit),
            "total_assets": str(self.total_assets),
            "total_liabilities": str(self.total_liabilities),
        }


_BALANCE_SHEET_BUCKETS: Dict[LedgerGroup, str] = {
    LedgerGroup.CURRENT_ASSETS: "current_assets",
    LedgerGroup.CASH_IN_HAND: "current_assets",
    LedgerGroup.BANK_ACCOUNTS: "current_assets",
    LedgerGroup.SUNDRY_DEBTORS: "current_assets",
    LedgerGroup.FIXED_ASSETS: "fixed_assets",
    LedgerGroup.INVESTMENTS: "investments",
    LedgerGroup.CURRENT_LIABILITIES: "current_liabilities",
    LedgerGroup.SUNDRY_CREDITORS: "current_liabilities",
    LedgerGroup.DUTIES_AND_TAXES: "current_liabilities",
    LedgerGroup.PROVISIONS: "current_liabilities",
    LedgerGroup.LOANS_LIABILITY: "loans",
    LedgerGroup.CAPITAL_ACCOUNT: "capital",
}


def compute_balance_sheet(
    ledgers: Sequence[Ledger],
    vouchers: Iterable[Voucher],
    start: date,
    end: date,
) -> BalanceSheet:
    """
    Asset, liability and capital figures for the window [start, end].

    Each ledger contributes its opening balance plus the vouchers dated
    inside the window; vouchers before start are not brought forward.
    With start at the first day of the books this is the position as of
    end. Each bucket holds normal-side balances, so a balanced book
    gives total_assets == total_liabilities once net profit is carried
    over.
    """
    vouchers = tuple(vouchers)
    movements = _movements(vouchers, start, end)
    buckets: Dict[str, Decimal] = {name: ZERO for name in set(_BALANCE_SHEET_BUCKETS.values())}
    for ledger in ledgers:
        bucket = _BALANCE_SHEET_BUCKETS.get(ledger.group)
        if bucket is None:
            continue
        debit, credit = movements.get(ledger.ledger_id, (ZERO, ZERO))
        buckets[bucket] += _normal_side_balance(ledger, debit, credit)

    profit_loss = compute_profit_loss_statement(ledgers, vouchers, start, end)
    return BalanceSheet(net_profit=profit_loss.net_profit, **buckets)
