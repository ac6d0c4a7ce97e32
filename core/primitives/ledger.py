"""
Tradebook Ledger Primitive — Double-Entry Accounting Model
============================================================
Engine: Core Primitives

Ledgers, ledger entries and vouchers. A voucher is one business
transaction expressed as a balanced set of debit/credit entries.

RULES (NON-NEGOTIABLE):
- Every voucher balances: total debit == total credit (2 places)
- The check happens when the Voucher is constructed, never later
- Entry amounts are positive; the side carries direction
- Every ledger belongs to exactly one LedgerGroup
- current_balance is expressed on the ledger's normal side:
  ASSET/EXPENSE groups grow with debits,
  LIABILITY/EQUITY/INCOME groups grow with credits

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.primitives.money import (
    ZERO,
    money_equal,
    sum_amounts,
    to_decimal,
)


# ══════════════════════════════════════════════════════════════
# ERRORS
# ══════════════════════════════════════════════════════════════

class ImbalancedVoucherError(ValueError):
    """Voucher debits and credits differ at currency precision."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Voucher unbalanced: total debit ({total_debit}) != "
            f"total credit ({total_credit})."
        )


class UnknownLedgerError(LookupError):
    """An entry references a ledger that is not in the ledger set."""

    def __init__(self, ledger_id: str):
        self.ledger_id = ledger_id
        super().__init__(f"Unknown ledger '{ledger_id}'.")


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class EntrySide(Enum):
    """Every entry is either a debit or a credit."""
    DEBIT = "Debit"
    CREDIT = "Credit"


class AccountNature(Enum):
    """
    Accounting classification behind a ledger group.
    Normal balance: ASSET/EXPENSE = DEBIT, LIABILITY/EQUITY/INCOME = CREDIT.
    """
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


NORMAL_BALANCE: Dict[AccountNature, EntrySide] = {
    AccountNature.ASSET: EntrySide.DEBIT,
    AccountNature.EXPENSE: EntrySide.DEBIT,
    AccountNature.LIABILITY: EntrySide.CREDIT,
    AccountNature.EQUITY: EntrySide.CREDIT,
    AccountNature.INCOME: EntrySide.CREDIT,
}


class LedgerGroup(Enum):
    """Closed set of standard ledger groups."""
    CAPITAL_ACCOUNT = "Capital Account"
    CURRENT_ASSETS = "Current Assets"
    CURRENT_LIABILITIES = "Current Liabilities"
    DIRECT_EXPENSES = "Direct Expenses"
    DIRECT_INCOMES = "Direct Incomes"
    FIXED_ASSETS = "Fixed Assets"
    INDIRECT_EXPENSES = "Indirect Expenses"
    INDIRECT_INCOMES = "Indirect Incomes"
    INVESTMENTS = "Investments"
    LOANS_LIABILITY = "Loans (Liability)"
    BANK_ACCOUNTS = "Bank Accounts"
    CASH_IN_HAND = "Cash-in-Hand"
    SUNDRY_DEBTORS = "Sundry Debtors"
    SUNDRY_CREDITORS = "Sundry Creditors"
    DUTIES_AND_TAXES = "Duties & Taxes"
    PROVISIONS = "Provisions"

    @property
    def nature(self) -> AccountNature:
        return GROUP_NATURE[self]

    @property
    def normal_balance(self) -> EntrySide:
        return NORMAL_BALANCE[GROUP_NATURE[self]]


GROUP_NATURE: Dict[LedgerGroup, AccountNature] = {
    LedgerGroup.CAPITAL_ACCOUNT: AccountNature.EQUITY,
    LedgerGroup.CURRENT_ASSETS: AccountNature.ASSET,
    LedgerGroup.CURRENT_LIABILITIES: AccountNature.LIABILITY,
    LedgerGroup.DIRECT_EXPENSES: AccountNature.EXPENSE,
    LedgerGroup.DIRECT_INCOMES: AccountNature.INCOME,
    LedgerGroup.FIXED_ASSETS: AccountNature.ASSET,
    LedgerGroup.INDIRECT_EXPENSES: AccountNature.EXPENSE,
    LedgerGroup.INDIRECT_INCOMES: AccountNature.INCOME,
    LedgerGroup.INVESTMENTS: AccountNature.ASSET,
    LedgerGroup.LOANS_LIABILITY: AccountNature.LIABILITY,
    LedgerGroup.BANK_ACCOUNTS: AccountNature.ASSET,
    LedgerGroup.CASH_IN_HAND: AccountNature.ASSET,
    LedgerGroup.SUNDRY_DEBTORS: AccountNature.ASSET,
    LedgerGroup.SUNDRY_CREDITORS: AccountNature.LIABILITY,
    LedgerGroup.DUTIES_AND_TAXES: AccountNature.LIABILITY,
    LedgerGroup.PROVISIONS: AccountNature.LIABILITY,
}


class VoucherType(Enum):
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    CONTRA = "Contra"
    JOURNAL = "Journal"
    SALES = "Sales"
    PURCHASE = "Purchase"
    DEBIT_NOTE = "Debit Note"
    CREDIT_NOTE = "Credit Note"


# ══════════════════════════════════════════════════════════════
# LEDGER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Ledger:
    """
    An account accumulating debit/credit postings.

    INVARIANT: current_balance == opening_balance + signed sum of all
    posted entries, signed by the group's normal balance. Engines
    produce new Ledger values through apply(); nothing mutates one.
    """
    ledger_id: str
    name: str
    group: LedgerGroup
    opening_balance: Decimal = ZERO
    current_balance: Optional[Decimal] = None

    def __post_init__(self):
        if not self.ledger_id or not isinstance(self.ledger_id, str):
            raise ValueError("ledger_id must be a non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")
        if not isinstance(self.group, LedgerGroup):
            raise ValueError("group must be a LedgerGroup enum.")
        opening = to_decimal(self.opening_balance, "opening_balance")
        object.__setattr__(self, "opening_balance", opening)
        if self.current_balance is None:
            object.__setattr__(self, "current_balance", opening)
        else:
            object.__setattr__(
                self,
                "current_balance",
                to_decimal(self.current_balance, "current_balance"),
            )

    @property
    def normal_balance(self) -> EntrySide:
        return self.group.normal_balance

    def signed_amount(self, side: EntrySide, amount: Decimal) -> Decimal:
        """Effect of one entry on this ledger's balance."""
        if side == self.normal_balance:
            return amount
        return -amount

    def apply(self, side: EntrySide, amount: Decimal) -> Ledger:
        return replace(
            self,
            current_balance=self.current_balance + self.signed_amount(side, amount),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ledger_id": self.ledger_id,
            "name": self.name,
            "group": self.group.value,
            "opening_balance": str(self.opening_balance),
            "current_balance": str(self.current_balance),
        }


# ══════════════════════════════════════════════════════════════
# LEDGER ENTRY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerEntry:
    """
    Single debit or credit line of a voucher.
    Amount must be positive — side indicates direction.
    """
    ledger_id: str
    side: EntrySide
    amount: Decimal
    ledger_name: str = ""
    description: str = ""

    def __post_init__(self):
        if not self.ledger_id or not isinstance(self.ledger_id, str):
            raise ValueError("ledger_id must be a non-empty string.")
        if not isinstance(self.side, EntrySide):
            raise ValueError("side must be EntrySide enum.")
        amount = to_decimal(self.amount, "amount")
        if amount <= ZERO:
            raise ValueError(
                f"Entry amount must be positive, got {amount}. "
                f"Use side (Debit/Credit) to indicate direction."
            )
        object.__setattr__(self, "amount", amount)

    @property
    def debit(self) -> Decimal:
        return self.amount if self.side == EntrySide.DEBIT else ZERO

    @property
    def credit(self) -> Decimal:
        return self.amount if self.side == EntrySide.CREDIT else ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ledger_id": self.ledger_id,
            "ledger_name": self.ledger_name,
            "side": self.side.value,
            "amount": str(self.amount),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LedgerEntry:
        return cls(
            ledger_id=data["ledger_id"],
            side=EntrySide(data["side"]),
            amount=data["amount"],
            ledger_name=data.get("ledger_name", ""),
            description=data.get("description", ""),
        )


# ══════════════════════════════════════════════════════════════
# VOUCHER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Voucher:
    """
    Balanced set of postings representing one transaction.

    INVARIANT: total_debit == total_credit at currency precision.
    Enforced here at construction — an unbalanced voucher never exists.

    Fields:
        voucher_id:       Unique identifier
        voucher_type:     Payment | Receipt | ... | Credit Note
        voucher_number:   Human-facing number (e.g. "SLS-2610-0001")
        date:             Accounting date
        narration:        Description of the transaction
        entries:          Ordered tuple of LedgerEntry
        created_at:       Creation time (orders the day book)
        reference_number: External reference (invoice no, cheque no)
        party_name:       Counterparty, if any
    """
    voucher_id: uuid.UUID
    voucher_type: VoucherType
    voucher_number: str
    date: date
    narration: str
    entries: Tuple[LedgerEntry, ...]
    created_at: datetime
    reference_number: Optional[str] = None
    party_name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.voucher_id, uuid.UUID):
            raise ValueError("voucher_id must be UUID.")
        if not isinstance(self.voucher_type, VoucherType):
            raise ValueError("voucher_type must be VoucherType enum.")
        if not self.voucher_number or not isinstance(self.voucher_number, str):
            raise ValueError("voucher_number must be a non-empty string.")
        if isinstance(self.date, datetime) or not isinstance(self.date, date):
            raise ValueError("date must be a calendar date (datetime.date).")
        if not isinstance(self.created_at, datetime):
            raise ValueError("created_at must be datetime.")
        if not isinstance(self.entries, tuple):
            raise TypeError("entries must be a tuple of LedgerEntry.")
        if len(self.entries) < 2:
            raise ValueError(
                "Voucher must have at least 2 entries "
                "(minimum one debit and one credit)."
            )
        for entry in self.entries:
            if not isinstance(entry, LedgerEntry):
                raise TypeError("entries must contain LedgerEntry only.")

        check_balanced(self.entries)

    @property
    def total_debit(self) -> Decimal:
        return sum_amounts(e.debit for e in self.entries)

    @property
    def total_credit(self) -> Decimal:
        return sum_amounts(e.credit for e in self.entries)

    @property
    def ledger_ids(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for entry in self.entries:
            seen.setdefault(entry.ledger_id, None)
        return tuple(seen)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "voucher_id": str(self.voucher_id),
            "voucher_type": self.voucher_type.value,
            "voucher_number": self.voucher_number,
            "date": self.date.isoformat(),
            "narration": self.narration,
            "reference_number": self.reference_number,
            "party_name": self.party_name,
            "entries": [e.to_dict() for e in self.entries],
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "created_at": self.created_at.isoformat(),
        }


def check_balanced(entries: Tuple[LedgerEntry, ...]) -> None:
    """Raise ImbalancedVoucherError unless debits equal credits."""
    total_debit = sum_amounts(e.debit for e in entries)
    total_credit = sum_amounts(e.credit for e in entries)
    if not money_equal(total_debit, total_credit):
        raise ImbalancedVoucherError(total_debit, total_credit)
