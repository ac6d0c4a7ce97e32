"""
Tradebook Party Primitive — Customer & Supplier Masters
=========================================================
Engine: Core Primitives

A Party is a customer or supplier the business trades with. Trade
lines name their counterparty by its display name (Sale.customer,
Purchase.supplier), so a party's name is what ties it to trade
history.

RULES:
- party_id is unique per business; name is non-empty
- gstin, when given, is a 15-character alphanumeric GST number
- opening_balance is what stood between the business and the party
  before the first recorded line: receivable for a customer, payable
  for a supplier
- Parties are immutable values; edits produce a new Party

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from core.primitives.money import ZERO, check_money, to_decimal

GSTIN_LENGTH = 15

EDITABLE_FIELDS = frozenset({
    "name",
    "contact_person",
    "email",
    "phone",
    "address",
    "city",
    "state",
    "pincode",
    "gstin",
    "opening_balance",
})


class PartyRole(Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


@dataclass(frozen=True)
class Party:
    """
    Customer or supplier master record.

    Fields:
        party_id:        User-facing identifier (e.g. "CUS001")
        role:            PartyRole
        name:            Display name, as written on invoices
        contact_person, email, phone, address, city, state, pincode:
                         Free-form contact details
        gstin:           GST identification number ("" if unregistered)
        opening_balance: Balance brought forward (see RULES)
    """
    party_id: str
    role: PartyRole
    name: str
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    gstin: str = ""
    opening_balance: Decimal = ZERO

    def __post_init__(self):
        if not self.party_id or not isinstance(self.party_id, str):
            raise ValueError("party_id must be a non-empty string.")
        if not isinstance(self.role, PartyRole):
            raise ValueError("role must be PartyRole enum.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")
        if not isinstance(self.gstin, str):
            raise ValueError("gstin must be a string.")
        if self.gstin and (len(self.gstin) != GSTIN_LENGTH or not self.gstin.isalnum()):
            raise ValueError(
                f"gstin must be {GSTIN_LENGTH} alphanumeric characters, got '{self.gstin}'."
            )
        opening = to_decimal(self.opening_balance, "opening_balance")
        check_money(opening, "opening_balance")
        object.__setattr__(self, "opening_balance", opening)

    def with_changes(self, **changes: Any) -> Party:
        """Return an edited copy. party_id and role cannot change."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit party fields: {sorted(unknown)}.")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "party_id": self.party_id,
            "role": self.role.value,
            "name": self.name,
            "contact_person": self.contact_person,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "gstin": self.gstin,
            "opening_balance": str(self.opening_balance),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Party:
        return cls(
            party_id=data["party_id"],
            role=PartyRole(data["role"]),
            name=data["name"],
            contact_person=data.get("contact_person", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            city=data.get("city", ""),
            state=data.get("state", ""),
            pincode=data.get("pincode", ""),
            gstin=data.get("gstin", ""),
            opening_balance=data.get("opening_balance", ZERO),
        )
