"""
Tradebook Event Store — Trade & Ledger Records
================================================
Engine: Event Store (Core Infrastructure)

Persistent rows behind the store capability interfaces. Every row is
scoped to one business (tenant).

RULES (NON-NEGOTIABLE):
- Purchases, sales, vouchers and voucher entries are append-only:
  no updates, no deletes after persistence
- Products, parties and ledgers are never deleted; product edits and ledger
  balance updates go through the store service only
- Stock is never stored; it is derived from purchases and sales

This file contains NO business logic.
"""

import uuid

from django.db import models

from core.primitives.ledger import LedgerGroup, VoucherType


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class EntrySideChoice(models.TextChoices):
    DEBIT = "Debit", "Debit"
    CREDIT = "Credit", "Credit"


LEDGER_GROUP_CHOICES = [(g.value, g.value) for g in LedgerGroup]
VOUCHER_TYPE_CHOICES = [(t.value, t.value) for t in VoucherType]


class AppendOnlyRecord(models.Model):
    """Insert-only row: updates and deletes raise PermissionError."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise PermissionError(
                f"{type(self).__name__} rows are immutable. "
                "Record a new transaction instead of editing one."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionError(
            f"{type(self).__name__} rows are never deleted."
        )


# ══════════════════════════════════════════════════════════════
# PRODUCT MASTER
# ══════════════════════════════════════════════════════════════

class ProductRecord(models.Model):
    business_id = models.UUIDField(
        help_text="Business tenant boundary. Always required.",
    )
    product_id = models.CharField(
        max_length=50,
        help_text="User-facing product identifier, unique per business.",
    )
    name = models.CharField(max_length=255)
    brand = models.CharField(max_length=255, blank=True, default="")
    category = models.CharField(max_length=255, blank=True, default="")
    purchase_rate = models.DecimalField(max_digits=14, decimal_places=4)
    selling_rate = models.DecimalField(max_digits=14, decimal_places=4)
    gst_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    opening_stock = models.PositiveIntegerField(default=0)
    reorder_level = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "tradebook_product"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_id", "product_id"],
                name="uq_product_biz_product_id",
            ),
        ]

    def delete(self, *args, **kwargs):
        raise PermissionError("Products are never deleted.")

    def __str__(self):
        return f"{self.product_id} {self.name}"


# ══════════════════════════════════════════════════════════════
# PARTY MASTER
# ══════════════════════════════════════════════════════════════

class PartyRoleChoice(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    SUPPLIER = "supplier", "Supplier"


class PartyRecord(models.Model):
    business_id = models.UUIDField()
    party_id = models.CharField(
        max_length=50,
        help_text="User-facing party identifier, unique per business.",
    )
    role = models.CharField(max_length=10, choices=PartyRoleChoice.choices)
    name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255, blank=True, default="")
    email = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")
    address = models.TextField(blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    pincode = models.CharField(max_length=12, blank=True, default="")
    gstin = models.CharField(max_length=15, blank=True, default="")
    opening_balance = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "tradebook_party"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_id", "party_id"],
                name="uq_party_biz_party_id",
            ),
        ]

    def delete(self, *args, **kwargs):
        raise PermissionError("Parties are never deleted.")

    def __str__(self):
        return f"{self.party_id} {self.name} ({self.role})"


# ══════════════════════════════════════════════════════════════
# DOCUMENT SEQUENCES
# ══════════════════════════════════════════════════════════════

class DocumentSequenceRecord(models.Model):
    """
    One row per business + document kind. Issuing a number locks this
    row first, so two writers never pick the same next number.
    """

    business_id = models.UUIDField()
    doc_type = models.CharField(max_length=32)
    last_number = models.CharField(max_length=64, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tradebook_document_sequence"
        constraints = [
            models.UniqueConstraint(
                fields=["business_id", "doc_type"],
                name="uq_sequence_biz_doc_type",
            ),
        ]

    def __str__(self):
        return f"{self.doc_type} {self.last_number}"


# ══════════════════════════════════════════════════════════════
# TRADE EVENTS
# ══════════════════════════════════════════════════════════════

class TradeLineRecord(AppendOnlyRecord):
    """Fields shared by purchase and sale lines."""

    entry_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business_id = models.UUIDField()
    invoice_no = models.CharField(max_length=64)
    product_id = models.CharField(max_length=50)
    quantity = models.PositiveIntegerField()
    total_value = models.DecimalField(max_digits=16, decimal_places=2)
    gst_amount = models.DecimalField(max_digits=16, decimal_places=2)
    grand_total = models.DecimalField(max_digits=16, decimal_places=2)
    date = models.DateField()
    inter_state = models.BooleanField(default=False)
    created_at = models.DateTimeField()

    class Meta:
        abstract = True


class PurchaseRecord(TradeLineRecord):
    supplier = models.CharField(max_length=255)
    purchase_rate = models.DecimalField(max_digits=14, decimal_places=4)

    class Meta:
        db_table = "tradebook_purchase"
        ordering = ["created_at", "entry_id"]
        indexes = [
            models.Index(
                fields=["business_id", "product_id"],
                name="idx_purchase_biz_product",
            ),
            models.Index(
                fields=["business_id", "date"],
                name="idx_purchase_biz_date",
            ),
        ]

    def __str__(self):
        return f"[purchase] {self.invoice_no} {self.product_id} x{self.quantity}"


class SaleRecord(TradeLineRecord):
    customer = models.CharField(max_length=255)
    selling_rate = models.DecimalField(max_digits=14, decimal_places=4)

    class Meta:
        db_table = "tradebook_sale"
        ordering = ["created_at", "entry_id"]
        indexes = [
            models.Index(
                fields=["business_id", "product_id"],
                name="idx_sale_biz_product",
            ),
            models.Index(
                fields=["business_id", "date"],
                name="idx_sale_biz_date",
            ),
        ]

    def __str__(self):
        return f"[sale] {self.invoice_no} {self.product_id} x{self.quantity}"


# ══════════════════════════════════════════════════════════════
# LEDGERS & VOUCHERS
# ══════════════════════════════════════════════════════════════

class LedgerRecord(models.Model):
    business_id = models.UUIDField()
    ledger_id = models.CharField(max_length=100)
    name = models.CharField(max_length=255)
    group = models.CharField(max_length=40, choices=LEDGER_GROUP_CHOICES)
    opening_balance = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    current_balance = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        default=0,
        help_text="Normal-side balance, maintained by voucher posting only.",
    )
    created_at = models.DateTimeField()

    class Meta:
        db_table = "tradebook_ledger"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_id", "ledger_id"],
                name="uq_ledger_biz_ledger_id",
            ),
        ]

    def delete(self, *args, **kwargs):
        raise PermissionError("Ledgers are never deleted.")

    def __str__(self):
        return f"{self.name} ({self.group})"


class VoucherRecord(AppendOnlyRecord):
    voucher_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business_id = models.UUIDField()
    voucher_type = models.CharField(max_length=20, choices=VOUCHER_TYPE_CHOICES)
    voucher_number = models.CharField(max_length=32)
    date = models.DateField()
    narration = models.TextField(blank=True, default="")
    reference_number = models.CharField(max_length=64, null=True, blank=True)
    party_name = models.CharField(max_length=255, null=True, blank=True)
    total_debit = models.DecimalField(max_digits=16, decimal_places=2)
    total_credit = models.DecimalField(max_digits=16, decimal_places=2)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "tradebook_voucher"
        ordering = ["created_at", "voucher_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_id", "voucher_number"],
                name="uq_voucher_biz_number",
            ),
        ]
        indexes = [
            models.Index(
                fields=["business_id", "date"],
                name="idx_voucher_biz_date",
            ),
        ]

    def __str__(self):
        return f"[{self.voucher_type}] {self.voucher_number}"


class LedgerEntryRecord(AppendOnlyRecord):
    voucher = models.ForeignKey(
        VoucherRecord,
        on_delete=models.PROTECT,
        related_name="entries",
    )
    position = models.PositiveSmallIntegerField()
    ledger_id = models.CharField(max_length=100)
    ledger_name = models.CharField(max_length=255, blank=True, default="")
    side = models.CharField(max_length=6, choices=EntrySideChoice.choices)
    amount = models.DecimalField(max_digits=16, decimal_places=2)
    description = models.TextField(blank=True, default="")

    class Meta:
        db_table = "tradebook_ledger_entry"
        ordering = ["voucher", "position"]
        constraints = [
            models.UniqueConstraint(
                fields=["voucher", "position"],
                name="uq_entry_voucher_position",
            ),
        ]

    def __str__(self):
        return f"{self.side} {self.ledger_id} {self.amount}"
