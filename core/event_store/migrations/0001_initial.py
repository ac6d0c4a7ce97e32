import uuid

import django.db.models.deletion
from django.db import migrations, models


LEDGER_GROUP_CHOICES = [
    ("Capital Account", "Capital Account"),
    ("Current Assets", "Current Assets"),
    ("Current Liabilities", "Current Liabilities"),
    ("Direct Expenses", "Direct Expenses"),
    ("Direct Incomes", "Direct Incomes"),
    ("Fixed Assets", "Fixed Assets"),
    ("Indirect Expenses", "Indirect Expenses"),
    ("Indirect Incomes", "Indirect Incomes"),
    ("Investments", "Investments"),
    ("Loans (Liability)", "Loans (Liability)"),
    ("Bank Accounts", "Bank Accounts"),
    ("Cash-in-Hand", "Cash-in-Hand"),
    ("Sundry Debtors", "Sundry Debtors"),
    ("Sundry Creditors", "Sundry Creditors"),
    ("Duties & Taxes", "Duties & Taxes"),
    ("Provisions", "Provisions"),
]

VOUCHER_TYPE_CHOICES = [
    ("Payment", "Payment"),
    ("Receipt", "Receipt"),
    ("Contra", "Contra"),
    ("Journal", "Journal"),
    ("Sales", "Sales"),
    ("Purchase", "Purchase"),
    ("Debit Note", "Debit Note"),
    ("Credit Note", "Credit Note"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProductRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_id", models.UUIDField(help_text="Business tenant boundary. Always required.")),
                ("product_id", models.CharField(help_text="User-facing product identifier, unique per business.", max_length=50)),
                ("name", models.CharField(max_length=255)),
                ("brand", models.CharField(blank=True, default="", max_length=255)),
                ("category", models.CharField(blank=True, default="", max_length=255)),
                ("purchase_rate", models.DecimalField(decimal_places=4, max_digits=14)),
                ("selling_rate", models.DecimalField(decimal_places=4, max_digits=14)),
                ("gst_percent", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("opening_stock", models.PositiveIntegerField(default=0)),
                ("reorder_level", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "db_table": "tradebook_product",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="productrecord",
            constraint=models.UniqueConstraint(
                fields=("business_id", "product_id"),
                name="uq_product_biz_product_id",
            ),
        ),
        migrations.CreateModel(
            name="PurchaseRecord",
            fields=[
                ("entry_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("business_id", models.UUIDField()),
                ("invoice_no", models.CharField(max_length=64)),
                ("product_id", models.CharField(max_length=50)),
                ("quantity", models.PositiveIntegerField()),
                ("total_value", models.DecimalField(decimal_places=2, max_digits=16)),
                ("gst_amount", models.DecimalField(decimal_places=2, max_digits=16)),
                ("grand_total", models.DecimalField(decimal_places=2, max_digits=16)),
                ("date", models.DateField()),
                ("inter_state", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField()),
                ("supplier", models.CharField(max_length=255)),
                ("purchase_rate", models.DecimalField(decimal_places=4, max_digits=14)),
            ],
            options={
                "db_table": "tradebook_purchase",
                "ordering": ["created_at", "entry_id"],
                "indexes": [
                    models.Index(fields=["business_id", "product_id"], name="idx_purchase_biz_product"),
                    models.Index(fields=["business_id", "date"], name="idx_purchase_biz_date"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleRecord",
            fields=[
                ("entry_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("business_id", models.UUIDField()),
                ("invoice_no", models.CharField(max_length=64)),
                ("product_id", models.CharField(max_length=50)),
                ("quantity", models.PositiveIntegerField()),
                ("total_value", models.DecimalField(decimal_places=2, max_digits=16)),
                ("gst_amount", models.DecimalField(decimal_places=2, max_digits=16)),
                ("grand_total", models.DecimalField(decimal_places=2, max_digits=16)),
                ("date", models.DateField()),
                ("inter_state", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField()),
                ("customer", models.CharField(max_length=255)),
                ("selling_rate", models.DecimalField(decimal_places=4, max_digits=14)),
            ],
            options={
                "db_table": "tradebook_sale",
                "ordering": ["created_at", "entry_id"],
                "indexes": [
                    models.Index(fields=["business_id", "product_id"], name="idx_sale_biz_product"),
                    models.Index(fields=["business_id", "date"], name="idx_sale_biz_date"),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_id", models.UUIDField()),
                ("ledger_id", models.CharField(max_length=100)),
                ("name", models.CharField(max_length=255)),
                ("group", models.CharField(choices=LEDGER_GROUP_CHOICES, max_length=40)),
                ("opening_balance", models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ("current_balance", models.DecimalField(decimal_places=2, default=0, help_text="Normal-side balance, maintained by voucher posting only.", max_digits=16)),
                ("created_at", models.DateTimeField()),
            ],
            options={
                "db_table": "tradebook_ledger",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="ledgerrecord",
            constraint=models.UniqueConstraint(
                fields=("business_id", "ledger_id"),
                name="uq_ledger_biz_ledger_id",
            ),
        ),
        migrations.CreateModel(
            name="VoucherRecord",
            fields=[
                ("voucher_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("business_id", models.UUIDField()),
                ("voucher_type", models.CharField(choices=VOUCHER_TYPE_CHOICES, max_length=20)),
                ("voucher_number", models.CharField(max_length=32)),
                ("date", models.DateField()),
                ("narration", models.TextField(blank=True, default="")),
                ("reference_number", models.CharField(blank=True, max_length=64, null=True)),
                ("party_name", models.CharField(blank=True, max_length=255, null=True)),
                ("total_debit", models.DecimalField(decimal_places=2, max_digits=16)),
                ("total_credit", models.DecimalField(decimal_places=2, max_digits=16)),
                ("created_at", models.DateTimeField()),
            ],
            options={
                "db_table": "tradebook_voucher",
                "ordering": ["created_at", "voucher_id"],
                "indexes": [
                    models.Index(fields=["business_id", "date"], name="idx_voucher_biz_date"),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name="voucherrecord",
            constraint=models.UniqueConstraint(
                fields=("business_id", "voucher_number"),
                name="uq_voucher_biz_number",
            ),
        ),
        migrations.CreateModel(
            name="LedgerEntryRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveSmallIntegerField()),
                ("ledger_id", models.CharField(max_length=100)),
                ("ledger_name", models.CharField(blank=True, default="", max_length=255)),
                ("side", models.CharField(choices=[("Debit", "Debit"), ("Credit", "Credit")], max_length=6)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=16)),
                ("description", models.TextField(blank=True, default="")),
                ("voucher", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="entries", to="event_store.voucherrecord")),
            ],
            options={
                "db_table": "tradebook_ledger_entry",
                "ordering": ["voucher", "position"],
            },
        ),
        migrations.AddConstraint(
            model_name="ledgerentryrecord",
            constraint=models.UniqueConstraint(
                fields=("voucher", "position"),
                name="uq_entry_voucher_position",
            ),
        ),
    ]
