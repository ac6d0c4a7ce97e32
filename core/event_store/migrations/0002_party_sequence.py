from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("event_store", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PartyRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_id", models.UUIDField()),
                ("party_id", models.CharField(help_text="User-facing party identifier, unique per business.", max_length=50)),
                ("role", models.CharField(choices=[("customer", "Customer"), ("supplier", "Supplier")], max_length=10)),
                ("name", models.CharField(max_length=255)),
                ("contact_person", models.CharField(blank=True, default="", max_length=255)),
                ("email", models.CharField(blank=True, default="", max_length=255)),
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("address", models.TextField(blank=True, default="")),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("pincode", models.CharField(blank=True, default="", max_length=12)),
                ("gstin", models.CharField(blank=True, default="", max_length=15)),
                ("opening_balance", models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "db_table": "tradebook_party",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="partyrecord",
            constraint=models.UniqueConstraint(
                fields=("business_id", "party_id"),
                name="uq_party_biz_party_id",
            ),
        ),
        migrations.CreateModel(
            name="DocumentSequenceRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_id", models.UUIDField()),
                ("doc_type", models.CharField(max_length=32)),
                ("last_number", models.CharField(blank=True, default="", max_length=64)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "tradebook_document_sequence",
            },
        ),
        migrations.AddConstraint(
            model_name="documentsequencerecord",
            constraint=models.UniqueConstraint(
                fields=("business_id", "doc_type"),
                name="uq_sequence_biz_doc_type",
            ),
        ),
    ]
