from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CustomerCreditTerms",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.CharField(max_length=255, unique=True)),
                ("credit_limit", models.DecimalField(decimal_places=2, max_digits=14)),
                ("current_balance", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("suspended", "Suspended"),
                        ],
                        default="inactive",
                        max_length=16,
                    ),
                ),
                (
                    "net_terms",
                    models.CharField(
                        choices=[
                            ("net_7", "Net 7"),
                            ("net_14", "Net 14"),
                            ("net_30", "Net 30"),
                            ("net_45", "Net 45"),
                            ("net_60", "Net 60"),
                        ],
                        default="net_14",
                        max_length=16,
                    ),
                ),
                ("approved_by", models.CharField(blank=True, max_length=255, null=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("suspended_reason", models.TextField(blank=True, null=True)),
                ("suspended_at", models.DateTimeField(blank=True, null=True)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "db_table": "creditline_customer_credit_terms",
                "ordering": ["customer_id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(current_balance__gte=0),
                        name="ck_credit_balance_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(current_balance__lte=models.F("credit_limit")),
                        name="ck_credit_balance_within_limit",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CreditLedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_id", models.CharField(max_length=255, unique=True)),
                ("customer_id", models.CharField(db_index=True, max_length=255)),
                ("credit_amount_used", models.DecimalField(decimal_places=2, max_digits=14)),
                ("amount_paid", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("credit_due_date", models.DateTimeField()),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("partially_paid", "Partially paid"),
                            ("fully_paid", "Fully paid"),
                            ("overpaid", "Overpaid"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("sequence", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField()),
            ],
            options={
                "db_table": "creditline_credit_ledger_entries",
                "ordering": ["customer_id", "sequence"],
                "indexes": [
                    models.Index(fields=["customer_id", "sequence"], name="idx_ledger_customer_seq"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SystemFeatureFlag",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("feature_key", models.CharField(max_length=64, unique=True)),
                ("enabled", models.BooleanField(default=True)),
                ("disabled_by", models.CharField(blank=True, max_length=255, null=True)),
                ("disabled_at", models.DateTimeField(blank=True, null=True)),
                ("disabled_reason", models.TextField(blank=True, null=True)),
                ("updated_by", models.CharField(blank=True, max_length=255, null=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "creditline_system_feature_flags",
                "ordering": ["feature_key"],
            },
        ),
        migrations.CreateModel(
            name="CustomerBenefitRow",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.CharField(max_length=255)),
                ("benefit_type", models.CharField(max_length=32)),
                ("enabled", models.BooleanField(default=False)),
                ("enabled_at", models.DateTimeField(blank=True, null=True)),
                ("enabled_by", models.CharField(blank=True, max_length=255, null=True)),
                ("disabled_at", models.DateTimeField(blank=True, null=True)),
                ("disabled_by", models.CharField(blank=True, max_length=255, null=True)),
                ("disabled_reason", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "creditline_customer_benefits",
                "ordering": ["customer_id", "benefit_type"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["customer_id", "benefit_type"],
                        name="uq_customer_benefit_type",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditFactRow",
            fields=[
                ("fact_id", models.UUIDField(editable=False, primary_key=True, serialize=False)),
                ("actor_id", models.CharField(max_length=255)),
                ("event_type", models.CharField(db_index=True, max_length=64)),
                ("resource_type", models.CharField(max_length=64)),
                ("resource_id", models.CharField(max_length=255)),
                ("action", models.CharField(max_length=64)),
                ("severity", models.CharField(max_length=16)),
                ("event_data", models.JSONField(default=dict)),
                ("occurred_at", models.DateTimeField()),
            ],
            options={
                "db_table": "creditline_audit_facts",
                "ordering": ["occurred_at", "fact_id"],
            },
        ),
    ]
