"""
Creditline Credit Store - Relational State
==========================================
DB-backed rows behind the credit, benefit, flag and audit stores.
Rows are never deleted; suspension and inactivation are status values.
"""

from __future__ import annotations

from django.db import models


class CreditTermsStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    SUSPENDED = "suspended", "Suspended"


class NetTermsChoice(models.TextChoices):
    NET_7 = "net_7", "Net 7"
    NET_14 = "net_14", "Net 14"
    NET_30 = "net_30", "Net 30"
    NET_45 = "net_45", "Net 45"
    NET_60 = "net_60", "Net 60"


class LedgerPaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PARTIALLY_PAID = "partially_paid", "Partially paid"
    FULLY_PAID = "fully_paid", "Fully paid"
    OVERPAID = "overpaid", "Overpaid"


class CustomerCreditTerms(models.Model):
    customer_id = models.CharField(max_length=255, unique=True)
    credit_limit = models.DecimalField(max_digits=14, decimal_places=2)
    current_balance = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    status = models.CharField(
        max_length=16,
        choices=CreditTermsStatus.choices,
        default=CreditTermsStatus.INACTIVE,
    )
    net_terms = models.CharField(
        max_length=16,
        choices=NetTermsChoice.choices,
        default=NetTermsChoice.NET_14,
    )
    approved_by = models.CharField(max_length=255, null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    suspended_reason = models.TextField(null=True, blank=True)
    suspended_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "creditline_customer_credit_terms"
        ordering = ["customer_id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_balance__gte=0),
                name="ck_credit_balance_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(current_balance__lte=models.F("credit_limit")),
                name="ck_credit_balance_within_limit",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.customer_id} ({self.status})"


class CreditLedgerEntry(models.Model):
    order_id = models.CharField(max_length=255, unique=True)
    customer_id = models.CharField(max_length=255, db_index=True)
    credit_amount_used = models.DecimalField(max_digits=14, decimal_places=2)
    amount_paid = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    credit_due_date = models.DateTimeField()
    payment_status = models.CharField(
        max_length=16,
        choices=LedgerPaymentStatus.choices,
        default=LedgerPaymentStatus.PENDING,
    )
    sequence = models.PositiveIntegerField()
    created_at = models.DateTimeField()

    class Meta:
        db_table = "creditline_credit_ledger_entries"
        ordering = ["customer_id", "sequence"]
        indexes = [
            models.Index(fields=["customer_id", "sequence"], name="idx_ledger_customer_seq"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} ({self.payment_status})"


class SystemFeatureFlag(models.Model):
    feature_key = models.CharField(max_length=64, unique=True)
    enabled = models.BooleanField(default=True)
    disabled_by = models.CharField(max_length=255, null=True, blank=True)
    disabled_at = models.DateTimeField(null=True, blank=True)
    disabled_reason = models.TextField(null=True, blank=True)
    updated_by = models.CharField(max_length=255, null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "creditline_system_feature_flags"
        ordering = ["feature_key"]

    def __str__(self) -> str:
        return f"{self.feature_key}={'on' if self.enabled else 'off'}"


class CustomerBenefitRow(models.Model):
    customer_id = models.CharField(max_length=255)
    benefit_type = models.CharField(max_length=32)
    enabled = models.BooleanField(default=False)
    enabled_at = models.DateTimeField(null=True, blank=True)
    enabled_by = models.CharField(max_length=255, null=True, blank=True)
    disabled_at = models.DateTimeField(null=True, blank=True)
    disabled_by = models.CharField(max_length=255, null=True, blank=True)
    disabled_reason = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "creditline_customer_benefits"
        ordering = ["customer_id", "benefit_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer_id", "benefit_type"],
                name="uq_customer_benefit_type",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.customer_id}:{self.benefit_type}"


class AuditFactRow(models.Model):
    fact_id = models.UUIDField(primary_key=True, editable=False)
    actor_id = models.CharField(max_length=255)
    event_type = models.CharField(max_length=64, db_index=True)
    resource_type = models.CharField(max_length=64)
    resource_id = models.CharField(max_length=255)
    action = models.CharField(max_length=64)
    severity = models.CharField(max_length=16)
    event_data = models.JSONField(default=dict)
    occurred_at = models.DateTimeField()

    class Meta:
        db_table = "creditline_audit_facts"
        ordering = ["occurred_at", "fact_id"]

    def __str__(self) -> str:
        return f"{self.event_type}@{self.resource_type}/{self.resource_id}"
