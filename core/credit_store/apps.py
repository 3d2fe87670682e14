"""
Creditline Credit Store - App Configuration
===========================================
Persistent state for credit terms, credit ledger entries, kill
switches, customer benefits and audit facts.
"""

from django.apps import AppConfig


class CoreCreditStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.credit_store"
    label = "core_credit_store"
    verbose_name = "Creditline Credit Store"
