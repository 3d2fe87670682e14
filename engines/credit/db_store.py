"""
Creditline Credit Engine — DB-backed Credit Terms Store
========================================================
Same contract as InMemoryCreditTermsStore, persisted through the
core.credit_store models.

mutate() opens transaction.atomic() and locks the customer's row with
select_for_update(). When no row exists yet (first approval) the
unique customer_id constraint arbitrates concurrent creators; the
loser surfaces as CreditWriteConflict.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import List, Optional, Tuple

from engines.credit.ledger import LedgerEntry
from engines.credit.store import CreditTerms, CreditWriteConflict


def _terms_from_row(row) -> CreditTerms:
    return CreditTerms(
        customer_id=row.customer_id,
        credit_limit=row.credit_limit,
        current_balance=row.current_balance,
        status=row.status,
        net_terms=row.net_terms,
        approved_by=row.approved_by,
        approved_at=row.approved_at,
        suspended_reason=row.suspended_reason,
        suspended_at=row.suspended_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
    )


def _entry_from_row(row) -> LedgerEntry:
    return LedgerEntry(
        order_id=row.order_id,
        customer_id=row.customer_id,
        credit_amount_used=row.credit_amount_used,
        amount_paid=row.amount_paid,
        credit_due_date=row.credit_due_date,
        payment_status=row.payment_status,
        created_at=row.created_at,
        sequence=row.sequence,
    )


class _DbSession:
    def __init__(self, customer_id: str, row) -> None:
        self.customer_id = customer_id
        self.terms = _terms_from_row(row) if row is not None else None
        self._row = row
        self._dirty_terms = False
        self._new_entries: List[LedgerEntry] = []
        self._updated_entries: List[LedgerEntry] = []

    def save(self, terms: CreditTerms) -> None:
        if terms.customer_id != self.customer_id:
            raise ValueError("Session can only write its own customer.")
        self.terms = terms
        self._dirty_terms = True

    def get_ledger_entry(self, order_id: str) -> Optional[LedgerEntry]:
        for entry in reversed(self._updated_entries + self._new_entries):
            if entry.order_id == order_id:
                return entry

        from core.credit_store.models import CreditLedgerEntry

        row = CreditLedgerEntry.objects.filter(order_id=order_id).first()
        return _entry_from_row(row) if row is not None else None

    def add_ledger_entry(self, entry: LedgerEntry) -> None:
        if entry.customer_id != self.customer_id:
            raise ValueError("Session can only write its own customer.")
        if self.get_ledger_entry(entry.order_id) is not None:
            raise ValueError(f"Ledger entry for order '{entry.order_id}' exists.")
        self._new_entries.append(entry)

    def save_ledger_entry(self, entry: LedgerEntry) -> None:
        if entry.customer_id != self.customer_id:
            raise ValueError("Session can only write its own customer.")
        if any(e.order_id == entry.order_id for e in self._new_entries):
            self._new_entries = [
                entry if e.order_id == entry.order_id else e
                for e in self._new_entries
            ]
        else:
            self._updated_entries.append(entry)

    def next_sequence(self) -> int:
        from core.credit_store.models import CreditLedgerEntry

        existing = CreditLedgerEntry.objects.filter(
            customer_id=self.customer_id
        ).count()
        return existing + len(self._new_entries) + 1

    def flush(self) -> None:
        from core.credit_store.models import CreditLedgerEntry, CustomerCreditTerms

        if self._dirty_terms:
            t = self.terms
            values = {
                "credit_limit": t.credit_limit,
                "current_balance": t.current_balance,
                "status": t.status,
                "net_terms": t.net_terms,
                "approved_by": t.approved_by,
                "approved_at": t.approved_at,
                "suspended_reason": t.suspended_reason,
                "suspended_at": t.suspended_at,
                "version": t.version,
                "updated_at": t.updated_at,
            }
            if self._row is None:
                CustomerCreditTerms.objects.create(
                    customer_id=t.customer_id,
                    created_at=t.created_at,
                    **values,
                )
            else:
                for name, value in values.items():
                    setattr(self._row, name, value)
                self._row.save(update_fields=list(values))

        for entry in self._new_entries:
            CreditLedgerEntry.objects.create(
                order_id=entry.order_id,
                customer_id=entry.customer_id,
                credit_amount_used=entry.credit_amount_used,
                amount_paid=entry.amount_paid,
                credit_due_date=entry.credit_due_date,
                payment_status=entry.payment_status,
                sequence=entry.sequence,
                created_at=entry.created_at,
            )
        for entry in self._updated_entries:
            CreditLedgerEntry.objects.filter(order_id=entry.order_id).update(
                amount_paid=entry.amount_paid,
                payment_status=entry.payment_status,
            )


class DbCreditTermsStore:
    # ── Reads ─────────────────────────────────────────────────

    def get(self, customer_id: str) -> Optional[CreditTerms]:
        from core.credit_store.models import CustomerCreditTerms

        row = CustomerCreditTerms.objects.filter(customer_id=customer_id).first()
        return _terms_from_row(row) if row is not None else None

    def get_ledger_entry(self, order_id: str) -> Optional[LedgerEntry]:
        from core.credit_store.models import CreditLedgerEntry

        row = CreditLedgerEntry.objects.filter(order_id=order_id).first()
        return _entry_from_row(row) if row is not None else None

    def ledger_entries(self, customer_id: str) -> Tuple[LedgerEntry, ...]:
        from core.credit_store.models import CreditLedgerEntry

        rows = CreditLedgerEntry.objects.filter(customer_id=customer_id).order_by(
            "sequence"
        )
        return tuple(_entry_from_row(row) for row in rows)

    # ── Writes ────────────────────────────────────────────────

    @contextmanager
    def mutate(self, customer_id: str):
        from django.db import IntegrityError, transaction

        from core.credit_store.models import CustomerCreditTerms

        try:
            with transaction.atomic():
                row = (
                    CustomerCreditTerms.objects.select_for_update()
                    .filter(customer_id=customer_id)
                    .first()
                )
                session = _DbSession(customer_id, row)
                yield session
                session.flush()
        except IntegrityError as exc:
            raise CreditWriteConflict(str(exc)) from exc
