"""
Creditline Credit Engine — Credit Terms Store
==============================================
Per-customer credit record plus the ledger entries written by
apply-to-order.

Every write goes through mutate(customer_id), a per-customer critical
section. Writes made in a session are buffered and committed only
when the block exits cleanly. Different customers never contend.
Reads (get, ledger_entries) return snapshots and never take the
per-customer lock.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import ContextManager, Dict, List, Optional, Protocol, Tuple

from engines.credit.calculations import (
    ZERO,
    available_credit,
    can_cover_with_credit,
    credit_utilization,
    is_credit_usable,
    net_terms_days,
    to_money,
)
from engines.credit.events import (
    STATUS_ACTIVE,
    STATUS_SUSPENDED,
    VALID_CREDIT_STATUSES,
    VALID_NET_TERMS,
)
from engines.credit.ledger import LedgerEntry


class CreditWriteConflict(Exception):
    """A concurrent writer created the same record first."""


# ══════════════════════════════════════════════════════════════
# CREDIT TERMS RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CreditTerms:
    """
    Immutable snapshot of one customer's credit terms.

    0 <= current_balance <= credit_limit is enforced by the mutation
    service, not here: snapshots may be built from racing reads.
    """

    customer_id: str
    credit_limit: Decimal
    current_balance: Decimal = ZERO
    status: str = STATUS_ACTIVE
    net_terms: str = "net_14"
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    suspended_reason: Optional[str] = None
    suspended_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: int = 0

    def __post_init__(self):
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        limit = to_money(self.credit_limit, "credit_limit")
        balance = to_money(self.current_balance, "current_balance")
        if limit < 0:
            raise ValueError("credit_limit must be >= 0.")
        if balance < 0:
            raise ValueError("current_balance must be >= 0.")
        object.__setattr__(self, "credit_limit", limit)
        object.__setattr__(self, "current_balance", balance)
        if self.status not in VALID_CREDIT_STATUSES:
            raise ValueError(f"Invalid status: {self.status}")
        if self.net_terms not in VALID_NET_TERMS:
            raise ValueError(f"Invalid net_terms: {self.net_terms}")
        if self.status != STATUS_SUSPENDED and (
            self.suspended_reason is not None or self.suspended_at is not None
        ):
            raise ValueError("Suspension metadata is only allowed when suspended.")

    # ── Derived ───────────────────────────────────────────────

    @property
    def net_terms_days(self) -> int:
        return net_terms_days(self.net_terms)

    @property
    def available_credit(self) -> Decimal:
        return available_credit(self.credit_limit, self.current_balance)

    @property
    def utilization(self) -> int:
        return credit_utilization(self.current_balance, self.credit_limit)

    @property
    def is_usable(self) -> bool:
        return is_credit_usable(self)

    def can_cover(self, order_total) -> bool:
        return can_cover_with_credit(self, order_total)

    def evolve(self, **changes) -> "CreditTerms":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "credit_limit": str(self.credit_limit),
            "current_balance": str(self.current_balance),
            "status": self.status,
            "net_terms": self.net_terms,
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "suspended_reason": self.suspended_reason,
            "suspended_at": self.suspended_at.isoformat() if self.suspended_at else None,
            "version": self.version,
        }


# ══════════════════════════════════════════════════════════════
# STORE PROTOCOLS
# ══════════════════════════════════════════════════════════════

class CreditSession(Protocol):
    """Write handle valid only inside a mutate() block."""

    customer_id: str
    terms: Optional[CreditTerms]

    def save(self, terms: CreditTerms) -> None:
        ...

    def get_ledger_entry(self, order_id: str) -> Optional[LedgerEntry]:
        ...

    def add_ledger_entry(self, entry: LedgerEntry) -> None:
        ...

    def save_ledger_entry(self, entry: LedgerEntry) -> None:
        ...

    def next_sequence(self) -> int:
        ...


class CreditTermsStore(Protocol):
    def get(self, customer_id: str) -> Optional[CreditTerms]:
        ...

    def ledger_entries(self, customer_id: str) -> Tuple[LedgerEntry, ...]:
        ...

    def mutate(self, customer_id: str) -> ContextManager[CreditSession]:
        ...


# ══════════════════════════════════════════════════════════════
# IN-MEMORY STORE
# ══════════════════════════════════════════════════════════════

class _InMemorySession:
    def __init__(self, store: "InMemoryCreditTermsStore", customer_id: str) -> None:
        self.customer_id = customer_id
        self.terms = store.get(customer_id)
        self._store = store
        self._dirty_terms = False
        self._entries: Dict[str, LedgerEntry] = {}

    def save(self, terms: CreditTerms) -> None:
        if terms.customer_id != self.customer_id:
            raise ValueError("Session can only write its own customer.")
        self.terms = terms
        self._dirty_terms = True

    def get_ledger_entry(self, order_id: str) -> Optional[LedgerEntry]:
        if order_id in self._entries:
            return self._entries[order_id]
        return self._store.get_ledger_entry(order_id)

    def add_ledger_entry(self, entry: LedgerEntry) -> None:
        if entry.customer_id != self.customer_id:
            raise ValueError("Session can only write its own customer.")
        if self.get_ledger_entry(entry.order_id) is not None:
            raise ValueError(f"Ledger entry for order '{entry.order_id}' exists.")
        self._entries[entry.order_id] = entry

    def save_ledger_entry(self, entry: LedgerEntry) -> None:
        if entry.customer_id != self.customer_id:
            raise ValueError("Session can only write its own customer.")
        self._entries[entry.order_id] = entry

    def next_sequence(self) -> int:
        existing = len(self._store.ledger_entries(self.customer_id))
        new = sum(
            1 for order_id in self._entries
            if self._store.get_ledger_entry(order_id) is None
        )
        return existing + new + 1

    def commit(self) -> None:
        self._store._commit(
            self.customer_id,
            self.terms if self._dirty_terms else None,
            tuple(self._entries.values()),
        )


class InMemoryCreditTermsStore:
    """Thread-safe in-memory store. One lock per customer."""

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._customer_locks: Dict[str, threading.Lock] = {}
        self._terms: Dict[str, CreditTerms] = {}
        self._entries: Dict[str, LedgerEntry] = {}
        self._order_ids_by_customer: Dict[str, List[str]] = {}

    def _lock_for(self, customer_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._customer_locks.get(customer_id)
            if lock is None:
                lock = threading.Lock()
                self._customer_locks[customer_id] = lock
            return lock

    # ── Reads ─────────────────────────────────────────────────

    def get(self, customer_id: str) -> Optional[CreditTerms]:
        return self._terms.get(customer_id)

    def get_ledger_entry(self, order_id: str) -> Optional[LedgerEntry]:
        return self._entries.get(order_id)

    def ledger_entries(self, customer_id: str) -> Tuple[LedgerEntry, ...]:
        with self._registry_lock:
            order_ids = tuple(self._order_ids_by_customer.get(customer_id, ()))
            return tuple(self._entries[o] for o in order_ids)

    # ── Writes ────────────────────────────────────────────────

    @contextmanager
    def mutate(self, customer_id: str):
        with self._lock_for(customer_id):
            session = _InMemorySession(self, customer_id)
            yield session
            session.commit()

    def _commit(
        self,
        customer_id: str,
        terms: Optional[CreditTerms],
        entries: Tuple[LedgerEntry, ...],
    ) -> None:
        with self._registry_lock:
            if terms is not None:
                self._terms[customer_id] = terms
            for entry in entries:
                if entry.order_id not in self._entries:
                    self._order_ids_by_customer.setdefault(customer_id, []).append(
                        entry.order_id
                    )
                self._entries[entry.order_id] = entry
