"""
Creditline Credit Engine — Policies
====================================
Eligibility, lifecycle transitions, limit/balance guards.
Each policy returns None when satisfied, or a RejectionReason.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.credit.calculations import available_credit, is_credit_usable, shortfall
from engines.credit.eligibility import EligibilityResult
from engines.credit.events import STATUS_INACTIVE, STATUS_SUSPENDED


def eligibility_policy(result: EligibilityResult) -> Optional[RejectionReason]:
    """Approval requires a passing eligibility result (unless overridden)."""
    if result.eligible:
        return None
    return RejectionReason(
        code=ReasonCode.NOT_ELIGIBLE,
        message="Customer is not eligible for credit terms: "
                + "; ".join(result.missing_requirements) + ".",
        policy_name="eligibility_policy",
        details={"missing_requirements": list(result.missing_requirements)},
    )


def credit_terms_must_exist_policy(
    terms,
    customer_id: str,
) -> Optional[RejectionReason]:
    if terms is not None:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=f"No credit terms for customer '{customer_id}'.",
        policy_name="credit_terms_must_exist_policy",
        details={"customer_id": customer_id},
    )


def approvable_status_policy(terms) -> Optional[RejectionReason]:
    """A record may be (re-)approved only when missing or inactive."""
    if terms is None or terms.status == STATUS_INACTIVE:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=f"Credit terms for '{terms.customer_id}' are already "
                f"{terms.status}.",
        policy_name="approvable_status_policy",
        details={"current_status": terms.status},
    )


def limit_not_below_balance_policy(
    terms,
    new_limit: Decimal,
) -> Optional[RejectionReason]:
    if terms is None or new_limit >= terms.current_balance:
        return None
    return RejectionReason(
        code=ReasonCode.LIMIT_BELOW_BALANCE,
        message=f"Limit {new_limit} is below outstanding balance "
                f"{terms.current_balance}.",
        policy_name="limit_not_below_balance_policy",
        details={
            "requested_limit": new_limit,
            "current_balance": terms.current_balance,
        },
    )


def must_be_suspended_policy(terms) -> Optional[RejectionReason]:
    if terms.status == STATUS_SUSPENDED:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=f"Only suspended credit terms can be reactivated "
                f"(current status: {terms.status}).",
        policy_name="must_be_suspended_policy",
        details={"current_status": terms.status},
    )


def credit_usable_policy(terms, customer_id: str) -> Optional[RejectionReason]:
    """Active status and a positive limit."""
    if is_credit_usable(terms):
        return None
    if terms is None:
        message = f"Customer '{customer_id}' has no credit terms."
        details = {"status": None, "credit_limit": None}
    else:
        message = (
            f"Credit terms for '{customer_id}' are not usable "
            f"(status {terms.status}, limit {terms.credit_limit})."
        )
        details = {"status": terms.status, "credit_limit": terms.credit_limit}
    return RejectionReason(
        code=ReasonCode.CREDIT_NOT_USABLE,
        message=message,
        policy_name="credit_usable_policy",
        details=details,
    )


def order_not_already_applied_policy(
    existing_entry,
    order_id: str,
) -> Optional[RejectionReason]:
    if existing_entry is None:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=f"Credit was already applied to order '{order_id}'.",
        policy_name="order_not_already_applied_policy",
        details={"order_id": order_id},
    )


def sufficient_credit_policy(terms, order_total: Decimal) -> Optional[RejectionReason]:
    missing = shortfall(terms, order_total)
    if missing <= 0:
        return None
    available = available_credit(terms.credit_limit, terms.current_balance)
    return RejectionReason(
        code=ReasonCode.INSUFFICIENT_CREDIT,
        message=f"Available credit {available}, order needs {order_total} "
                f"(short by {missing}).",
        policy_name="sufficient_credit_policy",
        details={
            "shortfall": missing,
            "available_credit": available,
            "requested": order_total,
        },
    )


def ledger_entry_must_exist_policy(
    entry,
    order_id: str,
    customer_id: str,
) -> Optional[RejectionReason]:
    if entry is not None and entry.customer_id == customer_id:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=f"No credit ledger entry for order '{order_id}' "
                f"of customer '{customer_id}'.",
        policy_name="ledger_entry_must_exist_policy",
        details={"order_id": order_id},
    )


def ledger_entry_not_settled_policy(entry) -> Optional[RejectionReason]:
    """A fully paid or overpaid entry accepts no further payments."""
    if not entry.is_settled:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=f"Order '{entry.order_id}' is already {entry.payment_status}.",
        policy_name="ledger_entry_not_settled_policy",
        details={
            "order_id": entry.order_id,
            "payment_status": entry.payment_status,
        },
    )
