"""
Payment Ledger

Amount owed / paid / remaining per member with partial-payment history.
Every operation returns a new Payment; the input record is never mutated,
so a caller either persists the whole updated record or nothing.

Status rule:
- remaining == 0           -> Paid
- due date before today    -> Overdue
- otherwise                -> Pending
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from loguru import logger

from .dependencies import ClubContext
from .models import (
    Payment,
    PaymentStatus,
    PaymentType,
    Transaction,
    to_money,
)
from .roster import normalize_text


ZERO = Decimal("0.00")


# =============================================
# Errors
# =============================================

class LedgerError(ValueError):
    """Rejected ledger operation (nothing was changed)"""


class InvalidAmount(LedgerError):
    pass


class AdvanceExceedsTotal(LedgerError):
    pass


class AmountExceedsRemaining(LedgerError):
    pass


# =============================================
# Status
# =============================================

def derive_status(remaining, due_date: date, today: date) -> PaymentStatus:
    if to_money(remaining) == ZERO:
        return PaymentStatus.paid
    if due_date < today:
        return PaymentStatus.overdue
    return PaymentStatus.pending


def refresh_status(ctx: ClubContext, payment: Payment) -> Payment:
    """Re-derive the status against the current date"""
    status = derive_status(payment.remaining, payment.date, ctx.today())
    if status == payment.status:
        return payment
    return payment.model_copy(update={"status": status})


def check_invariants(payment: Payment, today: Optional[date] = None) -> List[str]:
    """Violated invariants of a stored payment (empty when consistent)"""
    problems = []
    if payment.remaining != payment.total_amount - payment.advance:
        problems.append("remaining != total_amount - advance")
    if payment.remaining < ZERO:
        problems.append("remaining is negative")
    history_total = sum((t.amount for t in payment.history), ZERO)
    if history_total != payment.advance:
        problems.append(f"history sums to {history_total}, advance is {payment.advance}")
    if (payment.status == PaymentStatus.paid) != (payment.remaining == ZERO):
        problems.append(f"status {payment.status.value} does not match remaining {payment.remaining}")
    if today is not None and payment.remaining > ZERO:
        expected = derive_status(payment.remaining, payment.date, today)
        if payment.status != expected:
            problems.append(f"status {payment.status.value} should be {expected.value}")
    return problems


# =============================================
# Operations
# =============================================

def create_payment(
    ctx: ClubContext,
    member_id: str,
    member_name: str,
    payment_type: PaymentType,
    total_amount,
    initial_advance,
    due_date: date
) -> Payment:
    """New billing entry, history seeded with the initial advance if any"""
    total = to_money(total_amount)
    advance = to_money(initial_advance)

    if total <= ZERO:
        raise InvalidAmount("Le montant total doit être positif")
    if advance < ZERO:
        raise InvalidAmount("L'avance ne peut pas être négative")
    if advance > total:
        raise AdvanceExceedsTotal("L'avance ne peut pas être supérieure au montant total")

    remaining = total - advance
    history = [Transaction(date=ctx.now(), amount=advance)] if advance > ZERO else []

    payment = Payment(
        member_id=member_id,
        member_name=member_name,
        payment_type=payment_type,
        total_amount=total,
        advance=advance,
        remaining=remaining,
        date=due_date,
        status=derive_status(remaining, due_date, ctx.today()),
        history=history,
    )
    logger.debug(f"Payment created for {member_name}: {advance}/{total} ({payment.status.value})")
    return payment


def record_partial_payment(ctx: ClubContext, payment: Payment, amount) -> Payment:
    """Append one transaction and move it from remaining to advance"""
    value = to_money(amount)

    if value <= ZERO:
        raise InvalidAmount("Veuillez entrer un montant positif")
    if value > payment.remaining:
        raise AmountExceedsRemaining(
            f"Le montant ne peut pas dépasser le solde restant de {payment.remaining} {ctx.currency}"
        )

    advance = payment.advance + value
    remaining = payment.remaining - value

    return payment.model_copy(update={
        "advance": advance,
        "remaining": remaining,
        "history": [*payment.history, Transaction(date=ctx.now(), amount=value)],
        "status": derive_status(remaining, payment.date, ctx.today()),
    })


def mark_fully_paid(ctx: ClubContext, payment: Payment) -> Payment:
    """Settle the outstanding balance in one final transaction"""
    if payment.remaining <= ZERO:
        if payment.status != PaymentStatus.paid:
            return payment.model_copy(update={"status": PaymentStatus.paid})
        return payment

    return payment.model_copy(update={
        "advance": payment.total_amount,
        "remaining": ZERO,
        "history": [*payment.history, Transaction(date=ctx.now(), amount=payment.remaining)],
        "status": PaymentStatus.paid,
    })


# =============================================
# Queries
# =============================================

def filter_payments(
    payments: Iterable[Payment],
    status: Optional[PaymentStatus] = None,
    payment_type: Optional[PaymentType] = None,
    member_id: Optional[str] = None,
    search: Optional[str] = None
) -> List[Payment]:
    """Status tab + member filter + accent-insensitive name search"""
    needle = normalize_text(search)
    results = []
    for payment in payments:
        if status and payment.status != status:
            continue
        if payment_type and payment.payment_type != payment_type:
            continue
        if member_id and payment.member_id != member_id:
            continue
        if needle and needle not in normalize_text(payment.member_name):
            continue
        results.append(payment)
    return results


def outstanding_payments(payments: Iterable[Payment]) -> List[Payment]:
    """Unsettled payments, largest balance first"""
    return sorted(
        (p for p in payments if p.remaining > ZERO),
        key=lambda p: p.remaining,
        reverse=True
    )


def total_outstanding(payments: Iterable[Payment]) -> Decimal:
    return sum((p.remaining for p in payments), ZERO)
