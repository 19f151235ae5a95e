"""
CLI maintenance tasks
"""
from datetime import date
from decimal import Decimal

from app.club.ledger import create_payment
from app.club.models import PaymentStatus, PaymentType
from main import print_leaderboards, refresh_statuses


def stored_payment(store, ctx, due, advance=0):
    payment = create_payment(ctx, "p1", "Yassine Amrani", PaymentType.membership, 300, advance, due)
    # status as written before the due date passed
    if payment.status == PaymentStatus.overdue:
        payment = payment.model_copy(update={"status": PaymentStatus.pending})
    return store.insert_payment(payment)


class TestRefreshStatuses:

    def test_past_due_payments_become_overdue(self, store, ctx):
        late = stored_payment(store, ctx, date(2025, 6, 1))
        on_time = stored_payment(store, ctx, date(2025, 6, 15))
        settled = stored_payment(store, ctx, date(2025, 5, 1), advance=300)

        assert refresh_statuses(store) == 1

        assert store.get_payment(late.id).status == PaymentStatus.overdue
        assert store.get_payment(on_time.id).status == PaymentStatus.pending
        assert store.get_payment(settled.id).status == PaymentStatus.paid
        assert store.get_payment(late.id).remaining == Decimal("300.00")

    def test_nothing_to_refresh(self, store):
        assert refresh_statuses(store) == 0


class TestPrintLeaderboards:

    def test_empty(self, store, capsys):
        print_leaderboards(store)
        out = capsys.readouterr().out
        assert "Meilleurs Buteurs" in out
        assert "Aucune donnée" in out
