"""
Club dashboard - roster, schedule and payment overview
"""
from typing import Iterable, List

from .dependencies import ClubContext
from .ledger import outstanding_payments, total_outstanding
from .models import (
    ClubDashboard,
    ClubEvent,
    Coach,
    CoachStatus,
    DashboardAlert,
    MemberBrief,
    MemberGroup,
    Payment,
    PaymentStatus,
    PaymentType,
    Player,
    PlayerStatus,
)
from .roster import active_players, coaches_by_status, players_by_status


MONTHS_FR = {
    1: "janvier", 2: "février", 3: "mars", 4: "avril",
    5: "mai", 6: "juin", 7: "juillet", 8: "août",
    9: "septembre", 10: "octobre", 11: "novembre", 12: "décembre",
}


def _player_group(players: List[Player]) -> MemberGroup:
    return MemberGroup(
        count=len(players),
        members=[MemberBrief(id=p.id, name=p.name, detail=p.category.value) for p in players],
    )


def _coach_group(coaches: List[Coach]) -> MemberGroup:
    return MemberGroup(
        count=len(coaches),
        members=[MemberBrief(id=c.id, name=c.name, detail=c.specialty or None) for c in coaches],
    )


def upcoming_events(ctx: ClubContext, events: Iterable[ClubEvent], limit: int = 5) -> List[ClubEvent]:
    """Next events, today included"""
    today = ctx.today()
    return sorted(
        (e for e in events if e.date >= today),
        key=lambda e: (e.date, e.time)
    )[:limit]


def build_dashboard(
    ctx: ClubContext,
    players: Iterable[Player],
    coaches: Iterable[Coach],
    payments: Iterable[Payment],
    events: Iterable[ClubEvent],
    upcoming_limit: int = 5
) -> ClubDashboard:
    today = ctx.today()
    coaches = list(coaches)
    payments = list(payments)

    current_players = active_players(players, today)

    paid_memberships = sum(
        1 for p in payments
        if p.payment_type == PaymentType.membership
        and p.status == PaymentStatus.paid
        and (p.date.year, p.date.month) == (today.year, today.month)
    )

    pending = outstanding_payments(payments)
    overdue = [p for p in pending if p.status == PaymentStatus.overdue]

    alerts = []
    if overdue:
        alerts.append(DashboardAlert(
            alert_type="overdue_payment",
            message=f"{len(overdue)} paiement(s) en retard, "
                    f"{total_outstanding(overdue)} {ctx.currency} à recouvrer",
            severity="warning",
        ))

    schedule = upcoming_events(ctx, events, upcoming_limit)
    if not schedule:
        alerts.append(DashboardAlert(
            alert_type="no_upcoming_event",
            message="Aucun événement à venir",
            severity="info",
        ))

    return ClubDashboard(
        team_id=ctx.team_id,
        month=f"{MONTHS_FR[today.month]} {today.year}",
        total_players=len(current_players),
        injured_players=_player_group(players_by_status(current_players, PlayerStatus.injured)),
        suspended_players=_player_group(players_by_status(current_players, PlayerStatus.suspended)),
        unavailable_players=_player_group(players_by_status(current_players, PlayerStatus.unavailable)),
        total_coaches=len(coaches),
        active_coaches=_coach_group(coaches_by_status(coaches, CoachStatus.active)),
        inactive_coaches=_coach_group(coaches_by_status(coaches, CoachStatus.inactive)),
        upcoming_events=schedule,
        paid_memberships=paid_memberships,
        pending_player_payments=[p for p in pending if p.payment_type == PaymentType.membership],
        pending_coach_payments=[p for p in pending if p.payment_type == PaymentType.salary],
        alerts=alerts,
    )
