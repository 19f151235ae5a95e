"""
Club Management Router

- dashboard
- players & coaches
- payments (ledger, receipts)
- events, match stats, leaderboards
"""

from datetime import date
from pathlib import Path
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Request, Query, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from loguru import logger

from app.config import ClubSettings, get_settings
from database.supabase_client import get_supabase_client
from .dependencies import ClubContext, get_club_context
from .dashboard import build_dashboard
from .ledger import (
    create_payment,
    filter_payments,
    mark_fully_paid,
    record_partial_payment,
    refresh_status,
)
from .models import (
    ClubDashboard,
    ClubEvent,
    ClubEventCreate,
    Coach,
    CoachInput,
    EventType,
    Leaderboards,
    MatchStatsUpdate,
    MatchSummary,
    MemberKind,
    PartialPaymentRequest,
    Payment,
    PaymentCreate,
    PaymentStatus,
    PaymentType,
    PerformanceStats,
    Player,
    PlayerInput,
)
from .realtime import SnapshotHub
from .roster import find_duplicate_player
from .stats import build_leaderboards, match_results, player_performance
from .store import ClubStore

router = APIRouter(prefix="/club", tags=["Club Management"])

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# process-wide live snapshots
snapshot_hub = SnapshotHub()


def get_club_store(
    ctx: ClubContext = Depends(get_club_context),
    client=Depends(get_supabase_client)
) -> ClubStore:
    return ClubStore(client, ctx, hub=snapshot_hub)


# =============================================
# Dashboard
# =============================================

@router.get("/dashboard", response_model=ClubDashboard)
async def get_dashboard(
    store: ClubStore = Depends(get_club_store),
    settings: ClubSettings = Depends(get_settings)
):
    """
    Club dashboard

    Active players by status, coaches, upcoming events, paid memberships
    of the month and outstanding balances.
    """
    payments = [refresh_status(store.ctx, p) for p in store.list_payments()]
    return build_dashboard(
        store.ctx,
        players=store.list_players(),
        coaches=store.list_coaches(),
        payments=payments,
        events=store.list_events(),
        upcoming_limit=settings.upcoming_events_limit,
    )


# =============================================
# Players
# =============================================

@router.get("/players", response_model=List[Player])
async def list_players(store: ClubStore = Depends(get_club_store)):
    return sorted(store.list_players(), key=lambda p: (p.last_name.lower(), p.first_name.lower()))


@router.post("/players", status_code=status.HTTP_201_CREATED)
async def create_player(
    data: PlayerInput,
    store: ClubStore = Depends(get_club_store)
):
    """
    Create a player

    When initial_total_amount > 0 the first membership payment is created
    with it, dated at the club entry date.
    """
    if find_duplicate_player(store.list_players(), data.first_name, data.last_name):
        raise HTTPException(
            status_code=400,
            detail=f"Un joueur nommé {data.first_name} {data.last_name} existe déjà"
        )
    player, payment = store.create_player(data)
    return {"player": player, "payment": payment}


@router.get("/players/{player_id}", response_model=Player)
async def get_player(player_id: str, store: ClubStore = Depends(get_club_store)):
    return store.get_player(player_id)


@router.put("/players/{player_id}", response_model=Player)
async def update_player(
    player_id: str,
    data: PlayerInput,
    store: ClubStore = Depends(get_club_store)
):
    store.get_player(player_id)
    if find_duplicate_player(store.list_players(), data.first_name, data.last_name, exclude_id=player_id):
        raise HTTPException(
            status_code=400,
            detail=f"Un joueur nommé {data.first_name} {data.last_name} existe déjà"
        )
    return store.update_player(player_id, data)


@router.delete("/players/{player_id}")
async def delete_player(player_id: str, store: ClubStore = Depends(get_club_store)):
    """Delete a player and its payments"""
    store.delete_member(MemberKind.player, player_id)
    return {"message": "Joueur supprimé", "player_id": player_id}


@router.get("/players/{player_id}/performance", response_model=PerformanceStats)
async def get_player_performance(player_id: str, store: ClubStore = Depends(get_club_store)):
    store.get_player(player_id)
    return player_performance(player_id, store.list_events())


@router.get("/players/{player_id}/registration-form", response_class=HTMLResponse)
async def player_registration_form(
    request: Request,
    player_id: str,
    store: ClubStore = Depends(get_club_store),
    settings: ClubSettings = Depends(get_settings)
):
    """Printable registration form for the current season"""
    player = store.get_player(player_id)
    year = store.ctx.today().year
    return templates.TemplateResponse(request, "registration_form.html", {
        "club_name": settings.club_name,
        "season": f"{year}-{year + 1}",
        "player": player,
    })


@router.get("/players/{player_id}/certificate", response_class=HTMLResponse)
async def player_certificate(
    request: Request,
    player_id: str,
    store: ClubStore = Depends(get_club_store)
):
    """Printable medical certificate (stored file shown full page)"""
    player = store.get_player(player_id)
    if not player.medical_certificate_url:
        raise HTTPException(status_code=404, detail="Aucun certificat médical trouvé pour ce joueur")
    return templates.TemplateResponse(request, "certificate.html", {"player": player})


# =============================================
# Coaches
# =============================================

@router.get("/coaches", response_model=List[Coach])
async def list_coaches(store: ClubStore = Depends(get_club_store)):
    return sorted(store.list_coaches(), key=lambda c: (c.last_name.lower(), c.first_name.lower()))


@router.post("/coaches", response_model=Coach, status_code=status.HTTP_201_CREATED)
async def create_coach(data: CoachInput, store: ClubStore = Depends(get_club_store)):
    return store.create_coach(data)


@router.get("/coaches/{coach_id}", response_model=Coach)
async def get_coach(coach_id: str, store: ClubStore = Depends(get_club_store)):
    return store.get_coach(coach_id)


@router.put("/coaches/{coach_id}", response_model=Coach)
async def update_coach(coach_id: str, data: CoachInput, store: ClubStore = Depends(get_club_store)):
    store.get_coach(coach_id)
    return store.update_coach(coach_id, data)


@router.delete("/coaches/{coach_id}")
async def delete_coach(coach_id: str, store: ClubStore = Depends(get_club_store)):
    """Delete a coach and its salary payments"""
    store.delete_member(MemberKind.coach, coach_id)
    return {"message": "Entraîneur supprimé", "coach_id": coach_id}


# =============================================
# Payments
# =============================================

@router.get("/payments", response_model=List[Payment])
async def list_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    payment_type: Optional[PaymentType] = Query(None),
    member_id: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Member name search"),
    store: ClubStore = Depends(get_club_store)
):
    """Payments, newest due date first"""
    payments = [refresh_status(store.ctx, p) for p in store.list_payments()]
    results = filter_payments(
        payments,
        status=status_filter,
        payment_type=payment_type,
        member_id=member_id,
        search=q,
    )
    return sorted(results, key=lambda p: p.date, reverse=True)


@router.post("/payments", response_model=Payment, status_code=status.HTTP_201_CREATED)
async def add_payment(
    data: PaymentCreate,
    store: ClubStore = Depends(get_club_store),
    settings: ClubSettings = Depends(get_settings)
):
    """
    New billing entry

    Player -> membership, coach -> salary. Without total_amount the
    configured default of the member kind is used.
    """
    member = store.get_member(data.member_kind, data.member_id)

    if data.member_kind == MemberKind.player:
        payment_type = PaymentType.membership
        default_total = settings.default_membership_amount
    else:
        payment_type = PaymentType.salary
        default_total = settings.default_salary_amount

    payment = create_payment(
        store.ctx,
        member_id=member.id,
        member_name=member.name,
        payment_type=payment_type,
        total_amount=data.total_amount if data.total_amount is not None else default_total,
        initial_advance=data.advance,
        due_date=data.date,
    )
    payment = store.insert_payment(payment)
    logger.info(f"[{store.ctx.team_id}] Payment added for {payment.member_name}: {payment.advance}/{payment.total_amount}")
    return payment


@router.get("/payments/{payment_id}", response_model=Payment)
async def get_payment(
    payment_id: str,
    store: ClubStore = Depends(get_club_store)
):
    return refresh_status(store.ctx, store.get_payment(payment_id))


@router.post("/payments/{payment_id}/partial", response_model=Payment)
async def add_partial_payment(
    payment_id: str,
    data: PartialPaymentRequest,
    store: ClubStore = Depends(get_club_store)
):
    """Record a partial payment (rejected when above the remaining balance)"""
    payment = store.get_payment(payment_id)
    updated = record_partial_payment(store.ctx, payment, data.amount)
    return store.save_payment(updated)


@router.post("/payments/{payment_id}/paid", response_model=Payment)
async def mark_payment_as_paid(
    payment_id: str,
    store: ClubStore = Depends(get_club_store)
):
    payment = store.get_payment(payment_id)
    updated = mark_fully_paid(store.ctx, payment)
    if updated is payment:
        return payment
    return store.save_payment(updated)


@router.delete("/payments/{payment_id}")
async def delete_payment(payment_id: str, store: ClubStore = Depends(get_club_store)):
    store.delete_payment(payment_id)
    return {"message": "Paiement supprimé", "payment_id": payment_id}


@router.get("/payments/{payment_id}/receipt", response_class=HTMLResponse)
async def payment_receipt(
    request: Request,
    payment_id: str,
    store: ClubStore = Depends(get_club_store),
    settings: ClubSettings = Depends(get_settings)
):
    """Printable receipt"""
    payment = refresh_status(store.ctx, store.get_payment(payment_id))
    return templates.TemplateResponse(request, "receipt.html", {
        "club_name": settings.club_name,
        "currency": settings.currency,
        "payment": payment,
        "issued_on": store.ctx.today(),
    })


# =============================================
# Events / results
# =============================================

@router.get("/events", response_model=List[ClubEvent])
async def list_events(
    on: Optional[date] = Query(None, description="Only events of this day"),
    store: ClubStore = Depends(get_club_store)
):
    events = store.list_events()
    if on:
        events = [e for e in events if e.date == on]
    return sorted(events, key=lambda e: (e.date, e.time))


@router.post("/events", response_model=ClubEvent, status_code=status.HTTP_201_CREATED)
async def create_event(data: ClubEventCreate, store: ClubStore = Depends(get_club_store)):
    return store.create_event(data)


@router.put("/events/{event_id}/match-stats", response_model=ClubEvent)
async def update_match_stats(
    event_id: str,
    data: MatchStatsUpdate,
    store: ClubStore = Depends(get_club_store)
):
    """Result and scorer/assist sheet of a match"""
    event = store.get_event(event_id)
    if event.type != EventType.match:
        raise HTTPException(status_code=400, detail="Seuls les matchs ont des statistiques")
    return store.update_match_stats(event_id, data)


@router.delete("/events/{event_id}")
async def delete_event(event_id: str, store: ClubStore = Depends(get_club_store)):
    store.delete_event(event_id)
    return {"message": "Événement supprimé", "event_id": event_id}


@router.get("/stats/leaderboards", response_model=Leaderboards)
async def get_leaderboards(
    store: ClubStore = Depends(get_club_store)
):
    """Top scorers / top assisters over all played matches"""
    return build_leaderboards(store.ctx, store.list_events(), store.list_players())


@router.get("/results", response_model=List[MatchSummary])
async def get_results(
    on: Optional[date] = Query(None, description="Only matches played this day"),
    store: ClubStore = Depends(get_club_store)
):
    return match_results(store.list_events(), store.list_players(), on_date=on)
