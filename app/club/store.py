"""
Club store - team-scoped access to players, coaches, payments and events

Rows are validated into typed models on the way out (app.club.records).
After every write the changed collection is republished to the
snapshot hub so live views recompute.
"""
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel

from .dependencies import ClubContext
from .ledger import create_payment
from .models import (
    ClubEvent,
    ClubEventCreate,
    Coach,
    CoachInput,
    MatchStatsUpdate,
    MemberKind,
    Payment,
    PaymentType,
    Player,
    PlayerInput,
)
from .realtime import SnapshotHub
from .records import parse_record, parse_records, to_row

T = TypeVar("T", bound=BaseModel)

MEMBER_TABLES = {
    MemberKind.player: "players",
    MemberKind.coach: "coaches",
}

TABLE_MODELS: Dict[str, Type[BaseModel]] = {
    "players": Player,
    "coaches": Coach,
    "payments": Payment,
    "events": ClubEvent,
}


class PersistenceError(Exception):
    """Store call failed (network/write error)"""


class RecordNotFound(LookupError):
    pass


def new_id() -> str:
    return str(uuid4())


class ClubStore:
    """Supabase tables of one team"""

    def __init__(self, client, ctx: ClubContext, hub: Optional[SnapshotHub] = None):
        self.client = client
        self.ctx = ctx
        self.hub = hub

    # =============================================
    # Low level
    # =============================================

    def _execute(self, action: str, query) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"[{self.ctx.team_id}] {action} failed: {e}")
            raise PersistenceError(f"{action} failed: {e}") from e
        return response.data or []

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self._execute(
            f"select {table}",
            self.client.table(table).select("*").eq("team_id", self.ctx.team_id)
        )

    def _list(self, table: str) -> List[Any]:
        return parse_records(TABLE_MODELS[table], self._rows(table))

    def _get(self, table: str, record_id: str) -> Any:
        rows = self._execute(
            f"get {table}/{record_id}",
            self.client.table(table).select("*")
                .eq("team_id", self.ctx.team_id)
                .eq("id", record_id)
        )
        if not rows:
            raise RecordNotFound(f"{table}/{record_id}")
        record = parse_record(TABLE_MODELS[table], rows[0])
        if record is None:
            raise PersistenceError(f"{table}/{record_id} is not a valid record")
        return record

    def _insert(self, table: str, record: BaseModel) -> None:
        row = to_row(record, self.ctx.team_id)
        row["id"] = record.id
        self._execute(f"insert {table}", self.client.table(table).insert(row))

    def _update(self, table: str, record_id: str, values: Dict[str, Any]) -> None:
        rows = self._execute(
            f"update {table}/{record_id}",
            self.client.table(table).update(values)
                .eq("team_id", self.ctx.team_id)
                .eq("id", record_id)
        )
        if not rows:
            raise RecordNotFound(f"{table}/{record_id}")

    def _delete(self, table: str, column: str, value: str) -> None:
        self._execute(
            f"delete {table} where {column}={value}",
            self.client.table(table).delete()
                .eq("team_id", self.ctx.team_id)
                .eq(column, value)
        )

    def publish(self, table: str) -> None:
        """Push a fresh snapshot of a table to live subscribers"""
        if self.hub is None:
            return
        try:
            self.hub.publish(self.ctx.team_id, table, self._list(table))
        except PersistenceError as e:
            # next successful write republishes
            logger.warning(f"Snapshot refresh of {table} skipped: {e}")

    # =============================================
    # Players / coaches
    # =============================================

    def list_players(self) -> List[Player]:
        return self._list("players")

    def list_coaches(self) -> List[Coach]:
        return self._list("coaches")

    def get_player(self, player_id: str) -> Player:
        return self._get("players", player_id)

    def get_coach(self, coach_id: str) -> Coach:
        return self._get("coaches", coach_id)

    def get_member(self, kind: MemberKind, member_id: str):
        return self._get(MEMBER_TABLES[kind], member_id)

    def create_player(self, data: PlayerInput) -> Tuple[Player, Optional[Payment]]:
        """Insert a player and, when billed, its first membership payment"""
        player = Player(id=new_id(), **data.model_dump(exclude={"initial_total_amount", "initial_advance_amount"}))

        payment = None
        if data.initial_total_amount > 0:
            # validated before anything is written
            payment = create_payment(
                self.ctx,
                member_id=player.id,
                member_name=player.name,
                payment_type=PaymentType.membership,
                total_amount=data.initial_total_amount,
                initial_advance=data.initial_advance_amount,
                due_date=player.club_entry_date,
            ).model_copy(update={"id": new_id()})

        self._insert("players", player)
        if payment is not None:
            try:
                self._insert("payments", payment)
            except PersistenceError:
                # keep player + first payment all-or-nothing
                try:
                    self._delete("players", "id", player.id)
                except PersistenceError as e:
                    logger.error(
                        f"[{self.ctx.team_id}] Orphaned player {player.id} left without its first payment: {e}"
                    )
                raise

        logger.info(f"[{self.ctx.team_id}] Player created: {player.name}")
        self.publish("players")
        if payment is not None:
            self.publish("payments")
        return player, payment

    def update_player(self, player_id: str, data: PlayerInput) -> Player:
        player = Player(id=player_id, **data.model_dump(exclude={"initial_total_amount", "initial_advance_amount"}))
        self._update("players", player_id, to_row(player, self.ctx.team_id))
        self.publish("players")
        return player

    def create_coach(self, data: CoachInput) -> Coach:
        coach = Coach(id=new_id(), **data.model_dump())
        self._insert("coaches", coach)
        logger.info(f"[{self.ctx.team_id}] Coach created: {coach.name}")
        self.publish("coaches")
        return coach

    def update_coach(self, coach_id: str, data: CoachInput) -> Coach:
        coach = Coach(id=coach_id, **data.model_dump())
        self._update("coaches", coach_id, to_row(coach, self.ctx.team_id))
        self.publish("coaches")
        return coach

    def delete_member(self, kind: MemberKind, member_id: str) -> None:
        """Delete a member and the payments tied to it"""
        table = MEMBER_TABLES[kind]
        self._get(table, member_id)

        self._delete("payments", "member_id", member_id)
        self._delete(table, "id", member_id)
        logger.info(f"[{self.ctx.team_id}] {kind.value} {member_id} deleted with its payments")

        self.publish(table)
        self.publish("payments")

    # =============================================
    # Payments
    # =============================================

    def list_payments(self) -> List[Payment]:
        return self._list("payments")

    def get_payment(self, payment_id: str) -> Payment:
        return self._get("payments", payment_id)

    def insert_payment(self, payment: Payment) -> Payment:
        if payment.id is None:
            payment = payment.model_copy(update={"id": new_id()})
        self._insert("payments", payment)
        self.publish("payments")
        return payment

    def save_payment(self, payment: Payment) -> Payment:
        """Write the whole record in one update"""
        self._update("payments", payment.id, to_row(payment, self.ctx.team_id))
        self.publish("payments")
        return payment

    def delete_payment(self, payment_id: str) -> None:
        self._get("payments", payment_id)
        self._delete("payments", "id", payment_id)
        self.publish("payments")

    # =============================================
    # Events
    # =============================================

    def list_events(self) -> List[ClubEvent]:
        return self._list("events")

    def get_event(self, event_id: str) -> ClubEvent:
        return self._get("events", event_id)

    def create_event(self, data: ClubEventCreate) -> ClubEvent:
        event = ClubEvent(id=new_id(), **data.model_dump())
        self._insert("events", event)
        self.publish("events")
        return event

    def update_match_stats(self, event_id: str, stats: MatchStatsUpdate) -> ClubEvent:
        event = self.get_event(event_id).model_copy(update={
            "result": stats.result,
            "scorers": stats.scorers,
            "assists": stats.assists,
        })
        self._update("events", event_id, to_row(event, self.ctx.team_id))
        self.publish("events")
        return event

    def delete_event(self, event_id: str) -> None:
        self._get("events", event_id)
        self._delete("events", "id", event_id)
        self.publish("events")
