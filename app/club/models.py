"""
Club Management Models

Pydantic models for members, payments, events and derived statistics
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, List
from enum import Enum
from pydantic import BaseModel, Field, field_validator


CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize any numeric input to cents"""
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    return amount.quantize(CENT)


# =============================================
# Enums
# =============================================

class Gender(str, Enum):
    male = "Homme"
    female = "Femme"


class PlayerCategory(str, Enum):
    """Age categories"""
    u7 = "U7"
    u9 = "U9"
    u11 = "U11"
    u13 = "U13"
    u14 = "U14"
    u15 = "U15"
    u16 = "U16"
    u17 = "U17"
    u18 = "U18"
    u19 = "U19"
    u20 = "U20"
    u23 = "U23"
    senior = "Senior"
    veteran = "Vétéran"


class PlayerStatus(str, Enum):
    """Player fitness/availability"""
    fit = "En forme"
    injured = "Blessé"
    suspended = "Suspendu"
    unavailable = "Indisponible"


class CoachStatus(str, Enum):
    active = "Actif"
    inactive = "Inactif"


class MemberKind(str, Enum):
    player = "player"
    coach = "coach"


class PaymentType(str, Enum):
    """membership for players, salary for coaches"""
    membership = "membership"
    salary = "salary"


class PaymentStatus(str, Enum):
    paid = "Paid"
    pending = "Pending"
    overdue = "Overdue"


class EventType(str, Enum):
    match = "Match"
    training = "Entraînement"
    meeting = "Réunion"
    event = "Événement"
    other = "Autre"


# =============================================
# Members
# =============================================

class Player(BaseModel):
    """Player record"""
    id: str
    first_name: str
    last_name: str
    gender: Gender = Gender.male
    date_of_birth: Optional[date] = None
    category: PlayerCategory = PlayerCategory.senior
    photo_url: Optional[str] = None
    address: str = ""
    city: str = ""
    country: str = ""
    phone: str = ""
    guardian_name: str = ""
    guardian_phone: str = ""
    position: str = ""
    player_number: int = 0
    email: str = ""
    status: PlayerStatus = PlayerStatus.fit
    club_entry_date: date
    club_exit_date: Optional[date] = None
    coach_id: Optional[str] = None
    medical_certificate_url: Optional[str] = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Coach(BaseModel):
    """Coach record"""
    id: str
    first_name: str
    last_name: str
    email: str = ""
    phone: str = ""
    specialty: str = ""
    photo_url: Optional[str] = None
    gender: Gender = Gender.male
    country: str = ""
    city: str = ""
    age: Optional[int] = None
    club_entry_date: date
    club_exit_date: Optional[date] = None
    status: CoachStatus = CoachStatus.active

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PlayerInput(BaseModel):
    """Player create/update payload"""
    first_name: str = Field(..., min_length=1, max_length=60)
    last_name: str = Field(..., min_length=1, max_length=60)
    gender: Gender = Gender.male
    date_of_birth: Optional[date] = None
    category: PlayerCategory = PlayerCategory.senior
    photo_url: Optional[str] = None
    address: str = ""
    city: str = ""
    country: str = ""
    phone: str = ""
    guardian_name: str = ""
    guardian_phone: str = ""
    position: str = ""
    player_number: int = Field(default=0, ge=0)
    email: str = ""
    status: PlayerStatus = PlayerStatus.fit
    club_entry_date: date
    club_exit_date: Optional[date] = None
    coach_id: Optional[str] = None
    medical_certificate_url: Optional[str] = None

    # first billing cycle, only used on creation
    initial_total_amount: Decimal = Field(default=Decimal("0"), ge=0)
    initial_advance_amount: Decimal = Field(default=Decimal("0"), ge=0)


class CoachInput(BaseModel):
    """Coach create/update payload"""
    first_name: str = Field(..., min_length=1, max_length=60)
    last_name: str = Field(..., min_length=1, max_length=60)
    email: str = ""
    phone: str = ""
    specialty: str = ""
    photo_url: Optional[str] = None
    gender: Gender = Gender.male
    country: str = ""
    city: str = ""
    age: Optional[int] = Field(default=None, ge=0, le=120)
    club_entry_date: date
    club_exit_date: Optional[date] = None
    status: CoachStatus = CoachStatus.active


# =============================================
# Payments
# =============================================

class Transaction(BaseModel):
    """One partial payment"""
    date: datetime
    amount: Decimal = Field(..., gt=0)

    @field_validator("amount", mode="before")
    @classmethod
    def quantize_money(cls, v):
        return to_money(v)


class Payment(BaseModel):
    """One billing cycle for one member"""
    id: Optional[str] = None
    member_id: str
    member_name: str
    payment_type: PaymentType
    total_amount: Decimal
    advance: Decimal
    remaining: Decimal
    date: date
    status: PaymentStatus
    history: List[Transaction] = Field(default_factory=list)

    @field_validator("total_amount", "advance", "remaining", mode="before")
    @classmethod
    def quantize_money(cls, v):
        return to_money(v)

    @field_validator("date", mode="before")
    @classmethod
    def date_only(cls, v):
        # stored timestamps keep only their calendar day
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v


class PaymentCreate(BaseModel):
    """New billing entry"""
    member_kind: MemberKind = MemberKind.player
    member_id: str
    total_amount: Optional[Decimal] = Field(default=None, gt=0)
    advance: Decimal = Field(default=Decimal("0"), ge=0)
    date: date


class PartialPaymentRequest(BaseModel):
    amount: Decimal


# =============================================
# Events
# =============================================

class StatEvent(BaseModel):
    """Goals or assists of one player in one match"""
    player_id: str
    count: int = Field(default=1, ge=1)


class ClubEvent(BaseModel):
    """Scheduled match/training/meeting"""
    id: Optional[str] = None
    title: str
    type: EventType
    date: date
    time: str = ""
    location: str = ""
    category: Optional[str] = None
    description: Optional[str] = None
    opponent: Optional[str] = None
    result: Optional[str] = None
    scorers: List[StatEvent] = Field(default_factory=list)
    assists: List[StatEvent] = Field(default_factory=list)

    @field_validator("date", mode="before")
    @classmethod
    def date_only(cls, v):
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @property
    def is_played_match(self) -> bool:
        return self.type == EventType.match and bool((self.result or "").strip())


class ClubEventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)
    type: EventType = EventType.training
    date: date
    time: str = ""
    location: str = ""
    category: Optional[str] = None
    description: Optional[str] = None
    opponent: Optional[str] = None


class MatchStatsUpdate(BaseModel):
    """Result and stat sheet of a match"""
    result: str = Field(..., min_length=1, max_length=20)
    scorers: List[StatEvent] = Field(default_factory=list)
    assists: List[StatEvent] = Field(default_factory=list)


# =============================================
# Derived statistics
# =============================================

class CombinedStat(BaseModel):
    """Per-player goals and assists across played matches"""
    player_id: str
    name: str
    goals: int = 0
    assists: int = 0


class PodiumEntry(BaseModel):
    rank: int
    medal: str
    player_id: str
    name: str
    value: int
    secondary_value: int


class RankedEntry(BaseModel):
    rank: int
    player_id: str
    name: str
    value: int


class Leaderboard(BaseModel):
    """Podium (top 3) + numbered table (rank 4+)"""
    title: str
    stat: str
    secondary_stat: str
    podium: List[PodiumEntry] = Field(default_factory=list)
    table: List[RankedEntry] = Field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.podium)


class Leaderboards(BaseModel):
    scorers: Leaderboard
    assists: Leaderboard


class MatchSummary(BaseModel):
    """View-ready played match"""
    id: Optional[str] = None
    title: str
    date: date
    opponent: Optional[str] = None
    result: str
    category: Optional[str] = None
    scorers: List[str] = Field(default_factory=list)
    assists: List[str] = Field(default_factory=list)


class PerformanceStats(BaseModel):
    matches_played: int = 0
    goals_scored: int = 0
    assists_made: int = 0


# =============================================
# Dashboard
# =============================================

class MemberBrief(BaseModel):
    id: str
    name: str
    detail: Optional[str] = None


class MemberGroup(BaseModel):
    count: int = 0
    members: List[MemberBrief] = Field(default_factory=list)


class DashboardAlert(BaseModel):
    alert_type: str  # overdue_payment, no_upcoming_event
    message: str
    severity: str  # info, warning, error
    related_id: Optional[str] = None


class ClubDashboard(BaseModel):
    """Club dashboard"""
    team_id: str
    month: str

    total_players: int
    injured_players: MemberGroup
    suspended_players: MemberGroup
    unavailable_players: MemberGroup

    total_coaches: int
    active_coaches: MemberGroup
    inactive_coaches: MemberGroup

    upcoming_events: List[ClubEvent]
    paid_memberships: int

    pending_player_payments: List[Payment]
    pending_coach_payments: List[Payment]

    alerts: List[DashboardAlert]
