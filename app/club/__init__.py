"""
Club Management Module

Sports club management: rosters, payment ledger, schedule, match statistics
- Payment Ledger (ledger.py)
- Match Statistics Aggregator (stats.py)
- Supabase store + live snapshots (store.py, realtime.py)
"""

from .router import router as club_router
from .models import (
    PaymentStatus,
    PaymentType,
    EventType,
    MemberKind,
)
from .dependencies import ClubContext
from .ledger import LedgerError
from .store import ClubStore, PersistenceError, RecordNotFound

__all__ = [
    "club_router",
    "PaymentStatus",
    "PaymentType",
    "EventType",
    "MemberKind",
    "ClubContext",
    "LedgerError",
    "ClubStore",
    "PersistenceError",
    "RecordNotFound",
]
