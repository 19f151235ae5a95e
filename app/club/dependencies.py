"""
Club Management Dependencies

Explicit club context (team scoping + clock) passed to the ledger,
the aggregator and the store instead of ambient global state
"""

from datetime import date, datetime
from typing import Callable, Optional
from fastapi import Depends, HTTPException, status, Request

from app.config import ClubSettings, get_settings


class ClubContext:
    """Team/user context of one request or one live view"""

    def __init__(
        self,
        team_id: str,
        user_id: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
        currency: str = "DH"
    ):
        self.team_id = team_id
        self.user_id = user_id
        self.currency = currency
        self._clock = clock or datetime.now

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    def __repr__(self) -> str:
        return f"ClubContext(team_id={self.team_id!r}, user_id={self.user_id!r})"


def get_club_context(
    request: Request,
    settings: ClubSettings = Depends(get_settings)
) -> ClubContext:
    """
    Build the club context of the current request

    The team comes from the X-Team-Id header. In test mode the configured
    default team is used when the header is missing.
    """
    team_id = request.headers.get("X-Team-Id", "").strip()
    user_id = request.headers.get("X-User-Id") or None

    if not team_id and settings.test_mode:
        team_id = settings.default_team_id or ""

    if not team_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Équipe non identifiée"
        )

    return ClubContext(team_id=team_id, user_id=user_id, currency=settings.currency)
