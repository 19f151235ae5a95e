"""
Roster helpers - names, duplicates, active members
"""
import re
import unicodedata
from datetime import date
from typing import Iterable, List, Optional, Union

from .models import Coach, CoachStatus, Player, PlayerStatus


def normalize_text(value: Optional[str]) -> str:
    """Lowercase, strip accents and collapse whitespace ("Élodie  K" -> "elodie k")"""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"\s+", " ", stripped).strip().lower()


def full_name(member: Union[Player, Coach]) -> str:
    return f"{member.first_name} {member.last_name}"


def find_duplicate_player(
    players: Iterable[Player],
    first_name: str,
    last_name: str,
    exclude_id: Optional[str] = None
) -> Optional[Player]:
    """Existing player with the same normalised full name"""
    wanted = normalize_text(f"{first_name} {last_name}")
    for player in players:
        if exclude_id and player.id == exclude_id:
            continue
        if normalize_text(full_name(player)) == wanted:
            return player
    return None


def active_players(players: Iterable[Player], today: date) -> List[Player]:
    """Players still at the club this month (no exit, or exit after the 1st)"""
    month_start = today.replace(day=1)
    return [
        p for p in players
        if p.club_exit_date is None or p.club_exit_date > month_start
    ]


def players_by_status(players: Iterable[Player], status: PlayerStatus) -> List[Player]:
    return [p for p in players if p.status == status]


def coaches_by_status(coaches: Iterable[Coach], status: CoachStatus) -> List[Coach]:
    return [c for c in coaches if c.status == status]
