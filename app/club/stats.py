"""
Match Statistics Aggregator

Folds the scorer/assist sheets of played matches into per-player totals
and ranked leaderboards (podium for the top 3, numbered table after).

Stat entries pointing to an unknown player id are dropped from the
leaderboards and rendered as UNKNOWN_PLAYER_NAME in match summaries.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from .dependencies import ClubContext
from .models import (
    ClubEvent,
    CombinedStat,
    Leaderboard,
    Leaderboards,
    MatchSummary,
    PerformanceStats,
    Player,
    PodiumEntry,
    RankedEntry,
    StatEvent,
)


UNKNOWN_PLAYER_NAME = "Inconnu"

PODIUM_SIZE = 3

MEDALS = {
    1: "gold",
    2: "silver",
    3: "bronze",
}


def played_matches(events: Iterable[ClubEvent], on_date: Optional[date] = None) -> List[ClubEvent]:
    """Matches with a result, newest first"""
    matches = [e for e in events if e.is_played_match]
    if on_date:
        matches = [m for m in matches if m.date == on_date]
    return sorted(matches, key=lambda m: m.date, reverse=True)


def combine_stats(
    ctx: ClubContext,
    events: Iterable[ClubEvent],
    players: Iterable[Player]
) -> List[CombinedStat]:
    """Goals and assists per known player, in roster order"""
    combined: Dict[str, CombinedStat] = {
        p.id: CombinedStat(player_id=p.id, name=p.name) for p in players
    }

    dropped = 0
    for match in played_matches(events):
        for entry in match.scorers:
            stat = combined.get(entry.player_id)
            if stat is None:
                dropped += 1
                continue
            stat.goals += entry.count
        for entry in match.assists:
            stat = combined.get(entry.player_id)
            if stat is None:
                dropped += 1
                continue
            stat.assists += entry.count

    if dropped:
        logger.debug(f"[{ctx.team_id}] {dropped} stat entries reference unknown players")

    return list(combined.values())


def _rank(stats: Sequence[CombinedStat], field: str) -> List[CombinedStat]:
    # sorted() is stable: ties keep roster order
    return sorted(
        (s for s in stats if getattr(s, field) > 0),
        key=lambda s: getattr(s, field),
        reverse=True
    )


def build_leaderboard(
    stats: Sequence[CombinedStat],
    stat: str,
    secondary_stat: str,
    title: str
) -> Leaderboard:
    ranked = _rank(stats, stat)

    podium = [
        PodiumEntry(
            rank=position,
            medal=MEDALS[position],
            player_id=s.player_id,
            name=s.name,
            value=getattr(s, stat),
            secondary_value=getattr(s, secondary_stat),
        )
        for position, s in enumerate(ranked[:PODIUM_SIZE], start=1)
    ]
    table = [
        RankedEntry(
            rank=position,
            player_id=s.player_id,
            name=s.name,
            value=getattr(s, stat),
        )
        for position, s in enumerate(ranked[PODIUM_SIZE:], start=PODIUM_SIZE + 1)
    ]

    return Leaderboard(
        title=title,
        stat=stat,
        secondary_stat=secondary_stat,
        podium=podium,
        table=table,
    )


def build_leaderboards(
    ctx: ClubContext,
    events: Iterable[ClubEvent],
    players: Iterable[Player]
) -> Leaderboards:
    """Top scorers and top assisters"""
    stats = combine_stats(ctx, events, players)
    return Leaderboards(
        scorers=build_leaderboard(stats, "goals", "assists", "Meilleurs Buteurs"),
        assists=build_leaderboard(stats, "assists", "goals", "Meilleurs Passeurs"),
    )


# =============================================
# Match detail
# =============================================

def _format_entries(entries: Iterable[StatEvent], names: Dict[str, str]) -> List[str]:
    formatted = []
    for entry in entries:
        name = names.get(entry.player_id, UNKNOWN_PLAYER_NAME)
        formatted.append(f"{name} ({entry.count})" if entry.count > 1 else name)
    return formatted


def describe_match(event: ClubEvent, players: Iterable[Player]) -> MatchSummary:
    names = {p.id: p.name for p in players}
    return MatchSummary(
        id=event.id,
        title=event.title,
        date=event.date,
        opponent=event.opponent,
        result=event.result or "",
        category=event.category,
        scorers=_format_entries(event.scorers, names),
        assists=_format_entries(event.assists, names),
    )


def match_results(
    events: Iterable[ClubEvent],
    players: Iterable[Player],
    on_date: Optional[date] = None
) -> List[MatchSummary]:
    players = list(players)
    return [describe_match(m, players) for m in played_matches(events, on_date)]


def player_performance(player_id: str, events: Iterable[ClubEvent]) -> PerformanceStats:
    """Played matches where the player is on the stat sheet"""
    perf = PerformanceStats()
    for match in played_matches(events):
        goals = sum(e.count for e in match.scorers if e.player_id == player_id)
        assists = sum(e.count for e in match.assists if e.player_id == player_id)
        listed = any(e.player_id == player_id for e in (*match.scorers, *match.assists))
        if listed:
            perf.matches_played += 1
        perf.goals_scored += goals
        perf.assists_made += assists
    return perf
