"""
Club Manager entry point

  python main.py serve                       # API server
  python main.py refresh --team <team_id>    # Pending -> Overdue sweep
  python main.py leaderboards --team <id>    # print top scorers/assisters
"""
import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from app.club.dependencies import ClubContext
from app.club.ledger import refresh_status
from app.club.stats import build_leaderboards
from app.club.store import ClubStore, PersistenceError
from app.config import get_settings
from database.supabase_client import get_supabase_client


def setup_logging() -> None:
    settings = get_settings()
    Path(settings.log_dir).mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level
    )
    logger.add(
        f"{settings.log_dir}/club_{{time:YYYY-MM-DD}}.log",
        rotation="1 day",
        retention="30 days",
        level="DEBUG"
    )


def _store(team_id: Optional[str]) -> ClubStore:
    settings = get_settings()
    team = team_id or settings.default_team_id
    if not team:
        raise SystemExit("--team is required (or set CLUB_DEFAULT_TEAM_ID)")
    ctx = ClubContext(team_id=team, currency=settings.currency)
    return ClubStore(get_supabase_client(), ctx)


def refresh_statuses(store: ClubStore) -> int:
    """Save payments whose status changed with the date (Pending -> Overdue)"""
    changed = 0
    for payment in store.list_payments():
        refreshed = refresh_status(store.ctx, payment)
        if refreshed is payment:
            continue
        store.save_payment(refreshed)
        changed += 1
        logger.info(f"{payment.member_name}: {payment.status.value} -> {refreshed.status.value}")
    logger.info(f"Status refresh done: {changed} payment(s) updated")
    return changed


def print_leaderboards(store: ClubStore) -> None:
    boards = build_leaderboards(store.ctx, store.list_events(), store.list_players())
    for board in (boards.scorers, boards.assists):
        print(f"\n=== {board.title} ===")
        if not board.has_data:
            print("  Aucune donnée")
            continue
        for entry in board.podium:
            print(f"  {entry.rank}. {entry.name}: {entry.value} ({board.secondary_stat}: {entry.secondary_value})")
        for entry in board.table:
            print(f"  {entry.rank}. {entry.name}: {entry.value}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Club Manager")
    parser.add_argument(
        "mode",
        choices=["serve", "refresh", "leaderboards"],
        nargs="?",
        default="serve",
        help="run mode"
    )
    parser.add_argument("--team", help="team id")
    parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()
    setup_logging()

    if args.mode == "serve":
        import uvicorn
        uvicorn.run("app.server:app", host="0.0.0.0", port=args.port, log_level="info")
        return

    try:
        store = _store(args.team)
        if args.mode == "refresh":
            refresh_statuses(store)
        elif args.mode == "leaderboards":
            print_leaderboards(store)
    except PersistenceError as e:
        logger.error(f"{args.mode} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
