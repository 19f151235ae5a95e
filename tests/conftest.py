"""
Pytest configuration and fixtures for Club Manager tests
"""

import pytest
import sys
from collections import defaultdict
from datetime import date, datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.club.dependencies import ClubContext
from app.club.models import ClubEvent, EventType, Player, StatEvent
from app.club.realtime import SnapshotHub
from app.club.store import ClubStore


NOW = datetime(2025, 6, 15, 10, 30)
TEAM_ID = "team-1"


# =============================================================================
# In-memory Supabase stand-in (table/select/insert/update/delete/eq/execute)
# =============================================================================

class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.filters = []

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, row):
        self.op = "insert"
        self.payload = dict(row)
        return self

    def update(self, values):
        self.op = "update"
        self.payload = dict(values)
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table_name, self.op))
        if (self.table_name, self.op) in self.db.failures:
            raise RuntimeError("network unreachable")

        rows = self.db.tables[self.table_name]
        if self.op == "select":
            return FakeResponse([dict(r) for r in rows if self._matches(r)])
        if self.op == "insert":
            rows.append(dict(self.payload))
            return FakeResponse([dict(self.payload)])
        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)
        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)
        raise AssertionError(f"unexpected op {self.op}")


class FakeSupabase:
    def __init__(self):
        self.tables = defaultdict(list)
        self.failures = set()
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op):
        self.failures.add((table, op))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def ctx():
    """Club context frozen at 2025-06-15 10:30"""
    return ClubContext(team_id=TEAM_ID, user_id="user-1", clock=lambda: NOW)


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def hub():
    return SnapshotHub()


@pytest.fixture
def store(fake_db, ctx, hub):
    return ClubStore(fake_db, ctx, hub=hub)


def build_player(player_id, first, last, **kwargs):
    return Player(
        id=player_id,
        first_name=first,
        last_name=last,
        club_entry_date=kwargs.pop("club_entry_date", date(2024, 9, 1)),
        **kwargs
    )


def build_match(event_id, match_date, result="2-1", scorers=(), assists=(), **kwargs):
    return ClubEvent(
        id=event_id,
        title=kwargs.pop("title", f"Match {event_id}"),
        type=EventType.match,
        date=match_date,
        result=result,
        scorers=[StatEvent(player_id=p, count=c) for p, c in scorers],
        assists=[StatEvent(player_id=p, count=c) for p, c in assists],
        **kwargs
    )


@pytest.fixture
def players():
    return [
        build_player("p1", "Yassine", "Amrani"),
        build_player("p2", "Karim", "Benali"),
        build_player("p3", "Élodie", "Martin"),
        build_player("p4", "Omar", "Saidi"),
        build_player("p5", "Nabil", "Tazi"),
    ]


@pytest.fixture
def matches():
    return [
        build_match("e1", date(2025, 5, 3), "3-1",
                   scorers=[("p1", 2), ("p2", 1)],
                   assists=[("p3", 2), ("p1", 1)]),
        build_match("e2", date(2025, 5, 10), "1-1",
                   scorers=[("p1", 1)],
                   assists=[("p2", 1)]),
        build_match("e3", date(2025, 5, 17), "4-0",
                   scorers=[("p4", 1), ("p5", 1), ("p2", 1), ("ghost", 1)],
                   assists=[("p3", 1)]),
    ]


@pytest.fixture
def make_player():
    return build_player


@pytest.fixture
def make_match():
    return build_match
