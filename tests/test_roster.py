"""
Roster helper tests
"""
import pytest
from datetime import date

from app.club.models import CoachStatus, Coach, PlayerStatus
from app.club.roster import (
    active_players,
    coaches_by_status,
    find_duplicate_player,
    normalize_text,
    players_by_status,
)


class TestNormalizeText:

    @pytest.mark.parametrize("raw,expected", [
        ("Élodie  Martin", "elodie martin"),
        ("  KARIM\tBenali ", "karim benali"),
        ("Ñúñez", "nunez"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_text(raw) == expected


class TestDuplicates:

    def test_accent_and_case_insensitive(self, players):
        duplicate = find_duplicate_player(players, "elodie", "MARTIN")
        assert duplicate is not None and duplicate.id == "p3"

    def test_no_duplicate(self, players):
        assert find_duplicate_player(players, "Nouveau", "Joueur") is None

    def test_excluded_id_ignored(self, players):
        # renaming a player to its own name is not a duplicate
        assert find_duplicate_player(players, "Élodie", "Martin", exclude_id="p3") is None


class TestActivePlayers:

    def test_exit_date_against_month_start(self, make_player):
        today = date(2025, 6, 15)
        roster = [
            make_player("a", "A", "Present"),
            make_player("b", "B", "LeftLastMonth", club_exit_date=date(2025, 5, 20)),
            make_player("c", "C", "LeftOnFirst", club_exit_date=date(2025, 6, 1)),
            make_player("d", "D", "LeavingThisMonth", club_exit_date=date(2025, 6, 10)),
        ]
        assert [p.id for p in active_players(roster, today)] == ["a", "d"]

    def test_by_status(self, make_player):
        roster = [
            make_player("a", "A", "A", status=PlayerStatus.injured),
            make_player("b", "B", "B"),
        ]
        assert [p.id for p in players_by_status(roster, PlayerStatus.injured)] == ["a"]

    def test_coaches_by_status(self):
        coaches = [
            Coach(id="c1", first_name="Hamid", last_name="Alaoui", club_entry_date=date(2023, 1, 1)),
            Coach(id="c2", first_name="Sara", last_name="Idrissi", club_entry_date=date(2023, 1, 1),
                  status=CoachStatus.inactive),
        ]
        assert [c.id for c in coaches_by_status(coaches, CoachStatus.inactive)] == ["c2"]
