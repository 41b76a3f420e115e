from datetime import datetime, timezone

import pytest

from swissdoubles.models import Match, Player
from swissdoubles.pairing.standings import PlayerStats, Standing

FIXED_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_time():
    return FIXED_TIME


@pytest.fixture
def make_players():
    def _make(count, prefix="P"):
        return [
            Player(id=f"{prefix}{i:02d}", name=f"Player {i:02d}")
            for i in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def make_match():
    counter = {"n": 0}

    def _make(round_number, team1, team2, score1=None, score2=None, **kwargs):
        counter["n"] += 1
        return Match(
            id=f"M{counter['n']:03d}",
            round_number=round_number,
            team1=tuple(team1),
            team2=tuple(team2),
            score1=score1,
            score2=score2,
            completed=score1 is not None,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_bye():
    counter = {"n": 0}

    def _make(round_number, player_id, score=4, twenties=0):
        counter["n"] += 1
        return Match(
            id=f"B{counter['n']:03d}",
            round_number=round_number,
            team1=(player_id,),
            score1=score,
            score2=score,
            twenties1=twenties,
            completed=True,
            is_bye=True,
        )

    return _make


@pytest.fixture
def make_standings():
    """Build ranked Standing rows from (wins, points_for, points_against, byes)."""

    def _make(records):
        standings = []
        for idx, (wins, points_for, points_against, byes) in enumerate(records):
            player = Player(id=f"S{idx + 1:02d}", name=f"Seed {idx + 1:02d}")
            stats = PlayerStats(
                wins=wins,
                points_for=points_for,
                points_against=points_against,
                bye_count=byes,
            )
            standings.append(Standing(rank=idx + 1, player=player, stats=stats))
        return standings

    return _make
